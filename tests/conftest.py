"""Pytest fixtures for quicksilver tests."""

from __future__ import annotations

import pytest

from quicksilver.config import Settings
from quicksilver.engine.machine import ModeStateMachine
from quicksilver.host.memory import MemoryDocument, MemorySelection
from tests.fakes import RecordingMessenger, RecordingOverlay


@pytest.fixture
def document() -> MemoryDocument:
    return MemoryDocument(viewport_height=400)


@pytest.fixture
def selection(document: MemoryDocument) -> MemorySelection:
    return MemorySelection(document)


@pytest.fixture
def messenger() -> RecordingMessenger:
    return RecordingMessenger()


@pytest.fixture
def overlay() -> RecordingOverlay:
    return RecordingOverlay()


@pytest.fixture
def settings() -> Settings:
    # Memory documents only understand simple selectors
    return Settings(
        hint_selector="a,button,input,textarea",
        input_selector="input,textarea,select,[contenteditable]",
        link_selector="a",
    )


@pytest.fixture
def machine(document, selection, messenger, overlay, settings) -> ModeStateMachine:
    return ModeStateMachine(
        document,
        selection,
        messenger=messenger,
        overlay=overlay,
        settings=settings,
    )
