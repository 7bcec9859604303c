"""Recording collaborators shared by the tests."""

from __future__ import annotations

from typing import Any

from quicksilver.core.keys import KeyEvent
from quicksilver.engine.overlay import HintOverlay
from quicksilver.host.memory import Element, MemoryDocument
from quicksilver.host.protocols import Rect
from quicksilver.messaging import TabMessenger


class RecordingMessenger(TabMessenger):
    """Messenger that records every message; optionally fails."""

    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, dict]] = []
        self.fail = fail

    def send(self, message_type: str, payload: dict[str, Any]) -> Any:
        if self.fail:
            raise RuntimeError("channel closed")
        self.sent.append((message_type, payload))
        return None


class RecordingOverlay(HintOverlay):
    """Overlay that remembers what it was asked to draw."""

    def __init__(self):
        self.hints: dict[str, Any] = {}
        self.pruned: list[tuple[list[str], str]] = []
        self.cleared = 0
        self.pending: list[tuple[str, str]] = []
        self.help_tables: list[Any] = []
        self.link_lists: list[list[Any]] = []
        self.popups_hidden = 0

    def show_hints(self, hints):
        self.hints = dict(hints)

    def prune_hints(self, dropped, typed):
        self.pruned.append((list(dropped), typed))
        for label in dropped:
            self.hints.pop(label, None)

    def clear_hints(self):
        self.hints = {}
        self.cleared += 1

    def show_pending_chords(self, chords):
        self.pending = list(chords)

    def toggle_help(self, table):
        self.help_tables.append(table)

    def toggle_link_list(self, links):
        self.link_lists.append(list(links))

    def hide_popups(self):
        self.popups_hidden += 1


class MockSettingsStore:
    """Mock settings store for testing."""

    def __init__(self, settings: dict | None = None):
        self.settings = settings or {}
        self.watchers: dict[str, list] = {}

    def load_all(self) -> dict:
        return self.settings

    def save_all(self, settings: dict) -> None:
        self.settings = settings

    def get(self, key: str, default=None):
        return self.settings.get(key, default)

    def set(self, key: str, value) -> None:
        self.settings[key] = value
        for callback in self.watchers.get(key, []):
            callback(value)

    def watch(self, key: str, callback):
        self.watchers.setdefault(key, []).append(callback)
        return lambda: self.watchers[key].remove(callback)


def key(name: str, **modifiers) -> KeyEvent:
    """Build a KeyEvent; ``key("G", shift=True)``."""
    return KeyEvent(key=name, **modifiers)


def add_element(parent: Element, tag: str, y: float, height: float = 20, **attrs) -> Element:
    """Append a 100px wide element at page offset ``y``."""
    element = Element(box=Rect(10, y, 100, height), tag=tag, attrs=attrs)
    parent.append(element)
    return element


def build_page(document: MemoryDocument, links: int = 3) -> list[Element]:
    """Body with ``links`` anchors stacked 30px apart, starting at y=10."""
    return [
        add_element(document.body, "a", 10 + 30 * i, href=f"https://example.com/{i}")
        for i in range(links)
    ]
