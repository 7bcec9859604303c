"""Tests for converting Textual key events."""

from __future__ import annotations

import pytest
from textual.events import Key

from quicksilver.core.keys import key_token
from quicksilver.textual_host.keys import key_event_from_textual


class TestKeyEventFromTextual:
    """Test key_event_from_textual."""

    @pytest.mark.parametrize(
        "name,character,token",
        [
            ("a", "a", "a"),
            ("G", "G", "S-g"),
            ("question_mark", "?", "S-?"),
            ("left_parenthesis", "(", "S-("),
            ("semicolon", ";", ";"),
            ("comma", ",", ","),
            ("ctrl+a", "\x01", "C-a"),
            ("escape", "\x1b", "escape"),
            ("space", " ", "<leader>"),
            ("up", None, "arrowup"),
            ("alt+p", None, "A-p"),
        ],
    )
    def test_tokens(self, name, character, token):
        assert key_token(key_event_from_textual(Key(name, character))) == token

    def test_escape_key_name(self):
        event = key_event_from_textual(Key("escape", "\x1b"))
        assert event.key == "Escape"
        assert not event.has_command_modifier

    def test_target_is_kept(self):
        target = object()
        assert key_event_from_textual(Key("j", "j"), target=target).target is target
