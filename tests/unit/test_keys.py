"""Tests for key tokens."""

from __future__ import annotations

import pytest

from quicksilver.core.keys import (
    KeyEvent,
    chord_tokens,
    is_escape,
    is_modifier_key,
    key_token,
    strip_modifiers,
)


class TestKeyToken:
    """Tests for canonical token formatting."""

    def test_plain_key(self):
        assert key_token(KeyEvent("g")) == "g"

    def test_shift_lowercases_name(self):
        assert key_token(KeyEvent("G", shift=True)) == "S-g"

    def test_modifier_order(self):
        event = KeyEvent("X", ctrl=True, shift=True, alt=True, meta=True)
        assert key_token(event) == "C-S-A-M-x"

    def test_alt(self):
        assert key_token(KeyEvent("p", alt=True)) == "A-p"

    def test_named_key(self):
        assert key_token(KeyEvent("Escape")) == "escape"

    def test_default_leader_is_space(self):
        assert key_token(KeyEvent(" ")) == "<leader>"
        assert key_token(KeyEvent(" ", ctrl=True)) == "C-<leader>"

    def test_custom_leader(self):
        assert key_token(KeyEvent(","), leader_key=",") == "<leader>"
        assert key_token(KeyEvent(" "), leader_key=",") == " "


class TestStripModifiers:
    """Tests for removing modifier prefixes."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("S-h", "h"),
            ("C-S-x", "x"),
            ("h", "h"),
            ("-", "-"),
            ("S--", "-"),
            ("S-<leader>", "<leader>"),
        ],
    )
    def test_strip(self, token, expected):
        assert strip_modifiers(token) == expected


class TestKeyHelpers:
    """Tests for the small key predicates."""

    def test_modifier_keys(self):
        for name in ("Control", "Shift", "Alt", "Meta"):
            assert is_modifier_key(name)
        assert not is_modifier_key("s")

    def test_escape(self):
        assert is_escape(KeyEvent("Escape"))
        assert not is_escape(KeyEvent("e"))

    def test_shift_is_not_a_command_modifier(self):
        assert not KeyEvent("G", shift=True).has_command_modifier
        assert KeyEvent("g", ctrl=True).has_command_modifier
        assert KeyEvent("g", meta=True).has_command_modifier

    def test_chord_tokens(self):
        assert chord_tokens("<leader> t d") == ["<leader>", "t", "d"]
        assert chord_tokens("j") == ["j"]
