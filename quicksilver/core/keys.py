"""Key event model and canonical key-token formatting.

A key token is the string form of one keystroke as it appears in chord
strings: modifier prefixes in a fixed order (``C-``, ``S-``, ``A-``, ``M-``)
followed by the lowercased key name. The leader key is remapped to
``<leader>`` before the prefixes are applied, so ``"<leader> t d"`` reads the
same regardless of which physical key is configured as leader.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

LEADER_TOKEN = "<leader>"
DEFAULT_LEADER_KEY = " "

MODIFIER_KEYS = frozenset({"Control", "Shift", "Alt", "Meta"})
MODIFIER_PREFIXES = ("C-", "S-", "A-", "M-")


@dataclass(frozen=True)
class KeyEvent:
    """A raw keyboard event as delivered by the host."""

    key: str  # Host key name, e.g. "g", "G", "Escape", " "
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False
    target: Any = None  # Host element the event was dispatched to, if known

    @property
    def has_command_modifier(self) -> bool:
        """True when ctrl, alt or meta is held (shift alone does not count)."""
        return self.ctrl or self.alt or self.meta


def is_modifier_key(key: str) -> bool:
    return key in MODIFIER_KEYS


def is_escape(event: KeyEvent) -> bool:
    return event.key == "Escape"


def key_token(event: KeyEvent, leader_key: str = DEFAULT_LEADER_KEY) -> str:
    """Build the canonical token for a key event.

    Args:
        event: The key event to format.
        leader_key: Host key name treated as leader.

    Returns:
        Token such as ``"g"``, ``"S-g"``, ``"C-A-x"`` or ``"<leader>"``.
    """
    name = LEADER_TOKEN if event.key == leader_key else event.key.lower()
    prefix = ""
    if event.ctrl:
        prefix += "C-"
    if event.shift:
        prefix += "S-"
    if event.alt:
        prefix += "A-"
    if event.meta:
        prefix += "M-"
    return prefix + name


def strip_modifiers(token: str) -> str:
    """Remove every modifier prefix from a token (``"S-h"`` -> ``"h"``)."""
    # A bare "-" key or "S--" must keep its final dash.
    while len(token) > 2 and token[:2] in MODIFIER_PREFIXES:
        token = token[2:]
    return token


def chord_tokens(chord: str) -> list[str]:
    """Split a chord string into its tokens."""
    return chord.split(" ")
