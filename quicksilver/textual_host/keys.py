"""Textual key events to engine key events."""

from __future__ import annotations

from typing import Any

from textual.events import Key

from ..core.keys import KeyEvent

# Printable characters that need shift on a US layout; browsers report them
# with the shift flag set, so chords are written "S-?" and "S-(".
SHIFTED_SYMBOLS = frozenset('~!@#$%^&*()_+{}|:"<>?')

# Textual key names for keys that produce no printable character
SPECIAL_KEYS = {
    "escape": "Escape",
    "enter": "Enter",
    "tab": "Tab",
    "backspace": "Backspace",
    "delete": "Delete",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    "space": " ",
}


def key_event_from_textual(event: Key, target: Any = None) -> KeyEvent:
    """Convert a Textual Key event.

    Textual spells modifiers into the key name (``"ctrl+a"``) and reports
    the produced text separately; the printable character wins when there
    is one, so ``"G"`` becomes key ``"G"`` with shift set.
    """
    *modifiers, name = event.key.split("+")
    ctrl = "ctrl" in modifiers
    shift = "shift" in modifiers
    alt = "alt" in modifiers
    meta = "super" in modifiers or "meta" in modifiers

    char = event.character
    if char and len(char) == 1 and char.isprintable() and not ctrl:
        if char.isalpha() and char.isupper():
            shift = True
        elif char in SHIFTED_SYMBOLS:
            shift = True
        key = char
    else:
        key = SPECIAL_KEYS.get(name, name)

    return KeyEvent(key=key, ctrl=ctrl, shift=shift, alt=alt, meta=meta, target=target)
