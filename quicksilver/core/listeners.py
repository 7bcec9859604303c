"""Transient key listeners with first-refusal semantics.

Popups, prompts and one-shot captures register a listener to see key events
before the mode machine does. The most recently registered listener runs
first; the first one to return True ends dispatch for that event.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

KeyListener = Callable[[Any], bool]
Unregister = Callable[[], None]


@dataclass(eq=False)
class ListenerEntry:
    """One registration; identity distinguishes repeated registrations."""

    listener: KeyListener


class ListenerStack:
    """Separate LIFO listener lists for the keydown and keyup phases."""

    def __init__(self) -> None:
        self._keydown: list[ListenerEntry] = []
        self._keyup: list[ListenerEntry] = []

    def register_keydown(self, listener: KeyListener) -> Unregister:
        return self._register(self._keydown, listener)

    def register_keyup(self, listener: KeyListener) -> Unregister:
        return self._register(self._keyup, listener)

    def dispatch_keydown(self, event: Any) -> bool:
        return self._dispatch(self._keydown, event)

    def dispatch_keyup(self, event: Any) -> bool:
        return self._dispatch(self._keyup, event)

    def __len__(self) -> int:
        return len(self._keydown) + len(self._keyup)

    @staticmethod
    def _register(entries: list[ListenerEntry], listener: KeyListener) -> Unregister:
        entry = ListenerEntry(listener)
        entries.append(entry)

        def unregister() -> None:
            if entry in entries:
                entries.remove(entry)

        return unregister

    @staticmethod
    def _dispatch(entries: list[ListenerEntry], event: Any) -> bool:
        # Snapshot: listeners may unregister themselves or others while running.
        for entry in reversed(list(entries)):
            if entry not in entries:
                continue
            if entry.listener(event):
                return True
        return False
