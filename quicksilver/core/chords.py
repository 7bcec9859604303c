"""Chord resolution against per-mode action tables.

A chord is one or more key tokens typed in sequence, written space separated
(``"g g"``, ``"<leader> t d"``). The resolver accumulates tokens into a buffer
and narrows the table's chords to those the buffer is a prefix of.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from .keys import chord_tokens, strip_modifiers

ActionFunc = Callable[[Any], None]


@dataclass(frozen=True)
class Action:
    """A bound command: a stable name, a help description and its function."""

    name: str
    description: str
    fn: ActionFunc = field(compare=False)

    def __call__(self, event: Any = None) -> None:
        self.fn(event)


class ActionTable(Mapping[str, Action]):
    """Immutable mapping of chord string -> Action for one mode.

    ``relevant_tokens`` holds every token appearing in any chord. Tables for
    modes other than Normal are built with ``strip=True`` so the gate compares
    bare key names (``"S-h"`` and ``"h"`` both admit ``h``).
    """

    def __init__(self, bindings: Mapping[str, Action], strip: bool = False) -> None:
        for chord in bindings:
            if not chord or chord != chord.strip() or "  " in chord:
                raise ValueError(f"Malformed chord: {chord!r}")
        self._bindings = dict(bindings)
        self.strip = strip
        tokens = {token for chord in self._bindings for token in chord_tokens(chord)}
        if strip:
            tokens = {strip_modifiers(token) for token in tokens}
        self.relevant_tokens = frozenset(tokens)

    def __getitem__(self, chord: str) -> Action:
        return self._bindings[chord]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def is_relevant(self, token: str) -> bool:
        """Whether a keystroke is worth considering in this mode at all."""
        if self.strip:
            token = strip_modifiers(token)
        return token in self.relevant_tokens

    def chords_for(self, action_name: str) -> list[str]:
        """All chords bound to the named action, in table order."""
        return [chord for chord, action in self._bindings.items() if action.name == action_name]


class ChordOutcome(Enum):
    PENDING = auto()
    RESOLVED = auto()
    NO_MATCH = auto()


@dataclass(frozen=True)
class ChordResult:
    outcome: ChordOutcome
    action: Action | None = None
    chord: str = ""


class ChordResolver:
    """Feeds key tokens through an ActionTable.

    Outcomes:
        PENDING   - the buffer is a proper prefix of more than one chord, or of
                    a single longer chord; more input is expected.
        RESOLVED  - exactly one chord remains and it equals the buffer.
        NO_MATCH  - nothing starts with the buffer; the chord is discarded.

    The buffer is cleared on RESOLVED and NO_MATCH.

    Prefixes are whole tokens, not raw characters: a buffer of "l" is a
    prefix of "l l" but not of "left". For single-character tokens, which is
    all the default tables use, this is the same as a plain string prefix.
    """

    def __init__(self, table: ActionTable) -> None:
        self._table = table
        self._buffer = ""

    @property
    def table(self) -> ActionTable:
        return self._table

    @table.setter
    def table(self, table: ActionTable) -> None:
        self._table = table
        self._buffer = ""

    @property
    def buffer(self) -> str:
        return self._buffer

    def reset(self) -> None:
        self._buffer = ""

    def _matching(self, buffer: str) -> list[str]:
        # Compare on token boundaries: "l" must not be taken as a prefix of "left".
        return [
            chord for chord in self._table
            if chord == buffer or chord.startswith(buffer + " ")
        ]

    def pending(self) -> list[str]:
        """Chords still reachable from the current buffer (empty when idle)."""
        if not self._buffer:
            return []
        return self._matching(self._buffer)

    def feed(self, token: str) -> ChordResult:
        buffer = f"{self._buffer} {token}" if self._buffer else token
        matching = self._matching(buffer)

        if len(matching) == 1 and matching[0] == buffer:
            self._buffer = ""
            return ChordResult(ChordOutcome.RESOLVED, self._table[buffer], buffer)

        if not matching:
            self._buffer = ""
            return ChordResult(ChordOutcome.NO_MATCH, chord=buffer)

        self._buffer = buffer
        return ChordResult(ChordOutcome.PENDING, chord=buffer)
