"""Engine state types.

Tracks the current mode, the active hint session and the remembered
find-character search. All of it is owned by one ModeStateMachine.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Mode(Enum):
    """Top-level modes; exactly one is active."""

    NORMAL = "NORMAL"
    HINTING = "HINTING"
    VISUAL_CARET = "CARET"
    VISUAL_RANGE = "VISUAL"

    @property
    def is_visual(self) -> bool:
        return self in (Mode.VISUAL_CARET, Mode.VISUAL_RANGE)


# ─────────────────────────────────────────────────────────────────
# Interaction intents
# ─────────────────────────────────────────────────────────────────


class TabTarget(Enum):
    """Where a link opened in a new tab should go."""

    BACKGROUND = "background"
    FOREGROUND = "foreground"
    NEW_WINDOW = "new"
    PRIVATE_WINDOW = "private"


@dataclass(frozen=True)
class Click:
    pass


@dataclass(frozen=True)
class DoubleClick:
    pass


@dataclass(frozen=True)
class Focus:
    pass


@dataclass(frozen=True)
class Hover:
    pass


@dataclass(frozen=True)
class OpenInNewTab:
    target: TabTarget = TabTarget.BACKGROUND
    profile: str | None = None  # Container / cookie store id


InteractionIntent = Union[Click, DoubleClick, Focus, Hover, OpenInNewTab]


# ─────────────────────────────────────────────────────────────────
# Candidates
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class ElementCandidate:
    """A hintable element; ``element`` is an opaque host handle."""

    element: Any


@dataclass(frozen=True, eq=False)
class TextSpanCandidate:
    """A word-like run of text inside one text node."""

    node: Any
    start: int
    end: int


Candidate = Union[ElementCandidate, TextSpanCandidate]


# ─────────────────────────────────────────────────────────────────
# Hint session
# ─────────────────────────────────────────────────────────────────


class HintOutcome(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    ABORTED = "aborted"


@dataclass
class HintSession:
    """Label -> candidate mapping for one hinting pass plus the typed prefix.

    Labels keep the scanner's document order; typing only prunes them.
    """

    hints: dict[str, Candidate]
    on_resolve: Callable[[Candidate], Mode]  # Returns the mode to enter afterwards
    typed: str = ""

    def feed(self, char: str) -> tuple[HintOutcome, list[str]]:
        """Append a typed character and prune non-matching labels.

        Returns:
            The outcome and the labels dropped by this keystroke.
        """
        self.typed += char
        dropped = [label for label in self.hints if not label.startswith(self.typed)]
        for label in dropped:
            del self.hints[label]

        if len(self.hints) == 1 and self.typed in self.hints:
            return HintOutcome.RESOLVED, dropped
        if not self.hints:
            return HintOutcome.ABORTED, dropped
        return HintOutcome.PENDING, dropped

    @property
    def resolved(self) -> Candidate | None:
        if len(self.hints) == 1:
            return self.hints.get(self.typed)
        return None


# ─────────────────────────────────────────────────────────────────
# Character search memory
# ─────────────────────────────────────────────────────────────────


class Direction(Enum):
    FORWARD = 1
    BACKWARD = -1

    def reversed(self) -> Direction:
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD


class Bias(Enum):
    """Where the caret lands relative to a found character."""

    BEFORE = "before"
    AFTER = "after"


@dataclass
class SearchMemory:
    """Last find-character target, reused by the repeat commands."""

    char: str = ""
    direction: Direction = Direction.FORWARD
    bias: Bias = Bias.AFTER

    @property
    def is_set(self) -> bool:
        return bool(self.char)

    def remember(self, char: str, direction: Direction, bias: Bias) -> None:
        self.char = char
        self.direction = direction
        self.bias = bias

    def clear(self) -> None:
        self.char = ""
        self.direction = Direction.FORWARD
        self.bias = Bias.AFTER


@dataclass
class EngineState:
    """Mode, passthrough flag, hint session and search memory."""

    mode: Mode = Mode.NORMAL
    passthrough: bool = False
    hint_session: HintSession | None = None
    search: SearchMemory = field(default_factory=SearchMemory)

    def enter_mode(self, mode: Mode) -> None:
        """Transition to a new mode with cleanup of state the old one owned."""
        old_mode = self.mode
        self.mode = mode

        if old_mode is Mode.HINTING and mode is not Mode.HINTING:
            self.hint_session = None

        if old_mode.is_visual and not mode.is_visual:
            self.search.clear()

    @property
    def is_session_active(self) -> bool:
        return self.hint_session is not None or self.mode is not Mode.NORMAL
