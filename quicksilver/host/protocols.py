"""Collaborator interfaces the engine consumes.

The engine never inspects host handles; it only passes them back to the
provider that produced them. A host (a browser bridge, a Textual screen, the
in-memory document used by the tests) implements these ABCs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Rect:
    """Viewport-relative bounding box."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class ScrollState:
    """Vertical scroll metrics of one element."""

    overflow_scrolls: bool  # overflow-y is auto/scroll (a scrollbar can show)
    scroll_height: float  # Height of the content
    client_height: float  # Height of the visible box
    scroll_top: float  # Current vertical scroll offset

    @property
    def is_overflowing(self) -> bool:
        return self.scroll_height > self.client_height

    @property
    def scrolls(self) -> bool:
        """Actually scrolls: can show a scrollbar and has content to scroll."""
        return self.overflow_scrolls and self.is_overflowing


@dataclass(frozen=True)
class ElementInfo:
    """What the engine needs to know about an element to interact with it."""

    tag: str  # Lowercase tag / widget type name
    input_type: str | None = None  # For <input>: the lowercase type attribute
    editable: bool = False  # Inside an editable region (contenteditable or equivalent)
    read_only: bool = False
    href: str | None = None


class DocumentProvider(ABC):
    """Document and geometry capability."""

    @abstractmethod
    def root(self) -> Any:
        """The top-level document root."""

    @abstractmethod
    def walk(self, root: Any) -> Iterable[Any]:
        """All nodes under ``root`` in document order, not crossing isolated sub-trees."""

    @abstractmethod
    def select(self, root: Any, selector: str) -> list[Any]:
        """Elements under ``root`` matching ``selector``, not crossing isolated sub-trees."""

    @abstractmethod
    def isolated_root(self, element: Any) -> Any | None:
        """The isolated sub-tree hosted by ``element``, if any."""

    @abstractmethod
    def is_element(self, node: Any) -> bool: ...

    @abstractmethod
    def is_text(self, node: Any) -> bool: ...

    @abstractmethod
    def text(self, node: Any) -> str:
        """Text content of a text node."""

    @abstractmethod
    def parent_element(self, node: Any) -> Any | None:
        """Nearest element ancestor, crossing isolated boundaries to the host."""

    @abstractmethod
    def bounding_rect(self, element: Any) -> Rect: ...

    @abstractmethod
    def range_rect(self, node: Any, start: int, end: int) -> Rect:
        """Tight bounding box of ``text(node)[start:end]``."""

    @abstractmethod
    def is_visible(self, element: Any, check_opacity: bool = True) -> bool: ...

    @abstractmethod
    def viewport_height(self) -> float: ...

    @abstractmethod
    def scroll_state(self, element: Any) -> ScrollState: ...

    @abstractmethod
    def describe(self, element: Any) -> ElementInfo: ...

    @abstractmethod
    def active_element(self) -> Any | None: ...

    @abstractmethod
    def is_connected(self, element: Any) -> bool: ...

    @abstractmethod
    def document_scroller(self) -> Any:
        """Element that scrolls the whole document."""

    @abstractmethod
    def scroll_by(self, element: Any, dy: float) -> None: ...

    @abstractmethod
    def scroll_to(self, element: Any, top: float) -> None: ...

    @abstractmethod
    def click(self, element: Any) -> None: ...

    @abstractmethod
    def double_click(self, element: Any) -> None: ...

    @abstractmethod
    def focus(self, element: Any) -> None: ...

    @abstractmethod
    def hover(self, element: Any) -> None: ...


class Alter(Enum):
    MOVE = "move"
    EXTEND = "extend"


class Granularity(Enum):
    CHARACTER = "character"
    WORD = "word"
    LINE = "line"
    SENTENCE = "sentence"


class SelectionProvider(ABC):
    """The host's native selection primitive."""

    @abstractmethod
    def focus_position(self) -> tuple[Any, int] | None:
        """(node, offset) of the selection focus, or None without a selection."""

    @abstractmethod
    def is_collapsed(self) -> bool:
        """True when there is no selection or it is a caret."""

    @abstractmethod
    def collapse(self, node: Any, offset: int) -> None:
        """Place a caret."""

    @abstractmethod
    def extend(self, node: Any, offset: int) -> None:
        """Move the focus end, keeping the anchor."""

    @abstractmethod
    def modify(self, alter: Alter, forward: bool, granularity: Granularity) -> None:
        """Move or extend by one unit, like ``Selection.modify``."""

    @abstractmethod
    def select_all_children(self, element: Any) -> None: ...

    @abstractmethod
    def selected_text(self) -> str: ...

    def collapse_to_end(self) -> None:
        """Collapse onto the focus end."""
        position = self.focus_position()
        if position is not None:
            self.collapse(*position)
