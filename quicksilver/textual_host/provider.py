"""Textual screens as documents.

Widgets are the elements, CSS queries select them and compositor regions give
their geometry. Textual has no text nodes and no isolated sub-trees, so word
hinting finds nothing and every query covers the whole screen.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from textual.css.query import QueryError
from textual.screen import Screen
from textual.widget import Widget
from textual.widgets import Button, Checkbox, Input, RadioButton, Select, Switch, TextArea

from ..host.protocols import DocumentProvider, ElementInfo, Rect, ScrollState


class TextualDocument(DocumentProvider):
    """DocumentProvider over the widget tree of one Textual screen."""

    def __init__(self, screen: Screen, skip: tuple[type[Widget], ...] = ()) -> None:
        self.screen = screen
        self._skip = skip  # Widget types whose sub-trees are never scanned

    def root(self) -> Screen:
        return self.screen

    def walk(self, root: Any) -> Iterator[Widget]:
        for child in root.children:
            if isinstance(child, self._skip):
                continue
            yield child
            yield from self.walk(child)

    def select(self, root: Any, selector: str) -> list[Widget]:
        try:
            return [
                widget for widget in root.query(selector)
                if not any(isinstance(node, self._skip) for node in widget.ancestors_with_self)
            ]
        except QueryError as exc:
            raise ValueError(f"Invalid selector {selector!r}: {exc}") from exc

    def isolated_root(self, element: Any) -> None:
        return None

    def is_element(self, node: Any) -> bool:
        return isinstance(node, Widget)

    def is_text(self, node: Any) -> bool:
        return False

    def text(self, node: Any) -> str:
        return ""

    def parent_element(self, node: Any) -> Widget | None:
        parent = node.parent
        return parent if isinstance(parent, Widget) else None

    # ─────────────────────────────────────────────────────────────────
    # Geometry and visibility
    # ─────────────────────────────────────────────────────────────────

    def bounding_rect(self, element: Any) -> Rect:
        region = element.region
        return Rect(region.x, region.y, region.width, region.height)

    def range_rect(self, node: Any, start: int, end: int) -> Rect:
        return Rect(0, 0, 0, 0)

    def is_visible(self, element: Any, check_opacity: bool = True) -> bool:
        if not element.display or not element.visible:
            return False
        opacity = element.styles.opacity
        parent = self.parent_element(element)
        while parent is not None:
            if not parent.display:
                return False
            opacity *= parent.styles.opacity
            parent = self.parent_element(parent)
        return opacity > 0 or not check_opacity

    def viewport_height(self) -> float:
        return self.screen.size.height

    def scroll_state(self, element: Any) -> ScrollState:
        client_height = element.scrollable_content_region.height
        return ScrollState(
            overflow_scrolls=element.styles.overflow_y in ("auto", "scroll"),
            scroll_height=client_height + element.max_scroll_y,
            client_height=client_height,
            scroll_top=element.scroll_y,
        )

    # ─────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────

    def describe(self, element: Any) -> ElementInfo:
        if isinstance(element, Input):
            input_type = "number" if element.type in ("integer", "number") else "text"
            return ElementInfo(tag="input", input_type=input_type)
        if isinstance(element, TextArea):
            return ElementInfo(tag="textarea", editable=not element.read_only, read_only=element.read_only)
        if isinstance(element, Select):
            return ElementInfo(tag="select")
        url = getattr(element, "url", None)
        return ElementInfo(
            tag=type(element).__name__.lower(),
            href=url if isinstance(url, str) and url else None,
        )

    def active_element(self) -> Widget | None:
        return self.screen.focused

    def is_connected(self, element: Any) -> bool:
        return element.is_attached

    def document_scroller(self) -> Screen:
        return self.screen

    def scroll_by(self, element: Any, dy: float) -> None:
        element.scroll_relative(y=dy, animate=False)

    def scroll_to(self, element: Any, top: float) -> None:
        element.scroll_to(y=top, animate=False)

    def click(self, element: Any) -> None:
        if isinstance(element, Button):
            element.press()
        elif isinstance(element, (Checkbox, RadioButton, Switch)):
            element.toggle()
        elif element.focusable:
            element.focus()

    def double_click(self, element: Any) -> None:
        self.click(element)
        self.click(element)

    def focus(self, element: Any) -> None:
        element.focus()

    def hover(self, element: Any) -> None:
        # Terminals have no pointer to park; bring the widget into view instead.
        element.scroll_visible(animate=False)
