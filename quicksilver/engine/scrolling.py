"""Keyboard scrolling."""

from __future__ import annotations

from typing import Any

from ..host.protocols import DocumentProvider
from ..scanning.geometry import find_overflowing


class Scroller:
    """Scrolls whatever container holds the element the user last worked with."""

    def __init__(self, document: DocumentProvider, step: int = 70) -> None:
        self._document = document
        self.step = step
        self._last_element: Any = None

    def remember(self, element: Any) -> None:
        """Record the element the user last clicked or focused."""
        self._last_element = element

    def current_element(self) -> Any | None:
        last = self._last_element
        if last is not None and self._document.is_connected(last):
            return last
        self._last_element = None
        return self._document.active_element()

    def target(self) -> Any:
        element = self.current_element()
        if element is None:
            return self._document.document_scroller()
        return find_overflowing(self._document, element)

    def scroll_down(self) -> None:
        self._document.scroll_by(self.target(), self.step)

    def scroll_up(self) -> None:
        self._document.scroll_by(self.target(), -self.step)

    def half_page_down(self) -> None:
        self._document.scroll_by(self.target(), self._document.viewport_height() / 2)

    def half_page_up(self) -> None:
        self._document.scroll_by(self.target(), -self._document.viewport_height() / 2)

    def to_top(self) -> None:
        self._document.scroll_to(self.target(), 0)

    def to_bottom(self) -> None:
        target = self.target()
        self._document.scroll_to(target, self._document.scroll_state(target).scroll_height)
