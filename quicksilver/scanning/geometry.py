"""Viewport and scroll-clipping tests shared by the scanners."""

from __future__ import annotations

from typing import Any

from ..host.protocols import DocumentProvider, Rect


def in_viewport(rect: Rect, viewport_height: float) -> bool:
    """Top edge on screen and a non-empty box.

    Only the top edge is checked, so an element cut off at the bottom of the
    viewport still counts as visible.
    """
    return 0 <= rect.top < viewport_height and rect.width > 0 and rect.height > 0


def find_scrolling_ancestor(document: DocumentProvider, element: Any) -> Any | None:
    """Nearest ancestor that shows a scrollbar and has content to scroll.

    The document scroller is not considered; the viewport test covers it.
    """
    scroller = document.document_scroller()
    parent = document.parent_element(element)
    while parent is not None and parent is not scroller:
        if document.scroll_state(parent).scrolls:
            return parent
        parent = document.parent_element(parent)
    return None


def find_overflowing(document: DocumentProvider, element: Any) -> Any:
    """The element itself if it scrolls, else the nearest scrolling ancestor,
    else the document scroller.

    Overflow alone is not enough: an element whose overflow is visible grows
    the page instead of scrolling, so scrolling it would do nothing.
    """
    if document.scroll_state(element).scrolls:
        return element
    parent = document.parent_element(element)
    while parent is not None:
        if document.scroll_state(parent).scrolls:
            return parent
        parent = document.parent_element(parent)
    return document.document_scroller()


def within_scroll_band(document: DocumentProvider, rect: Rect, ancestor: Any) -> bool:
    """Whether ``rect`` falls inside the visible band of a scrolling ancestor.

    Positions are compared in the ancestor's content coordinates: the element
    sits at ``rect.top - ancestor.top + scroll_top`` and the band spans
    ``[scroll_top, scroll_top + client_height)``. When the ancestor's own box
    starts above the viewport, the part above the viewport edge is cut from
    the band as well.
    """
    state = document.scroll_state(ancestor)
    ancestor_rect = document.bounding_rect(ancestor)

    position = rect.top - ancestor_rect.top + state.scroll_top
    band_start = state.scroll_top
    if ancestor_rect.top < 0:
        band_start -= ancestor_rect.top
    band_end = state.scroll_top + state.client_height
    return band_start <= position < band_end


def passes_scroll_clip(document: DocumentProvider, element: Any, rect: Rect) -> bool:
    ancestor = find_scrolling_ancestor(document, element)
    if ancestor is None:
        return True
    return within_scroll_band(document, rect, ancestor)
