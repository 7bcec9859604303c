"""Visible interactable element scanning."""

from __future__ import annotations

import logging
from typing import Any

from ..core.state import ElementCandidate
from ..host.protocols import DocumentProvider
from .geometry import in_viewport, passes_scroll_clip

logger = logging.getLogger(__name__)


class CandidateScanner:
    """Enumerates elements eligible for hinting, in document order.

    Filter pipeline per element:
        1. matches the selector
        2. found by walking the tree and every isolated sub-tree inside it
        3. top edge inside the viewport, non-empty box
        4. visible per the host (opacity optionally ignored)
        5. inside the visible band of its nearest scrolling ancestor
    """

    def __init__(self, document: DocumentProvider) -> None:
        self._document = document

    def scan(self, selector: str, check_opacity: bool = True) -> list[ElementCandidate]:
        document = self._document
        viewport_height = document.viewport_height()
        candidates: list[ElementCandidate] = []
        for element in self.matching_elements(selector):
            rect = document.bounding_rect(element)
            if not in_viewport(rect, viewport_height):
                continue
            if not document.is_visible(element, check_opacity=check_opacity):
                continue
            if not passes_scroll_clip(document, element, rect):
                continue
            candidates.append(ElementCandidate(element))
        logger.debug("Scanned %r: %d candidates", selector, len(candidates))
        return candidates

    def matching_elements(self, selector: str) -> list[Any]:
        """Every element matching ``selector``, isolated sub-trees included."""
        found: list[Any] = []
        seen: set[int] = set()
        self._collect(self._document.root(), selector, found, seen)
        return found

    def _collect(self, root: Any, selector: str, found: list[Any], seen: set[int]) -> None:
        document = self._document
        matched = {id(element) for element in document.select(root, selector)}
        for node in document.walk(root):
            if not document.is_element(node):
                continue
            if id(node) in matched and id(node) not in seen:
                seen.add(id(node))
                found.append(node)
            isolated = document.isolated_root(node)
            if isolated is not None:
                # Sub-tree content goes where its host sits in the document.
                self._collect(isolated, selector, found, seen)
