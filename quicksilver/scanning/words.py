"""Word span scanning for visual-mode word hints."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Any

from ..core.state import TextSpanCandidate
from ..host.protocols import DocumentProvider
from .geometry import in_viewport

logger = logging.getLogger(__name__)

# Letters, digits and underscore, allowing inner apostrophes ("don't", "l'eau").
WORD_PATTERN = re.compile(r"\w+(?:['’]\w+)*")


def word_segments(text: str) -> Iterator[tuple[int, int]]:
    """(start, end) offsets of each word-like segment; whitespace and
    punctuation runs are skipped."""
    for match in WORD_PATTERN.finditer(text):
        yield match.start(), match.end()


class WordSpanScanner:
    """Enumerates visible words as (text node, start, end) candidates."""

    def __init__(self, document: DocumentProvider) -> None:
        self._document = document

    def scan(self) -> list[TextSpanCandidate]:
        document = self._document
        viewport_height = document.viewport_height()
        candidates: list[TextSpanCandidate] = []
        for node in self._text_nodes(document.root()):
            parent = document.parent_element(node)
            if parent is None:
                continue
            if not in_viewport(document.bounding_rect(parent), viewport_height):
                continue
            if not document.is_visible(parent):
                continue
            for start, end in word_segments(document.text(node)):
                rect = document.range_rect(node, start, end)
                if in_viewport(rect, viewport_height):
                    candidates.append(TextSpanCandidate(node, start, end))
        logger.debug("Scanned %d word candidates", len(candidates))
        return candidates

    def _text_nodes(self, root: Any) -> Iterator[Any]:
        document = self._document
        for node in document.walk(root):
            if document.is_text(node):
                yield node
            elif document.is_element(node):
                isolated = document.isolated_root(node)
                if isolated is not None:
                    yield from self._text_nodes(isolated)
