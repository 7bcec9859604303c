"""Candidate scanners: interactable elements and word spans."""

from .elements import CandidateScanner
from .geometry import find_overflowing, find_scrolling_ancestor, in_viewport, within_scroll_band
from .words import WordSpanScanner, word_segments

__all__ = [
    "CandidateScanner",
    "WordSpanScanner",
    "find_overflowing",
    "find_scrolling_ancestor",
    "in_viewport",
    "within_scroll_band",
    "word_segments",
]
