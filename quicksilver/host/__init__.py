"""Host collaborator interfaces and the in-memory host."""

from .memory import Element, MemoryDocument, MemorySelection, ShadowRoot, TextNode
from .protocols import DocumentProvider, ElementInfo, Rect, ScrollState, SelectionProvider

__all__ = [
    "DocumentProvider",
    "Element",
    "ElementInfo",
    "MemoryDocument",
    "MemorySelection",
    "Rect",
    "ScrollState",
    "SelectionProvider",
    "ShadowRoot",
    "TextNode",
]
