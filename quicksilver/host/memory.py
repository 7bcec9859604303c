"""In-memory document host.

A small element/text tree with explicit page-coordinate boxes, scroll
offsets, isolated (shadow) roots and a caret/range selection. It implements
DocumentProvider and SelectionProvider so the engine can run headless, and
it is what the test-suite drives.

Geometry: every node carries a ``box`` in page coordinates. Its viewport
rectangle is that box shifted up by the ``scroll_top`` of every ancestor,
the document root included.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from .protocols import (
    Alter,
    DocumentProvider,
    ElementInfo,
    Granularity,
    Rect,
    ScrollState,
    SelectionProvider,
)

_SELECTOR_PART = re.compile(
    r"""
    (?P<tag>^[a-zA-Z][\w-]*|^\*)
    | \#(?P<id>[\w-]+)
    | \.(?P<cls>[\w-]+)
    | \[\s*(?P<attr>[\w-]+)\s*(?:=\s*(?P<quote>["']?)(?P<value>[^"'\]]*)(?P=quote)\s*)?\]
    """,
    re.VERBOSE,
)
_WORD_CHAR = re.compile(r"\w")


@dataclass(eq=False)
class Node:
    box: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))
    parent: Union[Element, ShadowRoot, None] = field(default=None, repr=False)


@dataclass(eq=False)
class TextNode(Node):
    text: str = ""


@dataclass(eq=False)
class ShadowRoot:
    host: Element = field(repr=False)
    children: list[Node] = field(default_factory=list)

    def append(self, child: Node) -> Node:
        child.parent = self
        self.children.append(child)
        return child


@dataclass(eq=False)
class Element(Node):
    tag: str = "div"
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    display: bool = True
    visible: bool = True
    opacity: float = 1.0
    overflow_y: str = "visible"
    content_height: float | None = None  # Scrollable content height; defaults to the children's extent
    scroll_top: float = 0.0
    shadow: ShadowRoot | None = None
    connected: bool = True

    def append(self, child: Node) -> Node:
        child.parent = self
        self.children.append(child)
        return child

    def add_text(self, text: str, box: Rect | None = None) -> TextNode:
        node = TextNode(box=box or self.box, text=text)
        self.append(node)
        return node

    def attach_shadow(self) -> ShadowRoot:
        self.shadow = ShadowRoot(host=self)
        return self.shadow

    def matches(self, selector: str) -> bool:
        return any(_match_compound(self, part.strip()) for part in selector.split(","))


def _match_compound(element: Element, compound: str) -> bool:
    if not compound or " " in compound or ">" in compound:
        raise ValueError(f"Unsupported selector: {compound!r}")
    pos = 0
    while pos < len(compound):
        match = _SELECTOR_PART.match(compound, pos)
        if not match or match.end() == pos:
            raise ValueError(f"Unsupported selector: {compound!r}")
        if match.group("tag"):
            tag = match.group("tag").lower()
            if tag != "*" and tag != element.tag:
                return False
        elif match.group("id"):
            if element.attrs.get("id") != match.group("id"):
                return False
        elif match.group("cls"):
            if match.group("cls") not in element.attrs.get("class", "").split():
                return False
        else:
            name = match.group("attr")
            if name not in element.attrs:
                return False
            value = match.group("value")
            if value is not None and element.attrs[name] != value:
                return False
        pos = match.end()
    return True


class MemoryDocument(DocumentProvider):
    """Document provider over an in-memory tree."""

    def __init__(self, viewport_height: float = 800, viewport_width: float = 1200) -> None:
        self.viewport = Rect(0, 0, viewport_width, viewport_height)
        self.html = Element(box=self.viewport, tag="html", overflow_y="auto")
        self.body = Element(box=self.viewport, tag="body")
        self.html.append(self.body)
        self._active: Element | None = None
        # (interaction, element) pairs in the order they happened
        self.interactions: list[tuple[str, Element]] = []

    # ─────────────────────────────────────────────────────────────────
    # Tree
    # ─────────────────────────────────────────────────────────────────

    def root(self) -> Element:
        return self.html

    def walk(self, root: Any) -> Iterator[Node]:
        for child in root.children:
            yield child
            if isinstance(child, Element):
                yield from self.walk(child)

    def select(self, root: Any, selector: str) -> list[Element]:
        return [
            node for node in self.walk(root)
            if isinstance(node, Element) and node.matches(selector)
        ]

    def isolated_root(self, element: Any) -> ShadowRoot | None:
        return element.shadow

    def is_element(self, node: Any) -> bool:
        return isinstance(node, Element)

    def is_text(self, node: Any) -> bool:
        return isinstance(node, TextNode)

    def text(self, node: Any) -> str:
        return node.text

    def parent_element(self, node: Any) -> Element | None:
        parent = node.parent
        if isinstance(parent, ShadowRoot):
            return parent.host
        return parent

    def _ancestors(self, node: Node) -> Iterator[Element]:
        parent = self.parent_element(node)
        while parent is not None:
            yield parent
            parent = self.parent_element(parent)

    # ─────────────────────────────────────────────────────────────────
    # Geometry and visibility
    # ─────────────────────────────────────────────────────────────────

    def _scroll_shift(self, node: Node) -> float:
        return sum(ancestor.scroll_top for ancestor in self._ancestors(node))

    def bounding_rect(self, element: Any) -> Rect:
        if element is self.html:
            return self.viewport
        box = element.box
        return Rect(box.x, box.y - self._scroll_shift(element), box.width, box.height)

    def range_rect(self, node: Any, start: int, end: int) -> Rect:
        box = node.box
        char_width = box.width / len(node.text) if node.text else 0
        return Rect(
            box.x + start * char_width,
            box.y - self._scroll_shift(node),
            (end - start) * char_width,
            box.height,
        )

    def is_visible(self, element: Any, check_opacity: bool = True) -> bool:
        if not element.connected or not element.display or not element.visible:
            return False
        opacity = element.opacity
        for ancestor in self._ancestors(element):
            if not ancestor.display:
                return False
            opacity *= ancestor.opacity
        return opacity > 0 or not check_opacity

    def viewport_height(self) -> float:
        return self.viewport.height

    def scroll_state(self, element: Any) -> ScrollState:
        if element is self.html:
            client = self.viewport.height
            extent = max((self._extent(child) for child in self.walk(self.html)), default=client)
            return ScrollState(True, max(client, extent), client, element.scroll_top)
        content = element.content_height
        if content is None:
            bottoms = [child.box.bottom - element.box.y for child in element.children]
            content = max([element.box.height, *bottoms])
        return ScrollState(
            element.overflow_y in ("auto", "scroll"),
            content,
            element.box.height,
            element.scroll_top,
        )

    @staticmethod
    def _extent(node: Node) -> float:
        return node.box.bottom

    # ─────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────

    def describe(self, element: Any) -> ElementInfo:
        input_type = None
        if element.tag == "input":
            input_type = element.attrs.get("type", "text").lower()
        editable = any(
            node.attrs.get("contenteditable") in ("", "true")
            for node in (element, *self._ancestors(element))
        )
        return ElementInfo(
            tag=element.tag,
            input_type=input_type,
            editable=editable,
            read_only="readonly" in element.attrs,
            href=element.attrs.get("href") if element.tag == "a" else None,
        )

    def active_element(self) -> Element | None:
        return self._active or self.body

    def is_connected(self, element: Any) -> bool:
        return element.connected

    def document_scroller(self) -> Element:
        return self.html

    def scroll_by(self, element: Any, dy: float) -> None:
        self.scroll_to(element, element.scroll_top + dy)

    def scroll_to(self, element: Any, top: float) -> None:
        state = self.scroll_state(element)
        limit = max(0.0, state.scroll_height - state.client_height)
        element.scroll_top = min(max(0.0, top), limit)

    def click(self, element: Any) -> None:
        self.interactions.append(("click", element))

    def double_click(self, element: Any) -> None:
        self.interactions.append(("double_click", element))

    def focus(self, element: Any) -> None:
        self._active = element
        self.interactions.append(("focus", element))

    def hover(self, element: Any) -> None:
        self.interactions.append(("hover", element))

    def blur(self) -> None:
        self._active = None


class MemorySelection(SelectionProvider):
    """Anchor/focus selection over a MemoryDocument's text nodes.

    ``modify`` keeps to the focus node: character steps move one offset, word
    steps jump to the next/previous word boundary, line and sentence steps
    jump to the node edges or the next sentence terminator.
    """

    def __init__(self, document: MemoryDocument) -> None:
        self.document = document
        self.anchor: tuple[TextNode, int] | None = None
        self.focus: tuple[TextNode, int] | None = None

    def focus_position(self) -> tuple[TextNode, int] | None:
        return self.focus

    def is_collapsed(self) -> bool:
        return self.focus is None or self.anchor == self.focus

    def collapse(self, node: Any, offset: int) -> None:
        self.anchor = self.focus = (node, offset)

    def extend(self, node: Any, offset: int) -> None:
        if self.anchor is None:
            self.anchor = (node, offset)
        self.focus = (node, offset)

    def modify(self, alter: Alter, forward: bool, granularity: Granularity) -> None:
        if self.focus is None:
            return
        node, offset = self.focus
        target = _step(node.text, offset, forward, granularity)
        if alter is Alter.MOVE:
            self.collapse(node, target)
        else:
            self.extend(node, target)

    def select_all_children(self, element: Any) -> None:
        texts = [n for n in self.document.walk(element) if isinstance(n, TextNode)]
        if not texts:
            return
        self.anchor = (texts[0], 0)
        self.focus = (texts[-1], len(texts[-1].text))

    def selected_text(self) -> str:
        if self.anchor is None or self.focus is None:
            return ""
        (start_node, start), (end_node, end) = self.anchor, self.focus
        if start_node is end_node:
            low, high = sorted((start, end))
            return start_node.text[low:high]
        nodes = [n for n in self.document.walk(self.document.root()) if isinstance(n, TextNode)]
        i, j = nodes.index(start_node), nodes.index(end_node)
        if i > j:
            (start_node, start), (end_node, end), (i, j) = (end_node, end), (start_node, start), (j, i)
        parts = [start_node.text[start:]]
        parts.extend(node.text for node in nodes[i + 1:j])
        parts.append(end_node.text[:end])
        return "".join(parts)


def _step(text: str, offset: int, forward: bool, granularity: Granularity) -> int:
    if granularity is Granularity.CHARACTER:
        return min(offset + 1, len(text)) if forward else max(offset - 1, 0)

    if granularity is Granularity.WORD:
        if forward:
            pos = offset
            while pos < len(text) and not _WORD_CHAR.match(text[pos]):
                pos += 1
            while pos < len(text) and _WORD_CHAR.match(text[pos]):
                pos += 1
            return pos
        pos = offset
        while pos > 0 and not _WORD_CHAR.match(text[pos - 1]):
            pos -= 1
        while pos > 0 and _WORD_CHAR.match(text[pos - 1]):
            pos -= 1
        return pos

    if granularity is Granularity.SENTENCE:
        if forward:
            found = re.compile(r"[.!?](\s|$)").search(text, offset)
            return found.start() + 1 if found else len(text)
        terminators = [m.end() for m in re.finditer(r"[.!?]\s+", text[:max(offset - 1, 0)])]
        return terminators[-1] if terminators else 0

    return len(text) if forward else 0
