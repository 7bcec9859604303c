"""Find-character caret navigation.

Searches the focus text node for the next or previous occurrence of a
character and moves the caret (caret mode) or the selection focus (range
mode) there. The search never leaves the focus node.
"""

from __future__ import annotations

import logging

from ..core.state import Bias, Direction, Mode, SearchMemory
from ..host.protocols import DocumentProvider, SelectionProvider

logger = logging.getLogger(__name__)


def find_offset(text: str, offset: int, char: str, direction: Direction, bias: Bias) -> int | None:
    """Caret offset after searching ``text`` from ``offset``.

    ``BEFORE`` lands on the match's own offset (caret in front of it),
    ``AFTER`` one past it. The search start skips the character the caret
    already sits next to, so repeating a search always advances.

    Returns:
        The new offset, or None when there is no further occurrence.
    """
    if not char:
        return None
    if direction is Direction.FORWARD:
        start = offset + 1 if bias is Bias.BEFORE else offset
        index = text.find(char, start)
    else:
        end = offset if bias is Bias.BEFORE else offset - 1
        index = text.rfind(char, 0, max(end, 0))
    if index < 0:
        return None
    return index if bias is Bias.BEFORE else index + 1


class CharacterSearch:
    """find_and_move / repeat over the host selection, with SearchMemory."""

    def __init__(
        self,
        document: DocumentProvider,
        selection: SelectionProvider,
        memory: SearchMemory,
    ) -> None:
        self._document = document
        self._selection = selection
        self.memory = memory

    def find_and_move(self, char: str, direction: Direction, bias: Bias, mode: Mode) -> bool:
        """Search and move; the target is remembered even when nothing is found."""
        self.memory.remember(char, direction, bias)
        return self._move(char, direction, bias, mode)

    def repeat(self, mode: Mode, reverse: bool = False) -> bool:
        """Replay the remembered search (``reverse`` flips its direction)."""
        if not self.memory.is_set:
            return False
        direction = self.memory.direction.reversed() if reverse else self.memory.direction
        return self._move(self.memory.char, direction, self.memory.bias, mode)

    def _move(self, char: str, direction: Direction, bias: Bias, mode: Mode) -> bool:
        position = self._selection.focus_position()
        if position is None:
            return False
        node, offset = position
        if not self._document.is_text(node):
            return False

        target = find_offset(self._document.text(node), offset, char, direction, bias)
        if target is None:
            logger.debug("No %r %s offset %d", char, direction.name.lower(), offset)
            return False

        if mode is Mode.VISUAL_RANGE:
            self._selection.extend(node, target)
        else:
            self._selection.collapse(node, target)
        return True
