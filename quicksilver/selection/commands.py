"""Selection commands for the visual modes.

Thin wrappers over the host selection primitive. Commands are registered by
name and looked up when the visual action tables are built.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ..host.protocols import Alter, Granularity, SelectionProvider

if TYPE_CHECKING:
    from ..host.protocols import DocumentProvider

SelectionCommand = Callable[[SelectionProvider], None]


# ─────────────────────────────────────────────────────────────────
# Caret movement
# ─────────────────────────────────────────────────────────────────


def move_char_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, False, Granularity.CHARACTER)


def move_char_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, True, Granularity.CHARACTER)


def move_word_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, False, Granularity.WORD)


def move_word_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, True, Granularity.WORD)


def move_line_up(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, False, Granularity.LINE)


def move_line_down(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, True, Granularity.LINE)


def move_sentence_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, False, Granularity.SENTENCE)


def move_sentence_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.MOVE, True, Granularity.SENTENCE)


# ─────────────────────────────────────────────────────────────────
# Selection extension
# ─────────────────────────────────────────────────────────────────


def extend_char_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, False, Granularity.CHARACTER)


def extend_char_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, True, Granularity.CHARACTER)


def extend_word_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, False, Granularity.WORD)


def extend_word_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, True, Granularity.WORD)


def extend_line_up(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, False, Granularity.LINE)


def extend_line_down(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, True, Granularity.LINE)


def extend_sentence_left(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, False, Granularity.SENTENCE)


def extend_sentence_right(selection: SelectionProvider) -> None:
    selection.modify(Alter.EXTEND, True, Granularity.SENTENCE)


# ─────────────────────────────────────────────────────────────────
# Whole-unit selections
# ─────────────────────────────────────────────────────────────────


def collapse_to_end(selection: SelectionProvider) -> None:
    selection.collapse_to_end()


def select_current_word(selection: SelectionProvider) -> None:
    """Select the word under the caret (or grow an existing selection by a word)."""
    if selection.is_collapsed():
        selection.modify(Alter.MOVE, False, Granularity.WORD)
    selection.modify(Alter.EXTEND, True, Granularity.WORD)


def select_current_paragraph(selection: SelectionProvider, document: DocumentProvider) -> None:
    """Select every child of the paragraph-like block holding the focus."""
    position = selection.focus_position()
    if position is None:
        return
    element = document.parent_element(position[0])
    while element is not None and document.describe(element).tag not in ("p", "div"):
        element = document.parent_element(element)
    if element is not None:
        selection.select_all_children(element)


# ─────────────────────────────────────────────────────────────────
# Registry - maps names used by the action tables to functions
# ─────────────────────────────────────────────────────────────────

MOVE_COMMANDS: dict[str, SelectionCommand] = {
    "move_char_left": move_char_left,
    "move_char_right": move_char_right,
    "move_word_left": move_word_left,
    "move_word_right": move_word_right,
    "move_line_up": move_line_up,
    "move_line_down": move_line_down,
    "move_sentence_left": move_sentence_left,
    "move_sentence_right": move_sentence_right,
}

EXTEND_COMMANDS: dict[str, SelectionCommand] = {
    "extend_char_left": extend_char_left,
    "extend_char_right": extend_char_right,
    "extend_word_left": extend_word_left,
    "extend_word_right": extend_word_right,
    "extend_line_up": extend_line_up,
    "extend_line_down": extend_line_down,
    "extend_sentence_left": extend_sentence_left,
    "extend_sentence_right": extend_sentence_right,
}


def get_selection_command(name: str) -> SelectionCommand | None:
    """Get a move/extend command by name."""
    return MOVE_COMMANDS.get(name) or EXTEND_COMMANDS.get(name)
