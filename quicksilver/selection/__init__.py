"""Caret and range selection helpers for the visual modes."""

from .commands import EXTEND_COMMANDS, MOVE_COMMANDS, get_selection_command
from .search import CharacterSearch, find_offset

__all__ = [
    "CharacterSearch",
    "EXTEND_COMMANDS",
    "MOVE_COMMANDS",
    "find_offset",
    "get_selection_command",
]
