"""Tests for selection commands and find-character search."""

from __future__ import annotations

import pytest

from quicksilver.core.state import Bias, Direction, Mode, SearchMemory
from quicksilver.selection import commands
from quicksilver.selection.search import CharacterSearch, find_offset
from tests.fakes import add_element


@pytest.fixture
def text(document, selection):
    node = add_element(document.body, "p", 10).add_text("the cat sat")
    selection.collapse(node, 0)
    return node


@pytest.fixture
def search(document, selection):
    return CharacterSearch(document, selection, SearchMemory())


class TestFindOffset:
    """Tests for find_offset."""

    def test_forward_before_lands_on_match(self):
        assert find_offset("the cat sat", 0, "a", Direction.FORWARD, Bias.BEFORE) == 5
        assert find_offset("the cat sat", 5, "a", Direction.FORWARD, Bias.BEFORE) == 9

    def test_forward_after_lands_past_match(self):
        assert find_offset("the cat sat", 0, "a", Direction.FORWARD, Bias.AFTER) == 6
        assert find_offset("the cat sat", 6, "a", Direction.FORWARD, Bias.AFTER) == 10

    def test_backward(self):
        assert find_offset("the cat sat", 9, "a", Direction.BACKWARD, Bias.BEFORE) == 5
        assert find_offset("the cat sat", 10, "a", Direction.BACKWARD, Bias.AFTER) == 6

    def test_not_found(self):
        assert find_offset("the cat sat", 9, "a", Direction.FORWARD, Bias.BEFORE) is None
        assert find_offset("the cat sat", 0, "z", Direction.FORWARD, Bias.AFTER) is None
        assert find_offset("the cat sat", 0, "t", Direction.BACKWARD, Bias.BEFORE) is None

    def test_empty_char(self):
        assert find_offset("the cat sat", 0, "", Direction.FORWARD, Bias.AFTER) is None


class TestCharacterSearch:
    """Tests for CharacterSearch against a memory selection."""

    def test_find_then_repeat(self, selection, search, text):
        assert search.find_and_move("a", Direction.FORWARD, Bias.BEFORE, Mode.VISUAL_CARET)
        assert selection.focus == (text, 5)

        assert search.repeat(Mode.VISUAL_CARET)
        assert selection.focus == (text, 9)

        # No further "a"; the caret stays put
        assert not search.repeat(Mode.VISUAL_CARET)
        assert selection.focus == (text, 9)

    def test_repeat_reversed(self, selection, search, text):
        selection.collapse(text, 9)
        search.memory.remember("a", Direction.FORWARD, Bias.BEFORE)
        assert search.repeat(Mode.VISUAL_CARET, reverse=True)
        assert selection.focus == (text, 5)
        assert search.memory.direction is Direction.FORWARD

    def test_range_mode_extends(self, selection, search, text):
        assert search.find_and_move("c", Direction.FORWARD, Bias.AFTER, Mode.VISUAL_RANGE)
        assert selection.anchor == (text, 0)
        assert selection.focus == (text, 5)
        assert selection.selected_text() == "the c"

    def test_miss_is_still_remembered(self, search, text):
        assert not search.find_and_move("z", Direction.BACKWARD, Bias.AFTER, Mode.VISUAL_CARET)
        assert search.memory.char == "z"
        assert search.memory.direction is Direction.BACKWARD

    def test_repeat_without_memory(self, search, text):
        assert not search.repeat(Mode.VISUAL_CARET)

    def test_no_selection(self, document, selection):
        search = CharacterSearch(document, selection, SearchMemory())
        assert not search.find_and_move("a", Direction.FORWARD, Bias.AFTER, Mode.VISUAL_CARET)


class TestSelectionCommands:
    """Tests for the whole-unit selection commands."""

    def test_select_current_word(self, selection, text):
        selection.collapse(text, 5)
        commands.select_current_word(selection)
        assert selection.selected_text() == "cat"

    def test_select_current_word_grows_selection(self, selection, text):
        selection.collapse(text, 0)
        selection.extend(text, 3)
        commands.select_current_word(selection)
        assert selection.selected_text() == "the cat"

    def test_select_current_paragraph(self, document, selection):
        paragraph = add_element(document.body, "p", 10)
        first = paragraph.add_text("One. ")
        span = add_element(paragraph, "span", 10)
        span.add_text("Two. ")
        last = paragraph.add_text("Three.")
        selection.collapse(first, 2)

        commands.select_current_paragraph(selection, document)
        assert selection.anchor == (first, 0)
        assert selection.focus == (last, 6)
        assert selection.selected_text() == "One. Two. Three."

    def test_move_and_extend(self, selection, text):
        commands.move_word_right(selection)
        assert selection.focus == (text, 3)
        commands.extend_char_right(selection)
        commands.extend_word_right(selection)
        assert selection.selected_text() == " cat"

    def test_collapse_to_end(self, selection, text):
        selection.extend(text, 4)
        commands.collapse_to_end(selection)
        assert selection.anchor == selection.focus == (text, 4)

    def test_registry(self):
        assert commands.get_selection_command("move_char_left") is commands.move_char_left
        assert commands.get_selection_command("extend_line_down") is commands.extend_line_down
        assert commands.get_selection_command("nope") is None
