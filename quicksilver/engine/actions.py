"""Named actions and the default per-mode bindings.

Handlers are plain functions taking the machine and the triggering key
event. They are registered by name so a custom keymap can rebind them; the
per-mode ActionTables are built from (chord, action name) bindings.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from ..core.chords import Action, ActionTable
from ..core.state import (
    Bias,
    Click,
    Direction,
    DoubleClick,
    Focus,
    Hover,
    Mode,
    OpenInNewTab,
    TabTarget,
)
from ..selection.commands import (
    collapse_to_end,
    get_selection_command,
    select_current_paragraph,
    select_current_word,
)

if TYPE_CHECKING:
    from .machine import ModeStateMachine

ActionHandler = Callable[["ModeStateMachine", Any], None]


@dataclass(frozen=True)
class Binding:
    """A chord bound to a named action."""

    chord: str
    action: str


@dataclass(frozen=True)
class ActionDef:
    description: str
    handler: ActionHandler


# ─────────────────────────────────────────────────────────────────
# Normal mode
# ─────────────────────────────────────────────────────────────────


def scroll_down(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.scroll_down()


def scroll_up(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.scroll_up()


def scroll_half_page_down(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.half_page_down()


def scroll_half_page_up(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.half_page_up()


def scroll_to_top(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.to_top()


def scroll_to_bottom(machine: ModeStateMachine, event: Any) -> None:
    machine.scroller.to_bottom()


def hint_click(machine: ModeStateMachine, event: Any) -> None:
    machine.highlight_elements_by_selector(machine.settings.hint_selector, Click())


def hint_new_tab_background(machine: ModeStateMachine, event: Any) -> None:
    machine.highlight_elements_by_selector(
        machine.settings.link_selector, OpenInNewTab(TabTarget.BACKGROUND)
    )


def hint_new_tab_foreground(machine: ModeStateMachine, event: Any) -> None:
    machine.highlight_elements_by_selector(
        machine.settings.link_selector, OpenInNewTab(TabTarget.FOREGROUND)
    )


def hint_double_click(machine: ModeStateMachine, event: Any) -> None:
    machine.highlight_elements_by_selector(machine.settings.hint_selector, DoubleClick())


def hint_hover(machine: ModeStateMachine, event: Any) -> None:
    machine.highlight_elements_by_selector(machine.settings.hint_selector, Hover())


def hint_inputs(machine: ModeStateMachine, event: Any) -> None:
    # Styled inputs are often transparent with a decorated wrapper on top.
    machine.highlight_elements_by_selector(
        machine.settings.input_selector, Focus(), check_opacity=False
    )


def enter_visual(machine: ModeStateMachine, event: Any) -> None:
    machine.enter_visual()


def next_tab(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("go_to_tab", relative="next")


def previous_tab(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("go_to_tab", relative="previous")


def duplicate_tab(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("duplicate_tab")


def close_tab(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("close_tab")


def move_tab_to_new_window(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("move_tab_to_new_window")


def reopen_tab_in_private_window(machine: ModeStateMachine, event: Any) -> None:
    machine.send_tab_message("reopen_tab_in_private_window")


def toggle_link_list(machine: ModeStateMachine, event: Any) -> None:
    machine.toggle_link_list()


def toggle_help(machine: ModeStateMachine, event: Any) -> None:
    machine.overlay.toggle_help(machine.table_for(machine.mode))


def toggle_passthrough(machine: ModeStateMachine, event: Any) -> None:
    machine.toggle_passthrough()


# ─────────────────────────────────────────────────────────────────
# Visual modes
# ─────────────────────────────────────────────────────────────────


def _selection_handler(name: str) -> ActionHandler:
    command = get_selection_command(name)
    if command is None:
        raise KeyError(name)
    extends = name.startswith("extend_")

    def handler(machine: ModeStateMachine, event: Any) -> None:
        if machine.selection is None:
            return
        command(machine.selection)
        if extends and machine.mode is Mode.VISUAL_CARET:
            machine.enter_mode(Mode.VISUAL_RANGE)

    return handler


def enter_range(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is not None:
        machine.enter_mode(Mode.VISUAL_RANGE)


def collapse_to_caret(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is not None:
        collapse_to_end(machine.selection)
    machine.enter_mode(Mode.VISUAL_CARET)


def exit_visual(machine: ModeStateMachine, event: Any) -> None:
    machine.enter_mode(Mode.NORMAL)


def select_word(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is None:
        return
    select_current_word(machine.selection)
    machine.enter_mode(Mode.VISUAL_RANGE)


def select_paragraph(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is None:
        return
    select_current_paragraph(machine.selection, machine.document)
    machine.enter_mode(Mode.VISUAL_RANGE)


def _find_handler(direction: Direction, bias: Bias) -> ActionHandler:
    def handler(machine: ModeStateMachine, event: Any) -> None:
        search = machine.character_search
        if search is None:
            return
        machine.capture_char(
            lambda char: search.find_and_move(char, direction, bias, machine.mode)
        )

    return handler


def repeat_search(machine: ModeStateMachine, event: Any) -> None:
    if machine.character_search is not None:
        machine.character_search.repeat(machine.mode)


def repeat_search_reverse(machine: ModeStateMachine, event: Any) -> None:
    if machine.character_search is not None:
        machine.character_search.repeat(machine.mode, reverse=True)


def copy_selection(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is None:
        return
    machine.copy_to_clipboard(machine.selection.selected_text())
    collapse_to_caret(machine, event)


def search_selection(machine: ModeStateMachine, event: Any) -> None:
    if machine.selection is None:
        return
    text = machine.selection.selected_text().strip()
    if text:
        machine.send_tab_message("search", text)
    machine.enter_mode(Mode.NORMAL)


# ─────────────────────────────────────────────────────────────────
# Registry - maps action names to descriptions and handlers
# ─────────────────────────────────────────────────────────────────

ACTIONS: dict[str, ActionDef] = {
    "scroll_down": ActionDef("Scroll down", scroll_down),
    "scroll_up": ActionDef("Scroll up", scroll_up),
    "scroll_half_page_down": ActionDef("Scroll half a page down", scroll_half_page_down),
    "scroll_half_page_up": ActionDef("Scroll half a page up", scroll_half_page_up),
    "scroll_to_top": ActionDef("Scroll to top", scroll_to_top),
    "scroll_to_bottom": ActionDef("Scroll to bottom", scroll_to_bottom),
    "hint_click": ActionDef("Click an element", hint_click),
    "hint_new_tab_background": ActionDef("Open link in background tab", hint_new_tab_background),
    "hint_new_tab_foreground": ActionDef("Open link in new tab", hint_new_tab_foreground),
    "hint_double_click": ActionDef("Double-click an element", hint_double_click),
    "hint_hover": ActionDef("Hover an element", hint_hover),
    "hint_inputs": ActionDef("Focus an input", hint_inputs),
    "enter_visual": ActionDef("Visual mode", enter_visual),
    "next_tab": ActionDef("Next tab", next_tab),
    "previous_tab": ActionDef("Previous tab", previous_tab),
    "duplicate_tab": ActionDef("Duplicate tab", duplicate_tab),
    "close_tab": ActionDef("Close tab", close_tab),
    "move_tab_to_new_window": ActionDef("Move tab to new window", move_tab_to_new_window),
    "reopen_tab_in_private_window": ActionDef(
        "Reopen tab in private window", reopen_tab_in_private_window
    ),
    "toggle_link_list": ActionDef("Toggle link list", toggle_link_list),
    "toggle_help": ActionDef("Toggle help", toggle_help),
    "toggle_passthrough": ActionDef("Toggle passthrough", toggle_passthrough),
    "move_char_left": ActionDef("Caret left", _selection_handler("move_char_left")),
    "move_char_right": ActionDef("Caret right", _selection_handler("move_char_right")),
    "move_word_left": ActionDef("Caret back a word", _selection_handler("move_word_left")),
    "move_word_right": ActionDef("Caret forward a word", _selection_handler("move_word_right")),
    "move_line_up": ActionDef("Caret up a line", _selection_handler("move_line_up")),
    "move_line_down": ActionDef("Caret down a line", _selection_handler("move_line_down")),
    "move_sentence_left": ActionDef("Caret back a sentence", _selection_handler("move_sentence_left")),
    "move_sentence_right": ActionDef(
        "Caret forward a sentence", _selection_handler("move_sentence_right")
    ),
    "extend_char_left": ActionDef("Extend left", _selection_handler("extend_char_left")),
    "extend_char_right": ActionDef("Extend right", _selection_handler("extend_char_right")),
    "extend_word_left": ActionDef("Extend back a word", _selection_handler("extend_word_left")),
    "extend_word_right": ActionDef("Extend forward a word", _selection_handler("extend_word_right")),
    "extend_line_up": ActionDef("Extend up a line", _selection_handler("extend_line_up")),
    "extend_line_down": ActionDef("Extend down a line", _selection_handler("extend_line_down")),
    "extend_sentence_left": ActionDef(
        "Extend back a sentence", _selection_handler("extend_sentence_left")
    ),
    "extend_sentence_right": ActionDef(
        "Extend forward a sentence", _selection_handler("extend_sentence_right")
    ),
    "enter_range": ActionDef("Start selecting", enter_range),
    "collapse_to_caret": ActionDef("Collapse selection", collapse_to_caret),
    "exit_visual": ActionDef("Leave visual mode", exit_visual),
    "select_word": ActionDef("Select word", select_word),
    "select_paragraph": ActionDef("Select paragraph", select_paragraph),
    "find_char_forward": ActionDef("Find character", _find_handler(Direction.FORWARD, Bias.AFTER)),
    "find_char_backward": ActionDef(
        "Find character backward", _find_handler(Direction.BACKWARD, Bias.BEFORE)
    ),
    "till_char_forward": ActionDef("Till character", _find_handler(Direction.FORWARD, Bias.BEFORE)),
    "till_char_backward": ActionDef(
        "Till character backward", _find_handler(Direction.BACKWARD, Bias.AFTER)
    ),
    "repeat_search": ActionDef("Repeat find", repeat_search),
    "repeat_search_reverse": ActionDef("Repeat find reversed", repeat_search_reverse),
    "copy_selection": ActionDef("Copy selection", copy_selection),
    "search_selection": ActionDef("Search selection", search_selection),
}


def get_action(name: str) -> ActionDef | None:
    """Get an action definition by name."""
    return ACTIONS.get(name)


# ─────────────────────────────────────────────────────────────────
# Default bindings
# ─────────────────────────────────────────────────────────────────

_MOTIONS = [
    ("h", "char_left"),
    ("l", "char_right"),
    ("b", "word_left"),
    ("w", "word_right"),
    ("k", "line_up"),
    ("j", "line_down"),
    ("S-(", "sentence_left"),
    ("S-)", "sentence_right"),
]

_FIND = [
    Binding("f", "find_char_forward"),
    Binding("S-f", "find_char_backward"),
    Binding("t", "till_char_forward"),
    Binding("S-t", "till_char_backward"),
    Binding(";", "repeat_search"),
    Binding(",", "repeat_search_reverse"),
]

DEFAULT_BINDINGS: dict[Mode, list[Binding]] = {
    Mode.NORMAL: [
        Binding("j", "scroll_down"),
        Binding("k", "scroll_up"),
        Binding("d", "scroll_half_page_down"),
        Binding("e", "scroll_half_page_up"),
        Binding("g g", "scroll_to_top"),
        Binding("S-g", "scroll_to_bottom"),
        Binding("f", "hint_click"),
        Binding("g f", "hint_new_tab_background"),
        Binding("S-f", "hint_new_tab_foreground"),
        Binding("g d", "hint_double_click"),
        Binding("g h", "hint_hover"),
        Binding("i", "hint_inputs"),
        Binding("v", "enter_visual"),
        Binding("S-j", "next_tab"),
        Binding("S-k", "previous_tab"),
        Binding("<leader> t d", "duplicate_tab"),
        Binding("<leader> t x", "close_tab"),
        Binding("<leader> t w", "move_tab_to_new_window"),
        Binding("<leader> t p", "reopen_tab_in_private_window"),
        Binding("l f", "toggle_link_list"),
        Binding("S-?", "toggle_help"),
        Binding("A-p", "toggle_passthrough"),
    ],
    Mode.VISUAL_CARET: [
        *(Binding(key, f"move_{motion}") for key, motion in _MOTIONS),
        *(Binding(f"S-{key}", f"extend_{motion}") for key, motion in _MOTIONS if len(key) == 1),
        Binding("v", "enter_range"),
        Binding("i w", "select_word"),
        Binding("i p", "select_paragraph"),
        *_FIND,
        Binding("S-?", "toggle_help"),
        Binding("escape", "exit_visual"),
    ],
    Mode.VISUAL_RANGE: [
        *(Binding(key, f"extend_{motion}") for key, motion in _MOTIONS),
        *(Binding(f"S-{key}", f"extend_{motion}") for key, motion in _MOTIONS if len(key) == 1),
        *_FIND,
        Binding("y", "copy_selection"),
        Binding("s", "search_selection"),
        Binding("c", "collapse_to_caret"),
        Binding("v", "collapse_to_caret"),
        Binding("S-?", "toggle_help"),
        Binding("escape", "collapse_to_caret"),
    ],
}

# Modes whose chords are single keys with modifiers significant only as part
# of a binding; their gate compares bare key names.
STRIPPED_MODES = frozenset({Mode.VISUAL_CARET, Mode.VISUAL_RANGE})


def build_table(machine: ModeStateMachine, bindings: list[Binding], strip: bool = False) -> ActionTable:
    """Bind each named action to ``machine`` and build an ActionTable.

    Raises:
        KeyError: If a binding names an unknown action.
    """
    table: dict[str, Action] = {}
    for binding in bindings:
        definition = ACTIONS[binding.action]
        table[binding.chord] = Action(
            binding.action, definition.description, partial(definition.handler, machine)
        )
    return ActionTable(table, strip=strip)


def build_tables(
    machine: ModeStateMachine,
    bindings: dict[Mode, list[Binding]] | None = None,
) -> dict[Mode, ActionTable]:
    bindings = bindings or DEFAULT_BINDINGS
    return {
        mode: build_table(machine, mode_bindings, strip=mode in STRIPPED_MODES)
        for mode, mode_bindings in bindings.items()
    }
