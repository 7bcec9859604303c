"""Mode state machine, actions and the collaborators it drives."""

from .actions import ACTIONS, DEFAULT_BINDINGS, Binding, build_tables, get_action
from .interaction import apply_intent, is_text_input_like
from .keymap import KeymapError, KeymapManager
from .machine import KeyResult, ModeStateMachine
from .overlay import HintOverlay, NullOverlay
from .scrolling import Scroller

__all__ = [
    "ACTIONS",
    "Binding",
    "DEFAULT_BINDINGS",
    "HintOverlay",
    "KeyResult",
    "KeymapError",
    "KeymapManager",
    "ModeStateMachine",
    "NullOverlay",
    "Scroller",
    "apply_intent",
    "build_tables",
    "get_action",
    "is_text_input_like",
]
