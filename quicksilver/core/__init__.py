"""Labels, key tokens, chords, listeners and engine state."""

from .chords import Action, ActionTable, ChordOutcome, ChordResolver, ChordResult
from .keys import LEADER_TOKEN, KeyEvent, key_token
from .labels import DEFAULT_ALPHABET, HintLabelAllocator, label_for_index, labels_for, total_count
from .listeners import ListenerStack
from .state import EngineState, HintSession, Mode

__all__ = [
    "Action",
    "ActionTable",
    "ChordOutcome",
    "ChordResolver",
    "ChordResult",
    "DEFAULT_ALPHABET",
    "EngineState",
    "HintLabelAllocator",
    "HintSession",
    "KeyEvent",
    "LEADER_TOKEN",
    "ListenerStack",
    "Mode",
    "key_token",
    "label_for_index",
    "labels_for",
    "total_count",
]
