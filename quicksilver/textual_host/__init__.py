"""Textual integration: screens as documents, key routing and hint drawing."""

from .keys import key_event_from_textual
from .navigator import HintLayer, KeyboardNavigator, TextualOverlay
from .provider import TextualDocument

__all__ = [
    "HintLayer",
    "KeyboardNavigator",
    "TextualDocument",
    "TextualOverlay",
    "key_event_from_textual",
]
