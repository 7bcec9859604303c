"""quicksilver - Vim-style keyboard navigation engine."""

from .config import Settings
from .core.keys import KeyEvent
from .core.state import Mode
from .engine.machine import KeyResult, ModeStateMachine

__version__ = "0.1.0"

__all__ = [
    "KeyEvent",
    "KeyResult",
    "Mode",
    "ModeStateMachine",
    "Settings",
    "__version__",
]
