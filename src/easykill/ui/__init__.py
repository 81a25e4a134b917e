"""UI module."""

from .base import KeyEvent, KeyKind, TerminalSurface, classify_key
from .checkbox import ALL_LABEL, Checkbox, CheckboxResult, CheckboxState
from .terminal import RichTerminal

__all__ = [
    "ALL_LABEL",
    "Checkbox",
    "CheckboxResult",
    "CheckboxState",
    "KeyEvent",
    "KeyKind",
    "RichTerminal",
    "TerminalSurface",
    "classify_key",
]
