"""Terminal surface protocol the checkbox menu draws on."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import readchar


class KeyKind(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CHAR = "char"
    ESCAPE = "escape"
    ENTER = "enter"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """One discrete key press. `char` is only set for CHAR keys."""

    kind: KeyKind
    char: str | None = None

    @classmethod
    def of_char(cls, char: str) -> "KeyEvent":
        return cls(KeyKind.CHAR, char)


_ARROWS: dict[str, KeyKind] = {
    readchar.key.UP: KeyKind.UP,
    readchar.key.DOWN: KeyKind.DOWN,
    readchar.key.LEFT: KeyKind.LEFT,
    readchar.key.RIGHT: KeyKind.RIGHT,
}


def classify_key(raw: str) -> KeyEvent:
    """Map a raw key string from readchar to a KeyEvent."""
    if raw in _ARROWS:
        return KeyEvent(_ARROWS[raw])
    if raw.startswith("\x1b") and raw[1:2] not in ("[", "O"):
        # readchar returns a lone escape together with the key pressed after it
        return KeyEvent(KeyKind.ESCAPE)
    if raw in ("\r", "\n"):
        return KeyEvent(KeyKind.ENTER)
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.of_char(raw)
    return KeyEvent(KeyKind.OTHER)


class TerminalSurface(Protocol):
    """Protocol for the character terminal a menu renders on."""

    def write_line(self, text: str) -> None:
        """Append one line of text to the display."""
        ...

    def read_key(self) -> KeyEvent:
        """Block until one key is pressed."""
        ...

    def clear_last_lines(self, count: int) -> None:
        """Erase the most recently written `count` lines."""
        ...
