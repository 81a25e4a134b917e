"""Rich + readchar implementation of TerminalSurface."""

import termios

import readchar
from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

from easykill.errors import TerminalIOError
from easykill.ui.base import KeyEvent, KeyKind, classify_key


class RichTerminal:
    """Draws lines through a rich Console and reads keys with readchar.

    Lines are cropped to the console width so that erasing N lines always
    removes exactly the N rows that were drawn.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def write_line(self, text: str) -> None:
        self.console.print(Text(text), no_wrap=True, overflow="ellipsis", crop=True)

    def read_key(self) -> KeyEvent:
        try:
            raw = readchar.readkey()
        except KeyboardInterrupt:
            # Ctrl+C cancels like escape
            return KeyEvent(KeyKind.ESCAPE)
        except (termios.error, EOFError) as e:
            raise TerminalIOError(f"could not read a key: {e}") from e
        if not raw:
            raise TerminalIOError("could not read a key: end of input")
        return classify_key(raw)

    def clear_last_lines(self, count: int) -> None:
        if count <= 0:
            return
        codes = [ControlType.CARRIAGE_RETURN]
        for _ in range(count):
            codes.extend([(ControlType.CURSOR_UP, 1), (ControlType.ERASE_IN_LINE, 2)])
        self.console.control(Control(*codes))
