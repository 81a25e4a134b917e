"""Multi-select checkbox menu with a leading "select all" entry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from easykill.errors import TerminalIOError
from easykill.ui.base import KeyEvent, KeyKind

if TYPE_CHECKING:
    from easykill.ui.base import TerminalSurface

logger = logging.getLogger("easykill.ui")

ALL_LABEL = "ALL"


class CheckboxResult(NamedTuple):
    """Selected indices plus whether the user confirmed (Enter) or cancelled (Esc)."""

    indices: list[int]
    confirmed: bool


@dataclass
class CheckboxState:
    """Per-session cursor and selection flags.

    Entry 0 is the "select all" entry: it is checked exactly when every other
    entry is checked. A cursor of None means no entry is highlighted yet.
    """

    selected: list[bool]
    cursor: int | None = 0

    @classmethod
    def fresh(cls, size: int, default: bool = False) -> CheckboxState:
        return cls(selected=[default] * size)

    def __len__(self) -> int:
        return len(self.selected)

    def move_down(self) -> None:
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = (self.cursor + 1) % len(self)

    def move_up(self) -> None:
        if self.cursor is None:
            self.cursor = len(self) - 1
        else:
            self.cursor = (self.cursor - 1 + len(self)) % len(self)

    def toggle(self) -> None:
        """Flip the entry under the cursor and resync the "select all" entry."""
        if self.cursor is None:
            return
        self.selected[self.cursor] = not self.selected[self.cursor]
        if self.cursor == 0:
            # Fan out to every real entry
            self.selected[1:] = [self.selected[0]] * (len(self) - 1)
        else:
            self.selected[0] = all(self.selected[1:])

    def selection(self) -> list[int]:
        """Indices of checked entries, relative to the caller's labels."""
        return [idx for idx, flag in enumerate(self.selected[1:]) if flag]

    def render(self, labels: list[str]) -> list[str]:
        return [
            f"{'>' if self.cursor == idx else ' '} [{'x' if self.selected[idx] else ' '}] {label}"
            for idx, label in enumerate(labels)
        ]


class Checkbox:
    """Renders a multi-select checkbox menu.

    Example:
        picked = Checkbox().items(["nginx", "redis"]).interact()

    Keys: up/k and down/j move (wrapping), space toggles, enter confirms,
    escape cancels. Cancelling and confirming with nothing checked both
    return an empty list; use run_detailed() to tell them apart.
    """

    def __init__(self, clear: bool = True, default: bool = False):
        self._labels: list[str] = [ALL_LABEL]
        self._clear = clear
        self._default = default

    @property
    def labels(self) -> list[str]:
        """All entries, including the leading "select all" entry."""
        return list(self._labels)

    def clear(self, value: bool) -> Checkbox:
        """Set whether the menu erases itself on exit. Default is True."""
        self._clear = value
        return self

    def default(self, value: bool) -> Checkbox:
        """Set whether every entry starts out checked."""
        self._default = value
        return self

    def item(self, label: str) -> Checkbox:
        self._labels.append(label)
        return self

    def items(self, labels: Iterable[str]) -> Checkbox:
        self._labels.extend(labels)
        return self

    def interact(self) -> list[int]:
        """Run on stderr and return the selected indices."""
        from easykill.ui.terminal import RichTerminal

        return self.run(RichTerminal())

    def run(self, surface: TerminalSurface) -> list[int]:
        """Run the menu on `surface` and return the selected indices."""
        return self.run_detailed(surface).indices

    interact_on = run

    def run_detailed(self, surface: TerminalSurface) -> CheckboxResult:
        """Run the menu and report whether it ended by confirm or cancel.

        Raises:
            TerminalIOError: If the surface fails to write, read or erase.
        """
        state = CheckboxState.fresh(len(self._labels), self._default)
        logger.debug("checkbox session started with %d entries", len(self._labels))
        try:
            while True:
                for line in state.render(self._labels):
                    surface.write_line(line)

                key = surface.read_key()
                if key.kind is KeyKind.ESCAPE:
                    self._finish(surface)
                    logger.debug("checkbox session cancelled")
                    return CheckboxResult([], confirmed=False)
                if key.kind is KeyKind.ENTER:
                    self._finish(surface)
                    indices = state.selection()
                    logger.debug("checkbox session confirmed with %d selected", len(indices))
                    return CheckboxResult(indices, confirmed=True)

                self._apply(state, key)
                surface.clear_last_lines(len(self._labels))
        except TerminalIOError:
            raise
        except OSError as e:
            raise TerminalIOError(f"terminal I/O failed: {e}") from e

    def _finish(self, surface: TerminalSurface) -> None:
        if self._clear:
            surface.clear_last_lines(len(self._labels))

    @staticmethod
    def _apply(state: CheckboxState, key: KeyEvent) -> None:
        if key.kind is KeyKind.DOWN or key == KeyEvent.of_char("j"):
            state.move_down()
        elif key.kind is KeyKind.UP or key == KeyEvent.of_char("k"):
            state.move_up()
        elif key == KeyEvent.of_char(" "):
            state.toggle()
