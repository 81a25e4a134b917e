"""CLI commands."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

from easykill import __version__
from easykill.errors import InvalidPidRangeError
from easykill.processes import PidRange, parse_pid_range

if TYPE_CHECKING:
    from easykill.config import Config

app = typer.Typer(
    name="easykill",
    help="Easy kill processes - pick matching processes from a checklist and terminate them.",
    add_completion=False,
)
console = Console()
logger = logging.getLogger("easykill.cli")


def _get_config() -> Config:
    """Lazy import and load config."""
    from easykill.config import Config

    return Config.load()


def _setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"easykill version: {__version__}")
        raise typer.Exit()


def _pid_range_callback(value: str | None) -> PidRange | None:
    if value is None:
        return None
    try:
        return parse_pid_range(value)
    except InvalidPidRangeError:
        raise typer.BadParameter("Invalid pid range") from None


@app.command()
def main(
    pattern: Annotated[
        str | None, typer.Argument(help="Regex matched against each `ps aux` row")
    ] = None,
    selected: Annotated[
        bool, typer.Option("--selected", "-s", help="Start with every process checked")
    ] = False,
    pid_range: Annotated[
        str | None,
        typer.Option(
            "--pid-range",
            "-r",
            metavar="START-END",
            help="Only consider pids in this inclusive range",
            callback=_pid_range_callback,
        ),
    ] = None,
    no_clear: Annotated[
        bool, typer.Option("--no-clear", help="Keep the menu on screen after exit")
    ] = False,
    sig: Annotated[
        str | None, typer.Option("--signal", help="Signal to send (default from config: TERM)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = False,
):
    """Select processes matching PATTERN and send them a signal."""
    from easykill.errors import ProcessListingError, TerminalIOError
    from easykill.processes import list_processes, resolve_signal, terminate
    from easykill.ui.checkbox import Checkbox

    _setup_logging(verbose)
    cfg = _get_config()

    if pattern is None:
        console.print("no pattern given!")
        raise typer.Exit(1)

    try:
        regex = re.compile(pattern)
    except re.error as e:
        console.print(f"[red]Invalid pattern '{escape(pattern)}': {e}[/red]")
        raise typer.Exit(2) from None

    try:
        signum = resolve_signal(sig or cfg.signal)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from None

    try:
        stats = list_processes(regex, pid_range, cfg.ps_argv)
    except ProcessListingError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        raise typer.Exit(1) from None

    if not stats:
        console.print("[yellow]WARNING: no process found![/yellow]")
        return

    labels = [proc.label for proc in stats]
    checkbox = (
        Checkbox()
        .clear(cfg.clear_on_exit and not no_clear)
        .default(selected or cfg.preselect)
        .items(labels)
    )
    try:
        selections = checkbox.interact()
    except TerminalIOError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        raise typer.Exit(1) from None

    if not selections:
        console.print("You did not select anything :(")
        return

    console.print("You selected these processes:")
    for idx in selections:
        result = terminate(stats[idx].pid, signum)
        label = escape(labels[idx])
        if result.ok:
            console.print(f" [green]success[/green] {label}")
        else:
            console.print(f" [red]failed({result.errno}: {result.error})[/red] {label}")
            logger.debug("could not signal %d", result.pid)
