"""Process listing via `ps aux` and signal delivery."""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass

from easykill.errors import InvalidPidRangeError, ProcessListingError

logger = logging.getLogger("easykill.processes")

# $> ps aux:
# USER PID %CPU %MEM VSZ RSS TT STAT STARTED TIME COMMAND
PS_PATTERN = re.compile(
    r"(?P<user>\S+)\s+"
    r"(?P<pid>\S+)\s+"
    r"(?P<cpu>\S+)\s+"
    r"(?P<mem>\S+)\s+"
    r"(?P<vsz>\S+)\s+"
    r"(?P<rss>\S+)\s+"
    r"(?P<tt>\S+)\s+"
    r"(?P<stat>\S+)\s+"
    r"(?P<started>\S+)\s+"
    r"(?P<time>\S+)\s+"
    r"(?P<command>.+)"
)
_PID_RANGE_PATTERN = re.compile(r"^(?P<start>\d+)-(?P<end>\d+)$")

MAX_PID = 2**32 - 1


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    user: str
    command: str

    @property
    def label(self) -> str:
        return f"[{self.pid}]: {self.command}"


@dataclass(frozen=True)
class PidRange:
    """Inclusive range of process ids."""

    start: int = 0
    end: int = MAX_PID

    def __contains__(self, pid: object) -> bool:
        return isinstance(pid, int) and self.start <= pid <= self.end


@dataclass(frozen=True)
class KillResult:
    pid: int
    ok: bool
    errno: int | None = None
    error: str | None = None


def parse_pid_range(text: str) -> PidRange:
    """Parse "START-END" into a PidRange.

    Raises:
        InvalidPidRangeError: If text is malformed or START > END.
    """
    match = _PID_RANGE_PATTERN.match(text.strip())
    if not match:
        raise InvalidPidRangeError(f"Invalid pid range: '{text}'")
    start, end = int(match["start"]), int(match["end"])
    if start > end:
        raise InvalidPidRangeError(f"Invalid pid range: '{text}' (start > end)")
    return PidRange(start, end)


def parse_ps_output(
    text: str,
    pattern: re.Pattern[str],
    pid_range: PidRange | None = None,
    exclude: Iterable[int] = (),
) -> list[ProcessInfo]:
    """Pick the rows of `ps aux` output that match `pattern`.

    The header line is skipped. Rows that don't parse, fall outside
    `pid_range`, or belong to an excluded pid are dropped.
    """
    pid_range = pid_range or PidRange()
    excluded = set(exclude)
    found: list[ProcessInfo] = []

    for line in text.splitlines()[1:]:
        if not pattern.search(line):
            continue
        caps = PS_PATTERN.match(line)
        if not caps or not caps["pid"].isdigit():
            logger.debug("Skipping unparseable ps row: %r", line)
            continue
        pid = int(caps["pid"])
        if pid in excluded or pid not in pid_range:
            continue
        found.append(ProcessInfo(pid=pid, user=caps["user"], command=caps["command"]))

    return found


def list_processes(
    pattern: re.Pattern[str],
    pid_range: PidRange | None = None,
    ps_command: list[str] | None = None,
) -> list[ProcessInfo]:
    """Run the process listing command and return matching processes.

    Neither this process nor the listing command itself is ever returned.

    Raises:
        ProcessListingError: If the listing command can't be run or fails.
    """
    argv = ps_command or ["ps", "aux"]
    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        stdout, stderr = proc.communicate()
    except OSError as e:
        raise ProcessListingError(f"run `{' '.join(argv)}` failed: {e}") from e

    if proc.returncode != 0:
        raise ProcessListingError(
            f"`{' '.join(argv)}` exited with {proc.returncode}: {stderr.strip()}"
        )

    processes = parse_ps_output(stdout, pattern, pid_range, exclude=(proc.pid, os.getpid()))
    logger.debug("%d processes match %r", len(processes), pattern.pattern)
    return processes


def resolve_signal(name: str) -> signal.Signals:
    """Resolve "TERM", "SIGTERM" or "15" to a signal."""
    name = name.strip().upper()
    if name.isdigit():
        return signal.Signals(int(name))
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    try:
        return signal.Signals[name]
    except KeyError:
        raise ValueError(f"Unknown signal: '{name}'") from None


def terminate(pid: int, sig: signal.Signals = signal.SIGTERM) -> KillResult:
    """Send `sig` to `pid`. Failures are reported in the result, not raised."""
    try:
        os.kill(pid, sig)
    except OSError as e:
        logger.debug("kill(%d, %s) failed: %s", pid, sig.name, e)
        return KillResult(pid=pid, ok=False, errno=e.errno, error=e.strerror)
    return KillResult(pid=pid, ok=True)
