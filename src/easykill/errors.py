"""Exception hierarchy shared by the library modules.

Library code raises these; only the CLI turns them into messages and exit codes.
"""


class EasyKillError(Exception):
    """Base class for all easykill errors."""

    pass


class TerminalIOError(EasyKillError, OSError):
    """Writing a line, reading a key or erasing lines on the terminal failed."""

    pass


class ProcessListingError(EasyKillError):
    """The process listing command could not be run."""

    pass


class InvalidPidRangeError(EasyKillError, ValueError):
    """Raised when a pid range is not of the form START-END with START <= END."""

    pass
