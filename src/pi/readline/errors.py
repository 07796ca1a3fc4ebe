"""Failures delivered through a read's future."""

from __future__ import annotations


class ReadlineError(Exception):
    """Base class for readline failures."""


class NotActiveError(ReadlineError):
    """A read was requested before a terminal was attached."""

    def __init__(self, message: str = "readline is not active") -> None:
        super().__init__(message)


class ReadAbortedError(ReadlineError):
    """A pending read was cancelled before a line was submitted."""

    def __init__(self, message: str = "read aborted") -> None:
        super().__init__(message)
