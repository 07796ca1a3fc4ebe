"""Terminal surfaces that a :class:`~pi.readline.readline.Readline` draws on.

Provides the ``TerminalSurface`` protocol and a concrete ``ProcessTerminal``
backed by the process's stdin/stdout, which puts stdin in raw mode and
feeds it to subscribers from the asyncio event loop.
"""

from __future__ import annotations

import asyncio
import os
import sys
import termios
import tty
from typing import Callable, Protocol

# ---------------------------------------------------------------------------
# TerminalSurface protocol
# ---------------------------------------------------------------------------


class TerminalSurface(Protocol):
    """Interface for the display a readline session writes to."""

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    @property
    def tab_stop_width(self) -> int: ...

    def write(self, data: str, on_flushed: Callable[[], None] | None = None) -> None:
        """Write *data*; call *on_flushed* exactly once when it has been handled."""
        ...

    def on_data(self, handler: Callable[[str], None]) -> Callable[[], None]:
        """Subscribe to input. Returns a callable that unsubscribes."""
        ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal surface backed by ``sys.stdin``/``sys.stdout``.

    :meth:`start` must be called from a running event loop. Raw mode is
    entered there and undone by :meth:`stop`.
    """

    def __init__(self, *, tab_stop_width: int = 8) -> None:
        self._tab_stop_width = tab_stop_width
        self._handlers: list[Callable[[str], None]] = []
        self._original_termios: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    @property
    def tab_stop_width(self) -> int:
        return self._tab_stop_width

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enable raw mode and begin reading stdin."""
        fd = sys.stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(fd, self._on_stdin_readable)

    def stop(self) -> None:
        """Stop reading stdin and restore the terminal attributes."""
        fd = sys.stdin.fileno()
        if self._loop is not None:
            try:
                self._loop.remove_reader(fd)
            except (RuntimeError, ValueError):
                pass
            self._loop = None

        if self._original_termios is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

    # -- input ----------------------------------------------------------------

    def on_data(self, handler: Callable[[str], None]) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _on_stdin_readable(self) -> None:
        try:
            raw = os.read(sys.stdin.fileno(), 4096)
        except OSError:
            return
        if not raw:
            return

        data = raw.decode("utf-8", errors="replace")
        for handler in list(self._handlers):
            handler(data)

    # -- output ---------------------------------------------------------------

    def write(self, data: str, on_flushed: Callable[[], None] | None = None) -> None:
        """Write to stdout and acknowledge on the next loop iteration."""
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass

        if on_flushed is None:
            return
        if self._loop is not None:
            self._loop.call_soon(on_flushed)
        else:
            on_flushed()
