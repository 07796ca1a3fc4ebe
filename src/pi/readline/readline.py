"""Readline session: reads edited lines from a terminal surface.

:class:`Readline` is attached to a terminal surface with :meth:`activate`.
Each call to :meth:`read` shows a prompt and returns a future that is
resolved with the submitted line, or failed with :class:`ReadAbortedError`
if the read is cancelled. Only one read is active at a time.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Callable

from pi.readline.config import ReadlineConfig
from pi.readline.errors import NotActiveError, ReadAbortedError
from pi.readline.highlight import Highlighter, identity_highlighter
from pi.readline.history import History, JsonFileHistoryStorage
from pi.readline.keymap import Input, InputType, is_paste, parse_input
from pi.readline.state import State
from pi.readline.terminal import TerminalSurface
from pi.readline.tty import Output, Tty
from pi.readline.watermark import Watermark

logger = logging.getLogger(__name__)

CheckHandler = Callable[[str], bool]
DefaultHandler = Callable[[Input], None]
PauseHandler = Callable[[bool], None]

_BARE_LF_RE = re.compile(r"(?<!\r)\n")


def normalize_newlines(text: str) -> str:
    """Turn every line feed not preceded by a carriage return into CRLF."""
    return _BARE_LF_RE.sub("\r\n", text)


@dataclass
class ActiveRead:
    prompt: str
    future: asyncio.Future[str]


class Readline:
    """Line editor session bound to at most one terminal surface."""

    def __init__(
        self,
        config: ReadlineConfig | None = None,
        *,
        history: History | None = None,
    ) -> None:
        self._config = config or ReadlineConfig()
        self._term: TerminalSurface | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._active_read: ActiveRead | None = None
        self._disabled = False

        self._watermark = Watermark(self._config.high_watermark, self._config.low_watermark)
        self._highlighter: Highlighter = identity_highlighter

        if history is None:
            storage = (
                JsonFileHistoryStorage(self._config.history_path)
                if self._config.history_path
                else None
            )
            history = History(self._config.history_size, storage)
            history.restore()
        self._history = history

        self._check_handler: CheckHandler = lambda text: True
        self._pause_handler: PauseHandler = lambda resume: None
        self._default_handler: DefaultHandler = lambda input: None

        self._state = State(">", self.tty(), self._highlighter, self._history)

    # -- Lifecycle -------------------------------------------------------------

    def activate(self, term: TerminalSurface) -> None:
        """Attach to *term* and start consuming its input."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._term = term
        self._watermark.reset()
        self._unsubscribe = term.on_data(self.read_data)

    def dispose(self) -> None:
        """Detach from the terminal, aborting any pending read."""
        self.abort_active_read()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._term = None

    def enable(self) -> None:
        self._disabled = False

    def disable(self) -> None:
        self._disabled = True

    @property
    def active(self) -> bool:
        return self._term is not None

    @property
    def history(self) -> History:
        return self._history

    @property
    def state(self) -> State:
        return self._state

    # -- Handlers ------------------------------------------------------------

    def append_history(self, text: str) -> None:
        """Manually add a line to the history."""
        self._history.append(text)

    def set_highlighter(self, highlighter: Highlighter) -> None:
        """Use *highlighter* to style the buffer from the next read on."""
        self._highlighter = highlighter

    def set_check_handler(self, fn: CheckHandler) -> None:
        """Set the predicate deciding whether Enter submits the buffer.

        When *fn* returns ``False`` a newline is inserted instead, so the
        user can keep typing an incomplete multi-line input.
        """
        self._check_handler = fn

    def set_pause_handler(self, fn: PauseHandler) -> None:
        """Set the callback for Ctrl-S (``False``, pause) and Ctrl-Q (``True``, resume)."""
        self._pause_handler = fn

    def set_default_handler(self, fn: DefaultHandler) -> None:
        """Set the callback for input the editor does not handle itself."""
        self._default_handler = fn

    # -- Output ----------------------------------------------------------------

    def write_ready(self) -> bool:
        """``False`` while writes to the terminal are above the high watermark."""
        return self._watermark.accepting_input

    def write(self, text: str) -> None:
        text = normalize_newlines(text)
        if self._term is None:
            return
        size = len(text.encode("utf-8"))
        self._watermark.on_write(size)
        self._term.write(text, lambda: self._watermark.on_flushed(size))

    def print(self, text: str) -> None:
        self.write(text)

    def println(self, text: str) -> None:
        self.write(text + "\r\n")

    def output(self) -> Output:
        return self

    def tty(self) -> Tty:
        """Snapshot the current terminal geometry."""
        if self._term is not None:
            return Tty(self._term.columns, self._term.rows, self._term.tab_stop_width, self.output())
        return Tty(0, 0, self._config.tab_stop_width, self.output())

    # -- Reading ---------------------------------------------------------------

    def read(self, prompt: str) -> asyncio.Future[str]:
        """Show *prompt* and wait for one line of input.

        Must be called with a running event loop. An outstanding read is
        aborted first.
        """
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        if self._term is None:
            future.set_exception(NotActiveError())
            return future

        if self._active_read is not None:
            logger.debug("Aborting outstanding read for new read")
            self.abort_active_read()

        self._state = State(prompt, self.tty(), self._highlighter, self._history)
        self._state.refresh()
        self._active_read = ActiveRead(prompt, future)
        future.add_done_callback(self._on_read_done)
        return future

    def abort_active_read(self) -> None:
        """Fail the pending read, if any, with :class:`ReadAbortedError`."""
        active = self._active_read
        self._active_read = None
        if active is not None and not active.future.done():
            active.future.set_exception(ReadAbortedError())

    def _on_read_done(self, future: asyncio.Future[str]) -> None:
        # A read cancelled by its caller stops being the active one
        if self._active_read is not None and self._active_read.future is future:
            self._active_read = None

    def read_data(self, data: str) -> None:
        """Feed a chunk of raw terminal input."""
        inputs = parse_input(data)
        if not inputs:
            return
        if is_paste(inputs):
            self._read_paste(inputs)
        else:
            self._read_key(inputs[0])

    def _read_paste(self, inputs: list[Input]) -> None:
        for item in inputs:
            if item.input_type is InputType.ENTER:
                item = Input(InputType.TEXT, "\n")
            if item.input_type is InputType.TEXT:
                if self._accepts_edits():
                    self._state.edit_insert(item.data)
            else:
                self._read_key(item)

    def _accepts_edits(self) -> bool:
        if self._disabled:
            return False
        if self._active_read is None:
            logger.debug("Dropping input, no read is active")
            return False
        return True

    def _read_key(self, item: Input) -> None:  # noqa: C901
        if self._disabled:
            return

        kind = item.input_type
        if kind is InputType.CTRL_S:
            self._pause_handler(False)
            return
        if kind is InputType.CTRL_Q:
            self._pause_handler(True)
            return
        if kind not in _EDIT_INPUTS:
            self._default_handler(item)
            return
        if not self._accepts_edits():
            return

        state = self._state
        if kind is InputType.TEXT:
            state.edit_insert(item.data)
        elif kind is InputType.TAB:
            state.edit_insert("\t")
        elif kind in (InputType.SHIFT_ENTER, InputType.ALT_ENTER):
            state.edit_insert("\n")
        elif kind is InputType.ENTER:
            self._submit()
        elif kind is InputType.CTRL_U:
            state.update("")
        elif kind is InputType.CTRL_K:
            state.edit_delete_end_of_line()
        elif kind is InputType.CTRL_W:
            state.edit_delete_word_backward()
        elif kind is InputType.CTRL_L:
            state.clear_screen()
        elif kind in (InputType.HOME, InputType.CTRL_A):
            state.move_cursor_home()
        elif kind in (InputType.END, InputType.CTRL_E):
            state.move_cursor_end()
        elif kind is InputType.BACKSPACE:
            state.edit_backspace(1)
        elif kind is InputType.DELETE:
            state.edit_delete(1)
        elif kind is InputType.ARROW_LEFT:
            state.move_cursor_back(1)
        elif kind is InputType.ARROW_RIGHT:
            state.move_cursor_forward(1)
        elif kind is InputType.ARROW_UP:
            state.move_cursor_up(1)
        elif kind is InputType.ARROW_DOWN:
            state.move_cursor_down(1)

    def _submit(self) -> None:
        text = self._state.buffer()
        if not self._check_handler(text):
            self._state.edit_insert("\n")
            return

        self._state.move_cursor_to_end()
        self.write("\r\n")
        self._history.append(text)
        active = self._active_read
        self._active_read = None
        if active is not None and not active.future.done():
            active.future.set_result(text)


# Inputs handled by the editor itself; the rest go to the default handler
_EDIT_INPUTS = frozenset(
    {
        InputType.TEXT,
        InputType.TAB,
        InputType.ENTER,
        InputType.SHIFT_ENTER,
        InputType.ALT_ENTER,
        InputType.CTRL_A,
        InputType.CTRL_E,
        InputType.CTRL_K,
        InputType.CTRL_L,
        InputType.CTRL_U,
        InputType.CTRL_W,
        InputType.HOME,
        InputType.END,
        InputType.BACKSPACE,
        InputType.DELETE,
        InputType.ARROW_UP,
        InputType.ARROW_DOWN,
        InputType.ARROW_LEFT,
        InputType.ARROW_RIGHT,
    }
)
