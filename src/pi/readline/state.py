"""Line-edit state machine.

A :class:`State` owns the buffer and cursor of a single read. Every edit
recomputes the layout of prompt and buffer on the terminal and brings the
on-screen cursor back in sync. Cursor-only moves emit just the relative
motion; anything that changes text redraws the edit region.
"""

from __future__ import annotations

from dataclasses import dataclass

from pi.readline.highlight import Highlighter
from pi.readline.history import History
from pi.readline.tty import CLEAR_FROM_CURSOR, Position, Tty
from pi.readline.utils import is_whitespace_char


@dataclass(frozen=True)
class Layout:
    """Where prompt, cursor and buffer end sit on screen."""

    prompt_size: Position = Position()
    cursor: Position = Position()
    end: Position = Position()


class State:
    """Editable buffer, cursor and history navigation for one read."""

    def __init__(
        self,
        prompt: str,
        tty: Tty,
        highlighter: Highlighter,
        history: History,
    ) -> None:
        self._prompt = prompt
        self._tty = tty
        self._highlighter = highlighter
        self._history = history

        self._buf: str = ""
        self._pos: int = 0
        self._history_index: int | None = None
        # In-progress buffer saved when history browsing starts
        self._saved_buffer: str = ""

        prompt_size = tty.calculate_position(prompt)
        self._layout = Layout(prompt_size=prompt_size, cursor=prompt_size, end=prompt_size)
        # Cursor position as last drawn, relative to the prompt's first row
        self._screen_cursor = Position()

    # -- Accessors -----------------------------------------------------------

    def buffer(self) -> str:
        return self._buf

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def cursor(self) -> int:
        return self._pos

    @property
    def position(self) -> Position:
        return self._layout.cursor

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def history_index(self) -> int | None:
        return self._history_index

    # -- Editing -------------------------------------------------------------

    def edit_insert(self, text: str) -> None:
        if not text:
            return
        self._exit_history()
        self._buf = self._buf[: self._pos] + text + self._buf[self._pos :]
        self._pos += len(text)
        self.refresh()

    def edit_backspace(self, n: int = 1) -> None:
        n = min(n, self._pos)
        if n <= 0:
            return
        self._exit_history()
        self._buf = self._buf[: self._pos - n] + self._buf[self._pos :]
        self._pos -= n
        self.refresh()

    def edit_delete(self, n: int = 1) -> None:
        n = min(n, len(self._buf) - self._pos)
        if n <= 0:
            return
        self._exit_history()
        self._buf = self._buf[: self._pos] + self._buf[self._pos + n :]
        self.refresh()

    def edit_delete_end_of_line(self) -> None:
        end = self._line_end()
        if end == self._pos:
            return
        self._exit_history()
        self._buf = self._buf[: self._pos] + self._buf[end:]
        self.refresh()

    def edit_delete_word_backward(self) -> None:
        start = self._pos
        line_start = self._line_start()
        while start > line_start and is_whitespace_char(self._buf[start - 1]):
            start -= 1
        while start > line_start and not is_whitespace_char(self._buf[start - 1]):
            start -= 1
        self.edit_backspace(self._pos - start)

    def update(self, text: str) -> None:
        """Replace the whole buffer and put the cursor at its end."""
        self._exit_history()
        self._buf = text
        self._pos = len(text)
        self.refresh()

    # -- Cursor movement -----------------------------------------------------

    def move_cursor_back(self, n: int = 1) -> None:
        self._move_cursor_to(max(self._pos - n, 0))

    def move_cursor_forward(self, n: int = 1) -> None:
        self._move_cursor_to(min(self._pos + n, len(self._buf)))

    def move_cursor_home(self) -> None:
        self._move_cursor_to(self._line_start())

    def move_cursor_end(self) -> None:
        self._move_cursor_to(self._line_end())

    def move_cursor_to_end(self) -> None:
        self._move_cursor_to(len(self._buf))

    def move_cursor_up(self, n: int = 1) -> None:
        """Move up *n* visual rows, or back through history from the top row."""
        if n <= 0:
            return
        cursor = self._layout.cursor
        top = self._layout.prompt_size.row
        if cursor.row > top:
            target = Position(max(cursor.row - n, top), cursor.col)
            self._move_cursor_to(self._offset_at(target))
        else:
            self._history_previous(n)

    def move_cursor_down(self, n: int = 1) -> None:
        """Move down *n* visual rows, or forward through history from the last row."""
        if n <= 0:
            return
        cursor = self._layout.cursor
        if cursor.row < self._layout.end.row:
            target = Position(min(cursor.row + n, self._layout.end.row), cursor.col)
            self._move_cursor_to(self._offset_at(target))
        else:
            self._history_next(n)

    # -- Redraw --------------------------------------------------------------

    def refresh(self) -> None:
        """Redraw prompt and buffer and place the cursor. Does not edit."""
        tty = self._tty
        prompt_size = tty.calculate_position(self._prompt)
        cursor = tty.calculate_position(self._buf[: self._pos], prompt_size)
        end = tty.calculate_position(self._buf, prompt_size)

        up = tty.cursor_motion(self._screen_cursor, Position(0, self._screen_cursor.col))
        out = [up, "\r", CLEAR_FROM_CURSOR]
        out.append(self._prompt)
        out.append(self._highlighter(self._buf))
        if end.col == 0 and end.row > 0 and not (self._prompt + self._buf).endswith("\n"):
            # Text ended exactly on the last column; make the terminal wrap
            out.append("\n")
        out.append(tty.cursor_motion(end, cursor))
        tty.write("".join(out))

        self._layout = Layout(prompt_size=prompt_size, cursor=cursor, end=end)
        self._screen_cursor = cursor

    def clear_screen(self) -> None:
        self._tty.clear_screen()
        self._screen_cursor = Position()
        self.refresh()

    # -- Internal helpers ----------------------------------------------------

    def _move_cursor_to(self, pos: int) -> None:
        if pos == self._pos:
            return
        self._pos = pos
        cursor = self._tty.calculate_position(self._buf[:pos], self._layout.prompt_size)
        self._tty.move_cursor(self._screen_cursor, cursor)
        self._layout = Layout(
            prompt_size=self._layout.prompt_size, cursor=cursor, end=self._layout.end
        )
        self._screen_cursor = cursor

    def _line_start(self) -> int:
        return self._buf.rfind("\n", 0, self._pos) + 1

    def _line_end(self) -> int:
        end = self._buf.find("\n", self._pos)
        return len(self._buf) if end == -1 else end

    def _offset_at(self, target: Position) -> int:
        """Buffer offset closest to *target* without passing its column.

        If every offset on the row lies right of the column (the column
        falls inside the prompt or a wide character) the row's first
        offset is used.
        """
        first: int | None = None
        best: int | None = None
        for offset, position in self._tty.iter_positions(self._buf, self._layout.prompt_size):
            if position.row > target.row:
                break
            if position.row != target.row:
                continue
            if first is None:
                first = offset
            if position.col <= target.col:
                best = offset
        if best is not None:
            return best
        return self._pos if first is None else first

    # -- History navigation --------------------------------------------------

    def _exit_history(self) -> None:
        self._history_index = None
        self._saved_buffer = ""

    def _history_previous(self, n: int) -> None:
        if len(self._history) == 0:
            return
        if self._history_index is None:
            index = n - 1
        else:
            index = self._history_index + n
        index = min(index, len(self._history) - 1)
        if index == self._history_index:
            return
        if self._history_index is None:
            self._saved_buffer = self._buf
        self._history_index = index
        self._set_buffer(self._history.get(index) or "")

    def _history_next(self, n: int) -> None:
        if self._history_index is None:
            return
        index = self._history_index - n
        if index < 0:
            text = self._saved_buffer
            self._exit_history()
        else:
            self._history_index = index
            text = self._history.get(index) or ""
        self._set_buffer(text)

    def _set_buffer(self, text: str) -> None:
        self._buf = text
        self._pos = len(text)
        self.refresh()
