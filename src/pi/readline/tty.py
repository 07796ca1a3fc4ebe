"""Terminal geometry snapshot and cursor arithmetic.

:class:`Tty` captures the column count, row count and tab-stop width of the
attached terminal at the start of a read, and knows how text wraps on it.
All wrap math is done here; the terminal's own wrapping is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol

from pi.readline.utils import grapheme_width, graphemes, strip_ansi, visible_width

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_FROM_CURSOR = "\x1b[0J"
CLEAR_SCREEN = "\x1b[2J\x1b[H"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"
_CURSOR_BACK_FMT = "\x1b[{}D"


class Output(Protocol):
    """Where rendered text goes."""

    def write(self, text: str) -> None: ...

    def print(self, text: str) -> None: ...

    def println(self, text: str) -> None: ...


@dataclass(frozen=True)
class Position:
    """A (row, col) cell relative to the row the prompt starts on."""

    row: int = 0
    col: int = 0


class Tty:
    """Snapshot of terminal geometry plus an output to draw on.

    A column count of 0 means the width is unknown; text is then laid out
    as if it never wraps.
    """

    def __init__(self, columns: int, rows: int, tab_width: int, output: Output) -> None:
        self.columns = columns
        self.rows = rows
        self.tab_width = tab_width if tab_width > 0 else 8
        self.out = output

    # -- Layout ---------------------------------------------------------------

    def iter_positions(self, text: str, orig: Position = Position()) -> Iterator[tuple[int, Position]]:
        """Yield ``(offset, position)`` for every grapheme boundary in *text*.

        The first pair is ``(0, orig)``. Each position is where the cursor
        sits once ``text[:offset]`` has been written starting at *orig*.
        """
        row, col = orig.row, orig.col
        cols = self.columns
        offset = 0
        yield 0, orig
        for g in graphemes(text):
            offset += len(g)
            if g in ("\n", "\r\n"):
                row += 1
                col = 0
            else:
                if cols and col >= cols:
                    # Deferred wrap from the previous character
                    row += 1
                    col = 0
                if g == "\t":
                    col = (col // self.tab_width + 1) * self.tab_width
                    if cols:
                        col = min(col, cols - 1)
                else:
                    w = grapheme_width(g)
                    if cols and col + w > cols:
                        # Wide character that does not fit moves to the next row
                        row += 1
                        col = 0
                    col += w
            yield offset, self._normalize(row, col)

    def calculate_position(self, text: str, orig: Position = Position()) -> Position:
        """Return the cursor position after writing *text* starting at *orig*.

        *text* may carry ANSI styling, which takes up no cells. A line that
        exactly fills the width ends on the first column of the next row.
        """
        text = strip_ansi(text)
        if "\n" not in text and "\t" not in text:
            width = visible_width(text)
            if not self.columns or orig.col + width < self.columns:
                return Position(orig.row, orig.col + width)
        position = orig
        for _, position in self.iter_positions(text, orig):
            pass
        return position

    def _normalize(self, row: int, col: int) -> Position:
        if self.columns and col >= self.columns:
            return Position(row + 1, 0)
        return Position(row, col)

    # -- Cursor motion --------------------------------------------------------

    def cursor_motion(self, src: Position, dst: Position) -> str:
        """Shortest relative escape sequence taking the cursor from *src* to *dst*."""
        parts: list[str] = []
        if dst.row < src.row:
            parts.append(_CURSOR_UP_FMT.format(src.row - dst.row))
        elif dst.row > src.row:
            parts.append(_CURSOR_DOWN_FMT.format(dst.row - src.row))
        if dst.col == 0 and src.col != 0:
            parts.append("\r")
        elif dst.col > src.col:
            parts.append(_CURSOR_FORWARD_FMT.format(dst.col - src.col))
        elif dst.col < src.col:
            parts.append(_CURSOR_BACK_FMT.format(src.col - dst.col))
        return "".join(parts)

    def move_cursor(self, src: Position, dst: Position) -> None:
        motion = self.cursor_motion(src, dst)
        if motion:
            self.write(motion)

    # -- Output ---------------------------------------------------------------

    def write(self, text: str) -> None:
        self.out.write(text)

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN)
