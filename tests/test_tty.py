"""Tests for pi.readline.tty -- wrap math and cursor motion."""

from __future__ import annotations

from pi.readline.tty import Position, Tty
from pi.readline.utils import strip_ansi

from .virtual_terminal import RecordingOutput


def make_tty(columns: int = 10, tab_width: int = 8) -> Tty:
    return Tty(columns, 24, tab_width, RecordingOutput())


class TestCalculatePosition:
    """Cursor position after writing text."""

    def test_empty_text(self) -> None:
        assert make_tty().calculate_position("") == Position(0, 0)

    def test_short_text(self) -> None:
        assert make_tty().calculate_position("abc") == Position(0, 3)

    def test_offset_origin(self) -> None:
        assert make_tty().calculate_position("ab", Position(1, 2)) == Position(1, 4)

    def test_exact_fill_ends_on_next_row(self) -> None:
        assert make_tty(10).calculate_position("a" * 10) == Position(1, 0)

    def test_wraps_long_text(self) -> None:
        assert make_tty(10).calculate_position("a" * 23) == Position(2, 3)

    def test_newline_moves_to_next_row(self) -> None:
        assert make_tty().calculate_position("ab\ncd") == Position(1, 2)

    def test_newline_after_exact_fill_does_not_add_blank_row(self) -> None:
        # The terminal wraps lazily, so the newline does not add a blank row
        assert make_tty(10).calculate_position("a" * 10 + "\nb") == Position(1, 1)

    def test_tab_moves_to_next_stop(self) -> None:
        assert make_tty(40, 8).calculate_position("ab\t") == Position(0, 8)
        assert make_tty(40, 4).calculate_position("\t\t") == Position(0, 8)

    def test_tab_clamps_to_last_column(self) -> None:
        assert make_tty(10, 8).calculate_position("abcdefghi\t") == Position(0, 9)

    def test_wide_characters(self) -> None:
        assert make_tty(40).calculate_position("世界") == Position(0, 4)

    def test_wide_character_that_does_not_fit_wraps(self) -> None:
        assert make_tty(5).calculate_position("abcd世") == Position(1, 2)

    def test_combining_mark_is_zero_width(self) -> None:
        assert make_tty(40).calculate_position("e\u0301") == Position(0, 1)

    def test_ansi_styling_takes_no_cells(self) -> None:
        assert make_tty(40).calculate_position("\x1b[1mab\x1b[22m") == Position(0, 2)

    def test_zero_columns_never_wraps(self) -> None:
        assert make_tty(0).calculate_position("a" * 500) == Position(0, 500)

    def test_single_row_matches_per_grapheme_layout(self) -> None:
        tty = make_tty(12)
        for text in ("ab", "日本x", "éz", "\x1b[1m日\x1b[22m", "abcdefghi日"):
            positions = list(tty.iter_positions(strip_ansi(text), Position(0, 2)))
            assert tty.calculate_position(text, Position(0, 2)) == positions[-1][1]


class TestIterPositions:
    def test_offsets_and_positions(self) -> None:
        pairs = list(make_tty(3).iter_positions("abcd"))
        assert pairs == [
            (0, Position(0, 0)),
            (1, Position(0, 1)),
            (2, Position(0, 2)),
            (3, Position(1, 0)),
            (4, Position(1, 1)),
        ]


class TestCursorMotion:
    """Relative motion between two cells."""

    def test_no_motion(self) -> None:
        assert make_tty().cursor_motion(Position(1, 2), Position(1, 2)) == ""

    def test_left_and_right(self) -> None:
        tty = make_tty()
        assert tty.cursor_motion(Position(0, 5), Position(0, 3)) == "\x1b[2D"
        assert tty.cursor_motion(Position(0, 3), Position(0, 5)) == "\x1b[2C"

    def test_up_and_down(self) -> None:
        tty = make_tty()
        assert tty.cursor_motion(Position(2, 4), Position(0, 4)) == "\x1b[2A"
        assert tty.cursor_motion(Position(0, 4), Position(1, 4)) == "\x1b[1B"

    def test_to_first_column_uses_carriage_return(self) -> None:
        assert make_tty().cursor_motion(Position(1, 4), Position(0, 0)) == "\x1b[1A\r"

    def test_move_cursor_writes_motion(self) -> None:
        out = RecordingOutput()
        tty = Tty(10, 24, 8, out)
        tty.move_cursor(Position(0, 0), Position(1, 3))
        assert out.text == "\x1b[1B\x1b[3C"

    def test_move_cursor_without_motion_writes_nothing(self) -> None:
        out = RecordingOutput()
        tty = Tty(10, 24, 8, out)
        tty.move_cursor(Position(0, 1), Position(0, 1))
        assert out.chunks == []
