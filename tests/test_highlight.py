"""Tests for pi.readline.highlight."""

from __future__ import annotations

from pi.readline.highlight import bracket_highlighter, identity_highlighter
from pi.readline.utils import strip_ansi


class TestIdentityHighlighter:
    def test_returns_text_unchanged(self) -> None:
        assert identity_highlighter("(a [b]\n") == "(a [b]\n"


class TestBracketHighlighter:
    def test_balanced_text_is_unchanged(self) -> None:
        hl = bracket_highlighter()
        assert hl("f(a[1], {b})") == "f(a[1], {b})"

    def test_unclosed_bracket_is_styled(self) -> None:
        hl = bracket_highlighter("<", ">")
        assert hl("f(a[1]") == "f<(>a[1]"

    def test_mismatched_closer_leaves_opener_unclosed(self) -> None:
        hl = bracket_highlighter("<", ">")
        assert hl("(]") == "<(>]"

    def test_styling_keeps_visible_text(self) -> None:
        hl = bracket_highlighter()
        text = "((a)"
        assert strip_ansi(hl(text)) == text
