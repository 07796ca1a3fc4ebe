"""Highlight transforms applied to the edit buffer before it is drawn.

A highlighter maps buffer text to its display form. The display form may
add ANSI styling but must not change the visible characters, since cursor
placement is computed from the unstyled buffer.
"""

from __future__ import annotations

from typing import Callable

Highlighter = Callable[[str], str]


def identity_highlighter(text: str) -> str:
    return text


def bracket_highlighter(style: str = "\x1b[1m", reset: str = "\x1b[22m") -> Highlighter:
    """Build a highlighter that styles brackets which are never closed."""
    pairs = {")": "(", "]": "[", "}": "{"}

    def highlight(text: str) -> str:
        stack: list[int] = []
        for i, ch in enumerate(text):
            if ch in "([{":
                stack.append(i)
            elif ch in pairs and stack and text[stack[-1]] == pairs[ch]:
                stack.pop()
        if not stack:
            return text
        unmatched = set(stack)
        return "".join(
            f"{style}{ch}{reset}" if i in unmatched else ch for i, ch in enumerate(text)
        )

    return highlight
