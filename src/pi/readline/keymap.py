"""Decoding of raw terminal input into typed edit events.

``parse_input`` scans a chunk of terminal input and classifies it into a
list of :class:`Input` events. Escape and control sequences are matched
against fixed lookup tables (longest match wins); runs of printable
characters become a single ``TEXT`` event so pasted bursts stay together.
Anything not in the tables is reported as an ``UNSUPPORTED_*`` event
carrying the raw text, never dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ESC = "\x1b"


class InputType(Enum):
    TEXT = "text"
    ENTER = "enter"
    SHIFT_ENTER = "shift+enter"
    ALT_ENTER = "alt+enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    CTRL_A = "ctrl+a"
    CTRL_C = "ctrl+c"
    CTRL_D = "ctrl+d"
    CTRL_E = "ctrl+e"
    CTRL_K = "ctrl+k"
    CTRL_L = "ctrl+l"
    CTRL_Q = "ctrl+q"
    CTRL_S = "ctrl+s"
    CTRL_U = "ctrl+u"
    CTRL_W = "ctrl+w"
    UNSUPPORTED_CONTROL_CHAR = "unsupported-control-char"
    UNSUPPORTED_ESCAPE = "unsupported-escape"


@dataclass(frozen=True)
class Input:
    """A decoded input event.

    ``data`` is the raw text the event was decoded from (the literal text
    for ``TEXT`` events).
    """

    input_type: InputType
    data: str


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

# Escape sequences -> input types (legacy xterm/vt220, SS3 application
# mode, kitty CSI-u and xterm modifyOtherKeys for modified Enter)
ESCAPE_SEQUENCES: dict[str, InputType] = {
    "\x1b[A": InputType.ARROW_UP,
    "\x1b[B": InputType.ARROW_DOWN,
    "\x1b[C": InputType.ARROW_RIGHT,
    "\x1b[D": InputType.ARROW_LEFT,
    "\x1bOA": InputType.ARROW_UP,
    "\x1bOB": InputType.ARROW_DOWN,
    "\x1bOC": InputType.ARROW_RIGHT,
    "\x1bOD": InputType.ARROW_LEFT,
    "\x1b[H": InputType.HOME,
    "\x1b[F": InputType.END,
    "\x1bOH": InputType.HOME,
    "\x1bOF": InputType.END,
    "\x1b[1~": InputType.HOME,
    "\x1b[7~": InputType.HOME,
    "\x1b[4~": InputType.END,
    "\x1b[8~": InputType.END,
    "\x1b[3~": InputType.DELETE,
    "\x1b\r": InputType.ALT_ENTER,
    "\x1b[13;3u": InputType.ALT_ENTER,
    "\x1b[13;2u": InputType.SHIFT_ENTER,
    "\x1b[27;2;13~": InputType.SHIFT_ENTER,
}

# Control characters -> input types
CONTROL_SEQUENCES: dict[str, InputType] = {
    "\r\n": InputType.ENTER,
    "\r": InputType.ENTER,
    "\n": InputType.ENTER,
    "\t": InputType.TAB,
    "\x7f": InputType.BACKSPACE,
    "\x08": InputType.BACKSPACE,
    "\x01": InputType.CTRL_A,
    "\x03": InputType.CTRL_C,
    "\x04": InputType.CTRL_D,
    "\x05": InputType.CTRL_E,
    "\x0b": InputType.CTRL_K,
    "\x0c": InputType.CTRL_L,
    "\x11": InputType.CTRL_Q,
    "\x13": InputType.CTRL_S,
    "\x15": InputType.CTRL_U,
    "\x17": InputType.CTRL_W,
}

_MAX_ESCAPE_LEN = max(len(seq) for seq in ESCAPE_SEQUENCES)
_MAX_CONTROL_LEN = max(len(seq) for seq in CONTROL_SEQUENCES)


def _is_control(ch: str) -> bool:
    cp = ord(ch)
    return cp < 0x20 or 0x7F <= cp <= 0x9F


def _longest_match(
    data: str, pos: int, table: dict[str, InputType], max_len: int
) -> str | None:
    for length in range(min(max_len, len(data) - pos), 0, -1):
        candidate = data[pos : pos + length]
        if candidate in table:
            return candidate
    return None


def _escape_length(data: str, pos: int) -> int:
    """Length of the (unrecognized) escape sequence starting at *pos*.

    CSI sequences run up to their final byte, SS3 sequences take one more
    character, anything else is ESC plus one character. Truncated sequences
    extend to the end of the chunk.
    """
    end = len(data)
    if pos + 1 >= end:
        return 1

    intro = data[pos + 1]
    if intro == ESC:
        # Meta-prefixed sequence, e.g. Alt+Up as ESC ESC [ A
        return 1 + _escape_length(data, pos + 1)
    if intro == "[":
        i = pos + 2
        while i < end and 0x30 <= ord(data[i]) <= 0x3F:  # parameter bytes
            i += 1
        while i < end and 0x20 <= ord(data[i]) <= 0x2F:  # intermediate bytes
            i += 1
        if i < end and 0x40 <= ord(data[i]) <= 0x7E:  # final byte
            i += 1
        return i - pos
    if intro == "O":
        return min(3, end - pos)
    return 2


def parse_input(data: str) -> list[Input]:
    """Decode a chunk of raw terminal input into a list of events."""
    inputs: list[Input] = []
    pos = 0
    end = len(data)

    while pos < end:
        ch = data[pos]

        if ch == ESC:
            seq = _longest_match(data, pos, ESCAPE_SEQUENCES, _MAX_ESCAPE_LEN)
            if seq is not None:
                inputs.append(Input(ESCAPE_SEQUENCES[seq], seq))
            else:
                seq = data[pos : pos + _escape_length(data, pos)]
                inputs.append(Input(InputType.UNSUPPORTED_ESCAPE, seq))
            pos += len(seq)
            continue

        if _is_control(ch):
            seq = _longest_match(data, pos, CONTROL_SEQUENCES, _MAX_CONTROL_LEN)
            if seq is not None:
                inputs.append(Input(CONTROL_SEQUENCES[seq], seq))
            else:
                seq = ch
                inputs.append(Input(InputType.UNSUPPORTED_CONTROL_CHAR, seq))
            pos += len(seq)
            continue

        start = pos
        while pos < end and data[pos] != ESC and not _is_control(data[pos]):
            pos += 1
        inputs.append(Input(InputType.TEXT, data[start:pos]))

    return inputs


def is_paste(inputs: list[Input]) -> bool:
    """Return ``True`` if a decoded chunk should be treated as a paste.

    A paste is any chunk that decoded to more than one event, or to a single
    text event longer than one character.
    """
    if len(inputs) > 1:
        return True
    return (
        len(inputs) == 1
        and inputs[0].input_type is InputType.TEXT
        and len(inputs[0].data) > 1
    )
