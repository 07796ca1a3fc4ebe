"""pi-readline: line editing for interactive terminal sessions."""

# Configuration
from pi.readline.config import ReadlineConfig

# Errors
from pi.readline.errors import NotActiveError, ReadAbortedError, ReadlineError

# Highlighting
from pi.readline.highlight import Highlighter, bracket_highlighter, identity_highlighter

# History
from pi.readline.history import (
    History,
    HistoryStorage,
    JsonFileHistoryStorage,
    MemoryHistoryStorage,
)

# Input decoding
from pi.readline.keymap import Input, InputType, is_paste, parse_input

# Session
from pi.readline.readline import Readline, normalize_newlines

# Line editing
from pi.readline.state import Layout, State

# Terminal surfaces
from pi.readline.terminal import ProcessTerminal, TerminalSurface

# Geometry
from pi.readline.tty import Output, Position, Tty

# Utilities
from pi.readline.utils import strip_ansi, visible_width

# Flow control
from pi.readline.watermark import Watermark

__all__ = [
    # Configuration
    "ReadlineConfig",
    # Errors
    "NotActiveError",
    "ReadAbortedError",
    "ReadlineError",
    # Highlighting
    "Highlighter",
    "bracket_highlighter",
    "identity_highlighter",
    # History
    "History",
    "HistoryStorage",
    "JsonFileHistoryStorage",
    "MemoryHistoryStorage",
    # Input decoding
    "Input",
    "InputType",
    "is_paste",
    "parse_input",
    # Session
    "Readline",
    "normalize_newlines",
    # Line editing
    "Layout",
    "State",
    # Terminal surfaces
    "ProcessTerminal",
    "TerminalSurface",
    # Geometry
    "Output",
    "Position",
    "Tty",
    # Utilities
    "strip_ansi",
    "visible_width",
    # Flow control
    "Watermark",
]
