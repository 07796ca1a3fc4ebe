"""Configuration for a readline session."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pi.readline.history import DEFAULT_HISTORY_SIZE
from pi.readline.watermark import DEFAULT_HIGH_WATERMARK, DEFAULT_LOW_WATERMARK

HISTORY_PATH_ENV = "PI_READLINE_HISTORY"
HISTORY_SIZE_ENV = "PI_READLINE_HISTORY_SIZE"


def default_history_path() -> str:
    """Default history file (~/.pi/readline_history.json)."""
    return str(Path.home() / ".pi" / "readline_history.json")


@dataclass
class ReadlineConfig:
    """Session configuration.

    ``history_path`` of ``None`` keeps history in memory only.
    """

    history_size: int = DEFAULT_HISTORY_SIZE
    history_path: str | None = None
    high_watermark: int = DEFAULT_HIGH_WATERMARK
    low_watermark: int = DEFAULT_LOW_WATERMARK
    tab_stop_width: int = 8

    @classmethod
    def from_env(cls) -> ReadlineConfig:
        """Build a config from the environment.

        ``PI_READLINE_HISTORY`` overrides the history file; set it to an
        empty string to disable persistence. ``PI_READLINE_HISTORY_SIZE``
        overrides the history capacity when it is a positive integer.
        """
        config = cls(history_path=os.environ.get(HISTORY_PATH_ENV, default_history_path()) or None)
        size = os.environ.get(HISTORY_SIZE_ENV, "")
        if size.isdigit() and int(size) > 0:
            config.history_size = int(size)
        return config
