"""Bounded command history with pluggable persistence."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 50


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class HistoryStorage(Protocol):
    """Load/save contract for persisted history."""

    def load(self) -> list[str]: ...

    def save(self, entries: list[str]) -> None: ...


class MemoryHistoryStorage:
    """Keeps the saved history in memory. Useful for tests and embedding."""

    def __init__(self, entries: list[str] | None = None) -> None:
        self.entries: list[str] = list(entries or [])

    def load(self) -> list[str]:
        return list(self.entries)

    def save(self, entries: list[str]) -> None:
        self.entries = list(entries)


class JsonFileHistoryStorage:
    """Stores history as a JSON array of strings in a single file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> list[str]:
        if not os.path.exists(self.path):
            return []
        content = Path(self.path).read_text(encoding="utf-8")
        return json.loads(content)

    def save(self, entries: list[str]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        Path(self.path).write_text(
            json.dumps(entries, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class History:
    """Ordered, capacity-bounded list of accepted lines (oldest first).

    Navigation state is not kept here: callers look entries up by distance
    from the newest with :meth:`get` and track their own position.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_HISTORY_SIZE,
        storage: HistoryStorage | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._entries: list[str] = []
        self._storage = storage

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def entries(self) -> list[str]:
        """A copy of the entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, text: str) -> None:
        """Record *text*. Blank and whitespace-only lines are ignored."""
        if not text.strip():
            return
        self._entries.append(text)
        if len(self._entries) > self._max_entries:
            del self._entries[: len(self._entries) - self._max_entries]
        self.persist()

    def get(self, distance: int) -> str | None:
        """Return the entry *distance* steps back from the newest (0 = newest)."""
        if distance < 0 or distance >= len(self._entries):
            return None
        return self._entries[len(self._entries) - 1 - distance]

    # -- Persistence ---------------------------------------------------------

    def restore(self) -> None:
        """Replace the entries with whatever the storage holds.

        Missing or malformed data leaves the history empty.
        """
        self._entries = []
        if self._storage is None:
            return
        try:
            loaded = self._storage.load()
        except (OSError, ValueError) as e:
            logger.warning("Failed to load history: %s", e)
            return
        if not isinstance(loaded, list) or not all(isinstance(x, str) for x in loaded):
            logger.warning("Ignoring malformed history data")
            return
        entries = [line for line in loaded if line.strip()]
        self._entries = entries[-self._max_entries :]

    def persist(self) -> None:
        """Save the entries through the storage. Failures are logged only."""
        if self._storage is None:
            return
        try:
            self._storage.save(list(self._entries))
        except (OSError, TypeError, ValueError) as e:
            logger.debug("Failed to save history: %s", e)
