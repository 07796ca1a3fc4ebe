"""Tests for pi.readline.history -- bounded history and its storage."""

from __future__ import annotations

import json

import pytest

from pi.readline.history import History, JsonFileHistoryStorage, MemoryHistoryStorage


class FailingStorage:
    """Storage whose load and save always fail."""

    def __init__(self) -> None:
        self.save_calls = 0

    def load(self) -> list[str]:
        raise OSError("disk on fire")

    def save(self, entries: list[str]) -> None:
        self.save_calls += 1
        raise OSError("disk on fire")


class TestHistoryAppend:
    """Appending and the blank-line policy."""

    def test_append_keeps_order_newest_last(self) -> None:
        history = History()
        history.append("a")
        history.append("b")
        assert history.entries == ["a", "b"]
        assert len(history) == 2

    def test_empty_line_is_not_recorded(self) -> None:
        history = History()
        history.append("")
        assert len(history) == 0

    def test_whitespace_only_line_is_not_recorded(self) -> None:
        history = History()
        history.append("   ")
        history.append("\t\n")
        assert len(history) == 0

    def test_text_is_stored_untrimmed(self) -> None:
        history = History()
        history.append("  ls -l ")
        assert history.entries == ["  ls -l "]

    def test_duplicates_are_kept(self) -> None:
        history = History()
        history.append("x")
        history.append("x")
        assert history.entries == ["x", "x"]

    def test_default_capacity(self) -> None:
        assert History().max_entries == 50

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError):
            History(0)


class TestHistoryCapacity:
    """Oldest entries are evicted beyond capacity."""

    @pytest.mark.parametrize("extra", [1, 3, 50])
    def test_capacity_bound(self, extra: int) -> None:
        capacity = 50
        history = History(capacity)
        lines = [f"line {i}" for i in range(capacity + extra)]
        for line in lines:
            history.append(line)
        assert len(history) == capacity
        assert history.entries == lines[extra:]

    def test_small_capacity(self) -> None:
        history = History(2)
        for line in ("a", "b", "c"):
            history.append(line)
        assert history.entries == ["b", "c"]


class TestHistoryLookup:
    """Indexed lookup by distance from the newest entry."""

    def test_get_by_distance(self) -> None:
        history = History()
        for line in ("a", "b", "c"):
            history.append(line)
        assert history.get(0) == "c"
        assert history.get(1) == "b"
        assert history.get(2) == "a"

    def test_get_out_of_range(self) -> None:
        history = History()
        history.append("a")
        assert history.get(1) is None
        assert history.get(-1) is None

    def test_entries_is_a_copy(self) -> None:
        history = History()
        history.append("a")
        history.entries.append("b")
        assert len(history) == 1


class TestHistoryPersistence:
    """restore/persist through a storage collaborator."""

    def test_append_persists(self) -> None:
        storage = MemoryHistoryStorage()
        history = History(storage=storage)
        history.append("a")
        history.append("b")
        assert storage.entries == ["a", "b"]

    def test_restore_loads_entries(self) -> None:
        storage = MemoryHistoryStorage(["a", "b"])
        history = History(storage=storage)
        history.restore()
        assert history.entries == ["a", "b"]

    def test_restore_trims_to_capacity(self) -> None:
        storage = MemoryHistoryStorage(["a", "b", "c"])
        history = History(2, storage)
        history.restore()
        assert history.entries == ["b", "c"]

    def test_restore_drops_blank_entries(self) -> None:
        storage = MemoryHistoryStorage(["a", "  ", "b"])
        history = History(storage=storage)
        history.restore()
        assert history.entries == ["a", "b"]

    def test_load_failure_gives_empty_history(self) -> None:
        history = History(storage=FailingStorage())
        history.restore()
        assert len(history) == 0

    def test_malformed_data_gives_empty_history(self) -> None:
        class DictStorage:
            def load(self):
                return {"not": "a list"}

            def save(self, entries: list[str]) -> None:
                pass

        history = History(storage=DictStorage())
        history.restore()
        assert len(history) == 0

    def test_save_failure_keeps_history_in_memory(self) -> None:
        storage = FailingStorage()
        history = History(storage=storage)
        history.append("a")
        assert history.entries == ["a"]
        assert storage.save_calls == 1

    def test_no_storage(self) -> None:
        history = History()
        history.restore()
        history.persist()
        assert len(history) == 0


class TestJsonFileHistoryStorage:
    """JSON file persistence."""

    def test_round_trip_through_file(self, tmp_path) -> None:
        path = tmp_path / "nested" / "history.json"
        history = History(storage=JsonFileHistoryStorage(str(path)))
        history.append("print(1)")
        history.append("日本語")

        restored = History(storage=JsonFileHistoryStorage(str(path)))
        restored.restore()
        assert restored.entries == ["print(1)", "日本語"]

    def test_file_is_a_json_array(self, tmp_path) -> None:
        path = tmp_path / "history.json"
        history = History(storage=JsonFileHistoryStorage(str(path)))
        history.append("a")
        assert json.loads(path.read_text(encoding="utf-8")) == ["a"]

    def test_missing_file_loads_empty(self, tmp_path) -> None:
        storage = JsonFileHistoryStorage(str(tmp_path / "missing.json"))
        assert storage.load() == []

    def test_corrupt_file_gives_empty_history(self, tmp_path) -> None:
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")
        history = History(storage=JsonFileHistoryStorage(str(path)))
        history.restore()
        assert len(history) == 0

    def test_non_string_items_give_empty_history(self, tmp_path) -> None:
        path = tmp_path / "history.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        history = History(storage=JsonFileHistoryStorage(str(path)))
        history.restore()
        assert len(history) == 0
