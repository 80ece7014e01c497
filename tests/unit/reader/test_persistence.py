"""Tests for saving and restoring reading history."""

from __future__ import annotations

import json
from pathlib import Path

from reader.persistence import DEFAULT_HISTORY_KEY, HistoryStore, KeyValueFile


def _store(tmp_path: Path) -> HistoryStore:
    return HistoryStore(KeyValueFile(tmp_path / "session.json"))


def test_roundtrip_preserves_order_and_types(tmp_path: Path):
    store = _store(tmp_path)
    assert store.save_history([1, "two", 3, "two", 5]) is True
    assert store.load_history() == [1, "two", 3, "two", 5]


def test_history_saved_as_json_array_under_fixed_key(tmp_path: Path):
    store = _store(tmp_path)
    store.save_history([1, 2])
    raw = json.loads((tmp_path / "session.json").read_text())
    assert json.loads(raw[DEFAULT_HISTORY_KEY]) == [1, 2]


def test_absent_session(tmp_path: Path):
    assert _store(tmp_path).load_history() is None


def test_other_keys_are_kept(tmp_path: Path):
    kv = KeyValueFile(tmp_path / "session.json")
    kv.set("theme", "sepia")
    HistoryStore(kv, key="hist").save_history([1])
    assert kv.get("theme") == "sepia"
    assert kv.get("hist") == "[1]"


def test_corrupt_value_is_no_session(tmp_path: Path):
    kv = KeyValueFile(tmp_path / "session.json")
    store = HistoryStore(kv)
    for bad in ["{oops", '{"a": 1}', "[1, null]", "[1, [2]]", "[true]"]:
        kv.set(DEFAULT_HISTORY_KEY, bad)
        assert store.load_history() is None, bad


def test_corrupt_file_is_no_session(tmp_path: Path):
    path = tmp_path / "session.json"
    path.write_text("not json at all")
    assert HistoryStore(KeyValueFile(path)).load_history() is None


def test_save_over_corrupt_file_recovers(tmp_path: Path):
    path = tmp_path / "session.json"
    path.write_text("[1, 2, 3]")
    store = HistoryStore(KeyValueFile(path))
    assert store.save_history([4]) is True
    assert store.load_history() == [4]


def test_write_failure_is_not_fatal(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = HistoryStore(KeyValueFile(blocker / "session.json"))
    assert store.save_history([1, 2]) is False


def test_clear(tmp_path: Path):
    store = _store(tmp_path)
    store.save_history([1, 2])
    store.clear()
    assert store.load_history() is None
