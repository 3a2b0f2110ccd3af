"""Tests for cache managers."""

import json
import logging

from importmap.cache_store import SNAPSHOT_VERSION, InMemoryCacheManager, JsonCacheManager


def test_in_memory_starts_empty():
    manager = InMemoryCacheManager()
    assert manager.get() == {}
    assert manager.set_calls == 0


def test_in_memory_isolated_from_caller_mutation():
    manager = InMemoryCacheManager()
    snapshot = {"files_data": {"/a.py": {"hash": "1", "dependencies": []}}}
    manager.set(snapshot)
    snapshot["files_data"]["/a.py"]["hash"] = "changed"

    loaded = manager.get()
    assert loaded["files_data"]["/a.py"]["hash"] == "1"
    loaded["files_data"].clear()
    assert manager.get()["files_data"] != {}
    assert manager.set_calls == 1


def test_json_missing_file(tmp_path):
    manager = JsonCacheManager(tmp_path / "cache.json")
    assert manager.get() == {}


def test_json_round_trip_creates_parents(tmp_path):
    path = tmp_path / ".importmap" / "cache.json"
    manager = JsonCacheManager(path)
    manager.set({"files_data": {"/a.py": {"hash": "1", "dependencies": ["/b.py"]}}})

    assert path.exists()
    assert not path.with_name("cache.json.tmp").exists()
    loaded = JsonCacheManager(path).get()
    assert loaded["files_data"] == {"/a.py": {"hash": "1", "dependencies": ["/b.py"]}}
    assert loaded["version"] == SNAPSHOT_VERSION


def test_json_corrupt_file_reads_empty(tmp_path, caplog):
    path = tmp_path / "cache.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="importmap.cache_store"):
        assert JsonCacheManager(path).get() == {}
    assert any(r.getMessage() == "cache_store.unreadable" for r in caplog.records)


def test_json_other_version_discarded(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({"version": SNAPSHOT_VERSION + 1, "files_data": {"x": {}}}))
    assert JsonCacheManager(path).get() == {}
    path.write_text(json.dumps(["not", "a", "dict"]))
    assert JsonCacheManager(path).get() == {}
