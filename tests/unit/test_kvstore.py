"""Tests for the JSON key-value store"""

from __future__ import annotations

import json

from quotely.infrastructure.kvstore import KeyValueStore


def test_missing_file_reads_as_empty(tmp_path):
    store = KeyValueStore(tmp_path / "absent.json")

    assert store.get("anything") is None
    assert store.get("anything", []) == []
    assert store.keys() == []


def test_set_get_remove(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")

    store.set("quotely_quotes", [{"id": "q1"}])
    assert store.get("quotely_quotes") == [{"id": "q1"}]

    store.remove("quotely_quotes")
    assert store.get("quotely_quotes") is None


def test_writes_visible_to_second_instance(tmp_path):
    path = tmp_path / "shared.json"
    KeyValueStore(path).set("dailyQuote-2024-03-01", {"id": "q9"})

    assert KeyValueStore(path).get("dailyQuote-2024-03-01") == {"id": "q9"}


def test_file_is_plain_json_object(tmp_path):
    path = tmp_path / "store.json"
    store = KeyValueStore(path)
    store.set("a", 1)
    store.set("b", "two")

    assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1, "b": "two"}


def test_no_temp_files_left_behind(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    for i in range(5):
        store.set(f"k{i}", i)

    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]


def test_creates_parent_directory(tmp_path):
    store = KeyValueStore(tmp_path / "nested" / "dir" / "store.json")
    store.set("k", "v")

    assert store.get("k") == "v"


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    store = KeyValueStore(path)

    assert store.get("k") is None

    store.set("k", "v")
    assert store.get("k") == "v"


def test_non_object_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert KeyValueStore(path).keys() == []


def test_clear(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    store.set("a", 1)

    store.clear()

    assert store.keys() == []
