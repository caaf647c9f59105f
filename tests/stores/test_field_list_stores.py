"""Unit tests for field list stores."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nicecolumns.errors import FieldListStoreError
from nicecolumns.stores import (
    SCHEMA_VERSION,
    FieldListStore,
    JsonFieldListStore,
    MemoryFieldListStore,
    SqlFieldListStore,
)

LAYOUT = [{"name": "id", "hidden": True}, {"name": "title", "width": 200}]


@pytest.fixture(params=["memory", "json", "sql"])
def any_store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryFieldListStore()
    if request.param == "json":
        return JsonFieldListStore(tmp_path / "field_lists.json")
    return SqlFieldListStore("sqlite://")


def test_store_protocol(any_store):
    assert isinstance(any_store, FieldListStore)


def test_missing_key_reads_none(any_store):
    assert any_store.read_list("book_grid") is None


def test_write_then_read(any_store):
    any_store.write_list("book_grid", LAYOUT)
    assert any_store.read_list("book_grid") == LAYOUT


def test_write_replaces_whole_list(any_store):
    any_store.write_list("book_grid", LAYOUT)
    any_store.write_list("book_grid", [{"name": "notes"}])
    assert any_store.read_list("book_grid") == [{"name": "notes"}]


def test_keys_are_independent(any_store):
    any_store.write_list("book_grid", LAYOUT)
    any_store.write_list("books_model_fields", [{"name": "title"}])
    assert any_store.read_list("book_grid") == LAYOUT
    assert any_store.read_list("books_model_fields") == [{"name": "title"}]


def test_memory_store_copies():
    store = MemoryFieldListStore()
    items = [{"name": "id"}]
    store.write_list("k", items)
    items[0]["name"] = "changed"
    store.read_list("k")[0]["name"] = "changed again"
    assert store.read_list("k") == [{"name": "id"}]
    assert store.keys() == ["k"]


def test_json_store_file_layout(tmp_path: Path):
    path = tmp_path / "nested" / "field_lists.json"
    JsonFieldListStore(path).write_list("book_grid", LAYOUT)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"schema_version": SCHEMA_VERSION, "lists": {"book_grid": LAYOUT}}


def test_json_store_invalid_json_raises(tmp_path: Path):
    path = tmp_path / "field_lists.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(FieldListStoreError, match="not valid JSON"):
        JsonFieldListStore(path).read_list("book_grid")


def test_json_store_wrong_layout_raises(tmp_path: Path):
    path = tmp_path / "field_lists.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(FieldListStoreError):
        JsonFieldListStore(path).read_list("book_grid")


def test_json_store_default_path_uses_app_name():
    path = JsonFieldListStore.default_path(app_name="nicecolumns_test")
    assert path.name == "field_lists.json"
    assert "nicecolumns_test" in str(path)
