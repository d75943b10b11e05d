"""
Tests for the JSON document store.

Run with: python -m pytest tests/test_store.py
"""

import json
import os

from logic import store
from logic.store import load_json, save_json


def test_load_missing_file_returns_none(tmp_path):
    assert load_json(str(tmp_path / "missing.json")) is None


def test_load_malformed_json_returns_none(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"counter": 1, "markers": [}', encoding="utf-8")

    assert load_json(str(path)) is None


def test_load_non_object_returns_none(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_json(str(path)) is None


def test_save_then_load(tmp_path):
    path = str(tmp_path / "doc.json")
    document = {"counter": 2, "markers": [{"id": 1}, {"id": 2}]}

    assert save_json(path, document) is True
    assert load_json(path) == document
    assert not os.path.exists(path + ".tmp")


def test_save_creates_parent_directory(tmp_path):
    path = str(tmp_path / "nested" / "dir" / "doc.json")

    assert save_json(path, {"a": 1}) is True
    assert load_json(path) == {"a": 1}


def test_save_keeps_previous_version_as_backup(tmp_path):
    path = str(tmp_path / "doc.json")

    save_json(path, {"version": 1})
    assert not os.path.exists(path + ".bak")

    save_json(path, {"version": 2})

    with open(path + ".bak", "r", encoding="utf-8") as f:
        assert json.load(f) == {"version": 1}
    assert load_json(path) == {"version": 2}


def test_failed_rename_leaves_original_untouched(tmp_path, monkeypatch):
    """A failure after writing the temp file must not corrupt the document."""
    path = str(tmp_path / "doc.json")
    save_json(path, {"version": 1})

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(store.os, "replace", failing_replace)

    assert save_json(path, {"version": 2}) is False
    assert not os.path.exists(path + ".tmp")

    monkeypatch.undo()
    assert load_json(path) == {"version": 1}


def test_unserialisable_document_is_rejected(tmp_path):
    path = str(tmp_path / "doc.json")
    save_json(path, {"version": 1})

    assert save_json(path, {"bad": object()}) is False
    assert load_json(path) == {"version": 1}
