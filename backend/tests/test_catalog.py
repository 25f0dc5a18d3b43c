"""Tests for catalog.py — load_catalog, get_topic_by_code."""

import json
from pathlib import Path
import sys
import os

import pytest

# Ensure backend root is on sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog import CatalogError, get_topic_by_code, load_catalog
from models import Topic

_BUNDLED = Path(__file__).resolve().parents[2] / "shared" / "ifac_tcs.json"


def _write_catalog(tmp_path, payload) -> str:
    path = tmp_path / "tcs.json"
    if isinstance(payload, str):
        path.write_text(payload, encoding="utf-8")
    else:
        path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_bundled_catalog_loads():
    """The shipped catalog parses and every topic has a code and items."""
    topics = load_catalog(_BUNDLED)
    assert topics
    assert all(t.code and t.items for t in topics)
    codes = [t.code for t in topics]
    assert len(codes) == len(set(codes))


def test_load_keeps_order_and_defaults_keywords(tmp_path):
    path = _write_catalog(tmp_path, {"tcs": [
        {"code": "A-1", "name": "Alpha", "items": ["x", "y"]},
        {"code": "B-2", "name": "Beta", "items": [], "keywords": "b"},
    ]})

    topics = load_catalog(path)

    assert [t.code for t in topics] == ["A-1", "B-2"]
    assert topics[0].items == ["x", "y"]
    assert topics[0].keywords == ""
    assert topics[1].keywords == "b"


def test_load_ignores_unknown_fields(tmp_path):
    """Extra fields at either level are tolerated."""
    path = _write_catalog(tmp_path, {
        "version": 3,
        "tcs": [{"code": "A-1", "name": "Alpha", "items": ["x"], "icon": "gear"}],
    })

    topics = load_catalog(path)
    assert topics == [Topic(code="A-1", name="Alpha", items=["x"])]


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(CatalogError, match="Cannot read catalog"):
        load_catalog(str(tmp_path / "nope.json"))


def test_malformed_json_is_fatal(tmp_path):
    path = _write_catalog(tmp_path, "{not json")
    with pytest.raises(CatalogError, match="Invalid catalog"):
        load_catalog(path)


def test_wrong_shape_is_fatal(tmp_path):
    """A topic missing its required fields fails instead of being skipped."""
    path = _write_catalog(tmp_path, {"tcs": [{"code": "A-1"}]})
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_get_topic_by_code():
    topics = [
        Topic(code="A-1", name="Alpha", items=["x"]),
        Topic(code="B-2", name="Beta", items=["y"]),
    ]
    assert get_topic_by_code(topics, "B-2").name == "Beta"
    assert get_topic_by_code(topics, "C-3") is None


def test_invalid_utf8_is_fatal(tmp_path):
    """Undecodable bytes surface as CatalogError, not a raw UnicodeDecodeError."""
    path = tmp_path / "tcs.json"
    path.write_bytes(b'{"tcs":[{"code":"\xff","name":"Bad","items":[]}]}')
    with pytest.raises(CatalogError, match="Cannot read catalog"):
        load_catalog(str(path))
