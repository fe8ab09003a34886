"""Tests for JSON loaders and result writing."""

import json

import pytest

from magic_ideas.errors import LibraryLoadError, MagicIdeasError
from magic_ideas.loaders import load_ideas, load_usage, write_result
from magic_ideas.organizer import organize


def _write(path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestLoadIdeas:
    def test_plain_list(self, tmp_path):
        path = tmp_path / "ideas.json"
        _write(path, [{"id": "1", "title": "Card Force"}, {"id": "2"}])
        ideas = load_ideas(path)
        assert [i.id for i in ideas] == ["1", "2"]
        assert ideas[0].title == "Card Force"

    def test_wrapped_object(self, tmp_path):
        path = tmp_path / "ideas.json"
        _write(path, {"ideas": [{"id": "1"}]})
        assert [i.id for i in load_ideas(path)] == ["1"]

    def test_non_object_entries_skipped(self, tmp_path):
        path = tmp_path / "ideas.json"
        _write(path, [{"id": "1"}, "junk", None])
        assert [i.id for i in load_ideas(path)] == ["1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(LibraryLoadError, match="file not found"):
            load_ideas(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "ideas.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LibraryLoadError, match="invalid JSON"):
            load_ideas(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "ideas.json"
        _write(path, {"items": []})
        with pytest.raises(MagicIdeasError):
            load_ideas(path)


class TestLoadUsage:
    def test_keyed_object(self, tmp_path):
        path = tmp_path / "usage.json"
        _write(path, {"1": {"usedInCount": 2, "isPinned": True}})
        usage = load_usage(path)
        assert usage["1"].used_in_count == 2
        assert usage["1"].is_pinned is True

    def test_list_rejected(self, tmp_path):
        path = tmp_path / "usage.json"
        _write(path, [])
        with pytest.raises(LibraryLoadError):
            load_usage(path)


def test_write_result(tmp_path):
    result = organize(
        [
            {"id": "a", "title": "Card Force", "content": "force"},
            {"id": "b", "title": "card force", "content": "other"},
        ]
    )
    path = write_result(result, tmp_path / "out" / "result.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["duplicates"] == [{"a": "a", "b": "b", "score": 1.0}]
    assert "tagSuggestions" in data
