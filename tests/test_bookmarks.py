"""Tests for the bookmark store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from contest_hub.bookmarks import BookmarkStore, load_bookmarks, toggle_bookmark


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "bookmarks.json"


class TestBookmarkStore:
    def test_load_missing_file_is_empty(self, store_path: Path) -> None:
        assert BookmarkStore(store_path).load() == set()

    def test_toggle_adds_then_removes(self, store_path: Path) -> None:
        store = BookmarkStore(store_path)
        store.load()
        assert store.toggle("Codeforces:1985") is True
        assert store.is_bookmarked("Codeforces:1985")
        assert store.toggle("Codeforces:1985") is False
        assert store.bookmarks == set()

    def test_toggle_twice_restores_original_set(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps(["LeetCode:weekly-contest-400"]))
        store = BookmarkStore(store_path)
        original = store.load()

        store.toggle("CodeChef:START140")
        store.toggle("CodeChef:START140")

        assert store.bookmarks == original
        assert BookmarkStore(store_path).load() == original

    def test_every_toggle_is_persisted(self, store_path: Path) -> None:
        store = BookmarkStore(store_path)
        store.load()
        store.toggle("Codeforces:1")
        store.toggle("LeetCode:weekly-contest-400")
        assert json.loads(store_path.read_text()) == ["Codeforces:1", "LeetCode:weekly-contest-400"]
        assert not list(store_path.parent.glob("*.tmp"))

    def test_corrupt_file_is_empty(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[not json")
        assert BookmarkStore(store_path).load() == set()

    def test_non_list_json_is_empty(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps({"Codeforces:1": True}))
        assert BookmarkStore(store_path).load() == set()

    def test_numeric_ids_load_as_strings(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([1985, "START140", None]))
        assert BookmarkStore(store_path).load() == {"1985", "START140"}

    def test_booleans_are_not_keys(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([True, "Codeforces:1", False]))
        assert BookmarkStore(store_path).load() == {"Codeforces:1"}

    def test_toggle_without_load_keeps_saved_keys(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps(["Codeforces:1", "CodeChef:START140"]))

        assert BookmarkStore(store_path).toggle("LeetCode:weekly-contest-400") is True

        assert set(json.loads(store_path.read_text())) == {
            "Codeforces:1",
            "CodeChef:START140",
            "LeetCode:weekly-contest-400",
        }

    def test_is_bookmarked_reads_file_on_first_use(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps(["Codeforces:1"]))
        store = BookmarkStore(store_path)
        assert store.is_bookmarked("Codeforces:1")
        assert store.bookmarks == {"Codeforces:1"}

    def test_default_path_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "env-bookmarks.json"
        monkeypatch.setenv("CONTEST_HUB_BOOKMARKS", str(target))
        assert BookmarkStore().path == target


class TestBookmarkFunctions:
    def test_toggle_and_load(self, store_path: Path) -> None:
        assert toggle_bookmark("Codeforces:1985", store_path) is True
        assert load_bookmarks(store_path) == {"Codeforces:1985"}
        assert toggle_bookmark("Codeforces:1985", store_path) is False
        assert load_bookmarks(store_path) == set()
