"""Bookmarked contest keys persisted as a JSON array on disk."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from contest_hub.config import bookmarks_path

logger = logging.getLogger(__name__)


class BookmarkStore:
    """A set of opaque bookmark keys, written through on every change.

    Keys are normally ``Contest.key`` values (``"<source>:<id>"``).
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else bookmarks_path()
        self._keys: set[str] | None = None

    def load(self) -> set[str]:
        """Read the persisted set. Missing or corrupt files yield an empty set."""
        self._keys = _read_keys(self.path)
        return set(self._keys)

    def _loaded(self) -> set[str]:
        if self._keys is None:
            self.load()
        return self._keys

    def toggle(self, key: str) -> bool:
        """Add ``key`` if absent, remove it if present. Returns the new state."""
        keys = self._loaded()
        if key in keys:
            keys.remove(key)
            bookmarked = False
        else:
            keys.add(key)
            bookmarked = True
        self._save()
        return bookmarked

    def is_bookmarked(self, key: str) -> bool:
        return key in self._loaded()

    @property
    def bookmarks(self) -> set[str]:
        return set(self._loaded())

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(sorted(self._loaded()), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".bookmarks-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def load_bookmarks(path: str | Path | None = None) -> set[str]:
    return BookmarkStore(path).load()


def toggle_bookmark(key: str, path: str | Path | None = None) -> bool:
    return BookmarkStore(path).toggle(key)


def _read_keys(path: Path) -> set[str]:
    if not path.exists():
        return set()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable bookmark file %s: %s", path, e)
        return set()
    if not isinstance(raw, list):
        logger.warning("Ignoring bookmark file %s: expected a JSON array", path)
        return set()
    # Older files may hold bare numeric ids
    return {str(k) for k in raw if isinstance(k, (str, int)) and not isinstance(k, bool)}
