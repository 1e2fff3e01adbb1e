"""In-process TTL cache and the on-disk snapshot used as fallback on fetch failures."""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Any, Callable

from contest_hub import Contest, ContestSource, Status
from contest_hub.aggregator import aggregate, reclassify
from contest_hub.config import CACHE_TTL_SECONDS

SNAPSHOT_FILE = "contests.json"


class TTLCache:
    """Keyed cache whose entries expire ``ttl_seconds`` after being set."""

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> tuple[Any, float] | None:
        """Return ``(value, age_seconds)`` or ``None`` on a miss or expiry."""
        with self._lock:
            hit = self._entries.get(key)
            if hit is None:
                return None
            stored_at, value = hit
            age = self._clock() - stored_at
            if age >= self.ttl_seconds:
                self._entries.pop(key, None)
                return None
            return value, age

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)


def cached_aggregate(
    cache: TTLCache,
    sources: list[ContestSource],
    now: int | None = None,
    **kwargs: Any,
) -> list[Contest]:
    """``aggregate`` behind a cache keyed on the configured source names.

    Cached lists are reclassified on every hit so statuses track ``now``.
    """
    key = "contests:" + ",".join(s.name for s in sources)
    hit = cache.get(key)
    if hit is not None:
        contests, _age = hit
        return reclassify(contests, now)

    contests = aggregate(sources, now=now, **kwargs)
    cache.set(key, contests)
    return contests


def contest_to_dict(c: Contest) -> dict:
    """Convert a Contest to a JSON-serializable dict."""
    return {
        "id": c.id,
        "name": c.name,
        "startTimeSeconds": c.start_time_seconds,
        "durationSeconds": c.duration_seconds,
        "source": c.source,
        "status": c.status.value,
        "url": c.url,
    }


def contest_from_dict(d: dict) -> Contest:
    return Contest(
        id=d["id"],
        name=d["name"],
        start_time_seconds=int(d["startTimeSeconds"]),
        duration_seconds=int(d.get("durationSeconds") or 0),
        source=d["source"],
        status=Status(d.get("status", Status.UPCOMING.value)),
        url=d["url"],
    )


def save_snapshot(cache_dir: Path, contests: list[Contest]) -> None:
    """Save the last successful aggregation to the cache directory."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    payload = {
        "fetched_at": int(time.time()),
        "contests": [contest_to_dict(c) for c in contests],
    }
    (cache_dir / SNAPSHOT_FILE).write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_snapshot(cache_dir: Path) -> list[Contest] | None:
    """Load the cached contest list. Returns None if no usable snapshot exists."""
    cache_file = cache_dir / SNAPSHOT_FILE
    if not cache_file.exists():
        return None
    try:
        payload = json.loads(cache_file.read_text(encoding="utf-8"))
        return [contest_from_dict(d) for d in payload["contests"]]
    except (OSError, ValueError, KeyError, TypeError):
        return None
