"""Merge contests from every source into one sorted, classified list."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Iterable

from contest_hub import AggregationError, Contest, ContestSource, Status
from contest_hub.adapters import ADAPTERS
from contest_hub.fetcher import Fetch, fetch_all, fetch_json
from contest_hub.status import classify

logger = logging.getLogger(__name__)


def aggregate(
    sources: list[ContestSource],
    now: int | None = None,
    fetch: Fetch = fetch_json,
) -> list[Contest]:
    """Fetch, normalize and classify contests from all sources.

    Partial coverage is a success: sources or endpoints that fail simply add
    nothing. Raises ``AggregationError`` only when sources were attempted and
    not a single contest came back.
    """
    if now is None:
        now = int(time.time())

    contests: list[Contest] = []
    for source, payloads in fetch_all(sources, fetch=fetch):
        adapter = ADAPTERS.get(source.name)
        if adapter is None:
            logger.warning("No adapter registered for source %r; skipping", source.name)
            continue

        from_source: list[Contest] = []
        for payload in payloads:
            from_source.extend(adapter(payload, now))
        logger.info("%s: %d contests from %d endpoint(s)", source.name, len(from_source), len(payloads))
        contests.extend(from_source)

    if sources and not contests:
        raise AggregationError("No contests could be fetched from any source")

    # sorted() is stable, so same-start contests keep source/endpoint order
    return sorted(contests, key=lambda c: c.start_time_seconds)


def reclassify(contests: Iterable[Contest], now: int | None = None) -> list[Contest]:
    """Recompute status against ``now``, e.g. for contests loaded from a snapshot."""
    if now is None:
        now = int(time.time())
    return [
        replace(c, status=classify(c.start_time_seconds, c.duration_seconds, now))
        for c in contests
    ]


def select_contests(
    contests: Iterable[Contest],
    query: str = "",
    sources: Iterable[str] = (),
    statuses: Iterable[Status | str] = (),
) -> list[Contest]:
    """Filter contests by name substring, source names and statuses.

    Empty filters match everything. Source names compare case-insensitively.
    """
    needle = query.strip().lower()
    wanted_sources = {s.lower() for s in sources}
    wanted_statuses = {Status(s) for s in statuses}

    selected = []
    for c in contests:
        if needle and needle not in c.name.lower():
            continue
        if wanted_sources and c.source.lower() not in wanted_sources:
            continue
        if wanted_statuses and c.status not in wanted_statuses:
            continue
        selected.append(c)
    return selected
