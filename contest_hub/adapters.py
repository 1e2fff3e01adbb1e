"""Per-source mapping of raw API payloads into Contest records.

Each source gets a shape guard and an adapter. The guard is the only place
that inspects the payload's top-level structure: it returns the list of raw
contest items when the payload is usable, or ``None`` when it is not. Adapters
never raise; a rejected payload or a malformed item simply contributes
nothing.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable

from contest_hub import Contest
from contest_hub.status import classify

logger = logging.getLogger(__name__)

CODEFORCES = "Codeforces"
CODECHEF = "CodeChef"
LEETCODE = "LeetCode"

# First parenthetical only, e.g. "Starters 140 (Rated till 5 stars)"
_CODECHEF_NAME_SUFFIX_RE = re.compile(r"\s*\(.*?\)")


# --- Shape guards ---


def codeforces_items(payload: Any) -> list[dict] | None:
    if not isinstance(payload, dict):
        return None
    if payload.get("status") != "OK" or not isinstance(payload.get("result"), list):
        return None
    return payload["result"]


def codechef_items(payload: Any) -> list[dict] | None:
    if not isinstance(payload, dict):
        return None
    if payload.get("status") != "success" or not isinstance(payload.get("contests"), list):
        return None
    return payload["contests"]


def leetcode_items(payload: Any) -> list[dict] | None:
    """Merge the paginated past-contest listing and the "top two" listing."""
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        return None
    data = payload["data"]

    items: list[dict] = []
    found = False

    past = data.get("pastContests")
    if isinstance(past, dict) and isinstance(past.get("data"), list):
        items.extend(past["data"])
        found = True

    top_two = data.get("topTwoContests")
    if isinstance(top_two, list):
        items.extend(top_two)
        found = True

    return items if found else None


# --- Adapters ---


def adapt_codeforces(payload: Any, now: int) -> list[Contest]:
    items = codeforces_items(payload)
    if items is None:
        logger.warning("Rejected %s payload: unexpected shape", CODEFORCES)
        return []

    contests: list[Contest] = []
    for item in items:
        try:
            contest_id = item["id"]
            start = int(item["startTimeSeconds"])
            duration = int(item.get("durationSeconds") or 0)
            contests.append(Contest(
                id=contest_id,
                name=item["name"],
                start_time_seconds=start,
                duration_seconds=duration,
                source=CODEFORCES,
                status=classify(start, duration, now),
                url=f"https://codeforces.com/contest/{contest_id}",
            ))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Skipping malformed %s item %r: %s", CODEFORCES, item, e)
    return contests


def adapt_codechef(payload: Any, now: int) -> list[Contest]:
    items = codechef_items(payload)
    if items is None:
        logger.warning("Rejected %s payload: unexpected shape", CODECHEF)
        return []

    contests: list[Contest] = []
    for item in items:
        try:
            code = item["contest_code"]
            start = _iso_to_epoch(item["contest_start_date_iso"])
            duration = _codechef_duration(item, start)
            contests.append(Contest(
                id=code,
                name=clean_codechef_name(item["contest_name"]),
                start_time_seconds=start,
                duration_seconds=duration,
                source=CODECHEF,
                status=classify(start, duration, now),
                url=f"https://www.codechef.com/{code}",
            ))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Skipping malformed %s item %r: %s", CODECHEF, item, e)
    return contests


def adapt_leetcode(payload: Any, now: int) -> list[Contest]:
    items = leetcode_items(payload)
    if items is None:
        logger.warning("Rejected %s payload: unexpected shape", LEETCODE)
        return []

    contests: list[Contest] = []
    for item in items:
        try:
            slug = item["titleSlug"]
            start = int(item["startTime"])
            duration = int(item.get("duration") or 0)
            contests.append(Contest(
                id=slug,
                name=item["title"],
                start_time_seconds=start,
                duration_seconds=duration,
                source=LEETCODE,
                status=classify(start, duration, now),
                url=f"https://leetcode.com/contest/{slug}",
            ))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Skipping malformed %s item %r: %s", LEETCODE, item, e)
    return contests


ADAPTERS: dict[str, Callable[[Any, int], list[Contest]]] = {
    CODEFORCES: adapt_codeforces,
    CODECHEF: adapt_codechef,
    LEETCODE: adapt_leetcode,
}


def clean_codechef_name(name: str) -> str:
    """Drop the rating/division annotation CodeChef appends to contest names."""
    return _CODECHEF_NAME_SUFFIX_RE.sub("", name, count=1)


def _iso_to_epoch(value: str) -> int:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def _codechef_duration(item: dict, start: int) -> int:
    """Duration in seconds; CodeChef reports minutes."""
    minutes = item.get("contest_duration")
    if minutes not in (None, ""):
        return int(minutes) * 60
    end_iso = item.get("contest_end_date_iso")
    if end_iso:
        return max(_iso_to_epoch(end_iso) - start, 0)
    return 0
