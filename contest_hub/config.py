"""Source definitions and environment-driven settings."""

from __future__ import annotations

import json
import os
from pathlib import Path

from contest_hub import ContestSource, Endpoint
from contest_hub.adapters import CODECHEF, CODEFORCES, LEETCODE

USER_AGENT = "ContestHub/1.0 (+contest aggregator)"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0.0.0 Safari/537.36"
)

CODEFORCES_URL = "https://codeforces.com/api/contest.list"
LEETCODE_GRAPHQL_URL = "https://leetcode.com/graphql"

LEETCODE_PAST_QUERY = """
query pastContests($pageNo: Int, $numPerPage: Int) {
  pastContests(pageNo: $pageNo, numPerPage: $numPerPage) {
    data {
      title
      titleSlug
      startTime
      duration
    }
  }
}
"""

LEETCODE_UPCOMING_QUERY = """
query topTwoContests {
  topTwoContests {
    title
    titleSlug
    startTime
    duration
  }
}
"""


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "")
    try:
        return int(value) if value else default
    except ValueError:
        return default


HTTP_TIMEOUT = _env_int("CONTEST_HUB_HTTP_TIMEOUT", 30)
VIDEO_TIMEOUT = _env_int("CONTEST_HUB_VIDEO_TIMEOUT", 10)
CACHE_TTL_SECONDS = _env_int("CONTEST_HUB_CACHE_TTL", 24 * 60 * 60)


def bookmarks_path() -> Path:
    """Location of the bookmark file (``CONTEST_HUB_BOOKMARKS`` overrides)."""
    override = os.environ.get("CONTEST_HUB_BOOKMARKS", "")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".contest_hub" / "bookmarks.json"


def default_sources() -> list[ContestSource]:
    """The three built-in sources, with CodeChef URLs overridable from the environment."""
    codechef_future = os.environ.get(
        "CODECHEF_FUTURE_URL", "https://www.codechef.com/api/list/contests/future"
    )
    codechef_past = os.environ.get(
        "CODECHEF_PAST_URL", "https://www.codechef.com/api/list/contests/past"
    )
    return [
        ContestSource(CODEFORCES, (Endpoint(CODEFORCES_URL),)),
        ContestSource(CODECHEF, (Endpoint(codechef_future), Endpoint(codechef_past))),
        ContestSource(LEETCODE, (
            Endpoint(
                LEETCODE_GRAPHQL_URL,
                method="POST",
                body={"query": LEETCODE_PAST_QUERY, "variables": {"pageNo": 1, "numPerPage": 10}},
            ),
            Endpoint(
                LEETCODE_GRAPHQL_URL,
                method="POST",
                body={"query": LEETCODE_UPCOMING_QUERY},
            ),
        )),
    ]


def load_sources(path: str | Path) -> list[ContestSource]:
    """Load source configurations from a JSON file.

    Expected layout::

        {"sources": [{"name": "Codeforces",
                      "endpoints": ["https://...", {"url": "...", "method": "POST", "body": {...}}]}]}
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    sources: list[ContestSource] = []
    for entry in data["sources"]:
        endpoints = []
        for ep in entry["endpoints"]:
            if isinstance(ep, str):
                endpoints.append(Endpoint(ep))
            else:
                endpoints.append(Endpoint(
                    url=ep["url"],
                    method=ep.get("method", "GET").upper(),
                    body=ep.get("body"),
                ))
        sources.append(ContestSource(entry["name"], tuple(endpoints)))
    return sources
