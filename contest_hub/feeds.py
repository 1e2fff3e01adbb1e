"""Atom and JSON feed generation."""

from __future__ import annotations

from datetime import datetime, timezone

from contest_hub import Contest


def _iso(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _summary(contest: Contest) -> str:
    minutes = contest.duration_seconds // 60
    length = f"{minutes // 60}h {minutes % 60:02d}m" if minutes else "duration unknown"
    return f"{contest.status.value.title()} — {contest.source}, {length}"


def generate_atom_feed(contests: list[Contest], base_url: str = "") -> str:
    """Generate an Atom feed of contests, newest start first."""
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    entries = ""
    for contest in sorted(contests, key=lambda c: c.start_time_seconds, reverse=True):
        title = _xml_escape(f"[{contest.source}] {contest.name}")
        entries += f"""  <entry>
    <id>urn:contest-hub:{_xml_escape(contest.key)}</id>
    <title>{title}</title>
    <updated>{_iso(contest.start_time_seconds)}</updated>
    <summary>{_xml_escape(_summary(contest))}</summary>
    <link href="{_xml_escape(contest.url)}" rel="alternate"/>
    <category term="{contest.status.value.lower()}"/>
  </entry>
"""

    feed_url = f"{base_url}/feed.xml" if base_url else ""
    ics_url = f"{base_url}/contests.ics" if base_url else ""

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <id>urn:contest-hub:contests</id>
  <title>Programming Contests</title>
  <subtitle>Upcoming, running and past contests from Codeforces, CodeChef and LeetCode</subtitle>
  <updated>{now}</updated>
  <link href="{feed_url}" rel="self" type="application/atom+xml"/>
  <link href="{ics_url}" rel="alternate" type="text/calendar"/>
  <generator>contest-hub</generator>
{entries}</feed>
"""


def generate_json_feed(contests: list[Contest], base_url: str = "") -> dict:
    """Generate a JSON Feed (v1.1) of contests."""
    items = []
    for contest in sorted(contests, key=lambda c: c.start_time_seconds, reverse=True):
        items.append({
            "id": contest.key,
            "title": f"[{contest.source}] {contest.name}",
            "date_published": _iso(contest.start_time_seconds),
            "url": contest.url,
            "tags": [contest.status.value.lower(), contest.source],
            "content_text": _summary(contest),
        })

    return {
        "version": "https://jsonfeed.org/version/1.1",
        "title": "Programming Contests",
        "home_page_url": base_url,
        "feed_url": f"{base_url}/feed.json" if base_url else "",
        "description": "Upcoming, running and past contests from Codeforces, CodeChef and LeetCode",
        "items": items,
    }


def _xml_escape(text: str) -> str:
    """Escape text for safe inclusion in XML."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )
