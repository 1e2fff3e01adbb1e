"""Find the explanation video for a contest on YouTube search results.

Candidates are read out of the search page's embedded data and matched in
tiers. The first tier that matches any candidate wins; within a tier the
first candidate in page order is taken.

1. Uploaded by the TLE Eliminators channel and titled with the full contest
   name.
2. Title contains the contest name (division/rating suffix removed) plus the
   channel's ``| TLE Eliminators`` title signature, from the exact channel.
3. Title contains every word of the contest name in order and a
   solution-type keyword, from any channel.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus

import requests

from contest_hub import VideoCandidate
from contest_hub.config import BROWSER_USER_AGENT, VIDEO_TIMEOUT
from contest_hub.markup import extract_initial_data

logger = logging.getLogger(__name__)

TARGET_CHANNEL = "tle eliminators - by priyansh"
CHANNEL_SIGNATURE = "tle eliminators"
TITLE_SIGNATURE = "| tle eliminators"
SOLUTION_KEYWORDS = frozenset({
    "solution",
    "solutions",
    "editorial",
    "discussion",
    "explained",
    "explanation",
    "approach",
})

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
SEARCH_URL = "https://www.youtube.com/results?search_query={query}"

_NAME_SUFFIX_RE = re.compile(
    r"\s*\(\s*(?:div|rated|unrated|rating)[^)]*\)\s*$", re.IGNORECASE
)
_TOKEN_RE = re.compile(r"[a-z0-9]+")
_PAREN_GROUP_RE = re.compile(r"(\([^()]*\))")


@dataclass(frozen=True)
class VideoMatch:
    candidate: VideoCandidate
    tier: int

    @property
    def url(self) -> str:
        return WATCH_URL.format(video_id=self.candidate.video_id)


def normalize(text: str) -> str:
    """Lowercase, trim, tighten parentheses, drop periods, collapse whitespace.

    Whitespace inside a parenthetical group is left as written.
    """
    text = text.lower().strip()
    text = re.sub(r"\s*\(\s*", "(", text)
    text = re.sub(r"\s*\)\s*", ")", text)
    text = text.replace(".", "")
    parts = _PAREN_GROUP_RE.split(text)
    parts[::2] = [re.sub(r"\s+", " ", part) for part in parts[::2]]
    return "".join(parts)


def base_name(contest_name: str) -> str:
    """Normalized name without a trailing division/rating annotation."""
    return normalize(_NAME_SUFFIX_RE.sub("", contest_name))


def parse_candidates(data: dict[str, Any]) -> list[VideoCandidate]:
    """Collect video results from a parsed ``ytInitialData`` object."""
    sections = _dig(
        data,
        "contents",
        "twoColumnSearchResultsRenderer",
        "primaryContents",
        "sectionListRenderer",
        "contents",
    )
    if not isinstance(sections, list):
        return []

    candidates: list[VideoCandidate] = []
    for section in sections:
        items = _dig(section, "itemSectionRenderer", "contents")
        if not isinstance(items, list):
            continue
        for item in items:
            candidate = _parse_video_renderer(_dig(item, "videoRenderer"))
            if candidate:
                candidates.append(candidate)
    return candidates


def _parse_video_renderer(renderer: Any) -> VideoCandidate | None:
    if not isinstance(renderer, dict):
        return None
    video_id = renderer.get("videoId")
    title_runs = _dig(renderer, "title", "runs")
    owner_runs = _dig(renderer, "ownerText", "runs")
    if not video_id or not isinstance(title_runs, list) or not isinstance(owner_runs, list):
        return None
    if not title_runs or not owner_runs:
        return None

    title = "".join(str(run.get("text", "")) for run in title_runs if isinstance(run, dict)).strip()
    channel = owner_runs[0].get("text", "") if isinstance(owner_runs[0], dict) else ""
    return VideoCandidate(video_id=video_id, title=title, channel=str(channel).lower())


def _dig(node: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def match_video(contest_name: str, candidates: list[VideoCandidate]) -> VideoMatch | None:
    """Pick the best candidate for ``contest_name`` by tier."""
    full = normalize(contest_name)
    if not full:
        return None
    base = base_name(contest_name)
    base_tokens = _TOKEN_RE.findall(base)

    titles = [normalize(c.title) for c in candidates]

    for candidate, title in zip(candidates, titles):
        if CHANNEL_SIGNATURE in candidate.channel and _phrase_at(title, full, anchored=True):
            return VideoMatch(candidate, tier=1)

    for candidate, title in zip(candidates, titles):
        if (
            base
            and _phrase_at(title, base)
            and TITLE_SIGNATURE in title
            and candidate.channel == TARGET_CHANNEL
        ):
            return VideoMatch(candidate, tier=2)

    # Word matching needs at least one word to compare
    if not base_tokens:
        return None

    for candidate, title in zip(candidates, titles):
        title_tokens = _TOKEN_RE.findall(title)
        if _in_order(base_tokens, title_tokens) and SOLUTION_KEYWORDS.intersection(title_tokens):
            return VideoMatch(candidate, tier=3)

    return None


def _phrase_at(title: str, phrase: str, anchored: bool = False) -> bool:
    """Whether ``phrase`` occurs in ``title`` without splitting a word or number."""
    pattern = re.escape(phrase)
    if phrase[:1].isalnum():
        pattern = r"(?<![a-z0-9])" + pattern
    if phrase[-1:].isalnum():
        pattern += r"(?![a-z0-9])"
    found = re.match(pattern, title) if anchored else re.search(pattern, title)
    return found is not None


def _in_order(needles: list[str], haystack: list[str]) -> bool:
    remaining = iter(haystack)
    return all(word in remaining for word in needles)


def resolve_video(contest_name: str, html: str) -> str | None:
    """Watch URL of the best-matching video on a search results page, if any."""
    data = extract_initial_data(html)
    if data is None:
        return None

    candidates = parse_candidates(data)
    if not candidates:
        logger.info("No video results on search page for %r", contest_name)
        return None

    match = match_video(contest_name, candidates)
    if match is None:
        logger.info("No matching video among %d results for %r", len(candidates), contest_name)
        return None

    logger.info(
        "Found video %r from %r (tier %d)",
        match.candidate.title,
        match.candidate.channel,
        match.tier,
    )
    return match.url


def search_url(contest_name: str) -> str:
    query = f'"{contest_name}" "TLE Eliminators"'
    return SEARCH_URL.format(query=quote_plus(query))


def find_video_url(
    contest_name: str,
    timeout: float = VIDEO_TIMEOUT,
    session: requests.Session | None = None,
) -> str | None:
    """Search YouTube for ``contest_name`` and resolve the best video.

    Network failures and timeouts are reported as no match.
    """
    if not contest_name or not contest_name.strip():
        return None

    client = session or requests
    headers = {
        "User-Agent": BROWSER_USER_AGENT,
        "Accept-Language": "en-US,en;q=0.9",
    }
    try:
        response = client.get(search_url(contest_name), headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("YouTube search failed for %r: %s", contest_name, e)
        return None

    return resolve_video(contest_name, response.text)
