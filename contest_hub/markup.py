"""Extraction of the ``ytInitialData`` blob embedded in YouTube pages."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

YT_INITIAL_DATA_RE = re.compile(r"var ytInitialData = (\{.*?\});</script>", re.DOTALL)
_ASSIGNMENT_RE = re.compile(r"ytInitialData\"?\]?\s*=\s*")


def extract_initial_data(html: str) -> dict[str, Any] | None:
    """Return the parsed ``ytInitialData`` object, or ``None`` if not found.

    Page markup is outside our control, so a missing marker or a blob that
    does not decode is an ordinary "no data" result rather than an error.
    """
    if not html:
        return None

    match = YT_INITIAL_DATA_RE.search(html)
    if match:
        return _decode(match.group(1))

    return _extract_from_scripts(html)


def _decode(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.info("ytInitialData found but not valid JSON: %s", e)
        return None
    return data if isinstance(data, dict) else None


def _extract_from_scripts(html: str) -> dict[str, Any] | None:
    """Fallback for templates that assign the blob differently,
    e.g. ``window["ytInitialData"] = {...};``.
    """
    soup = BeautifulSoup(html, "html.parser")
    decoder = json.JSONDecoder()

    for script in soup.find_all("script"):
        text = script.string
        if not text or "ytInitialData" not in text:
            continue
        assignment = _ASSIGNMENT_RE.search(text)
        if not assignment:
            continue
        try:
            data, _ = decoder.raw_decode(text, assignment.end())
        except (ValueError, RecursionError):
            continue
        if isinstance(data, dict):
            return data

    logger.info("ytInitialData marker not present in page")
    return None
