"""Concurrent fetching of every configured source endpoint."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import requests

from contest_hub import ContestSource, Endpoint
from contest_hub.config import HTTP_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

FETCH_WORKERS = 8

Fetch = Callable[[Endpoint], Any]


def fetch_json(
    endpoint: Endpoint,
    session: requests.Session | None = None,
    timeout: int = HTTP_TIMEOUT,
) -> Any:
    """Fetch one endpoint and decode its JSON body.

    Raises ``requests.RequestException`` on transport errors and non-2xx
    responses, ``ValueError`` when the body is not JSON.
    """
    client = session or requests
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}

    response = client.request(
        endpoint.method,
        endpoint.url,
        headers=headers,
        json=endpoint.body,
        timeout=timeout,
    )
    response.raise_for_status()
    return response.json()


def fetch_all(
    sources: list[ContestSource],
    fetch: Fetch = fetch_json,
    max_workers: int = FETCH_WORKERS,
) -> list[tuple[ContestSource, list[Any]]]:
    """Fetch every endpoint of every source concurrently.

    Returns one ``(source, payloads)`` pair per source, in the given order.
    Payloads keep the source's endpoint order; endpoints that failed are
    left out. A failure never cancels any other request.
    """
    jobs = [
        (index, source, endpoint)
        for index, source in enumerate(sources)
        for endpoint in source.endpoints
    ]
    payloads: list[list[Any]] = [[] for _ in sources]
    if not jobs:
        return list(zip(sources, payloads))

    with ThreadPoolExecutor(max_workers=min(max_workers, len(jobs))) as pool:
        futures = [pool.submit(fetch, endpoint) for _, _, endpoint in jobs]

        for (index, source, endpoint), future in zip(jobs, futures):
            try:
                payloads[index].append(future.result())
            except Exception as e:
                logger.warning("Endpoint failed for %s (%s): %s", source.name, endpoint.url, e)

    return list(zip(sources, payloads))


def fetch_source(source: ContestSource, fetch: Fetch = fetch_json) -> list[Any]:
    """Fetch all endpoints of a single source."""
    [(_, payloads)] = fetch_all([source], fetch=fetch)
    return payloads
