"""Contest Hub — shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ContestHubError(Exception):
    """Base class for errors raised across the package boundary."""


class AggregationError(ContestHubError):
    """Raised when no source produced a single contest."""


class Status(str, Enum):
    UPCOMING = "UPCOMING"
    RUNNING = "RUNNING"
    PAST = "PAST"


@dataclass(frozen=True)
class Endpoint:
    """One URL to query for a source."""

    url: str
    method: str = "GET"
    body: dict | None = field(default=None, compare=False)


@dataclass(frozen=True)
class ContestSource:
    """A contest provider and the endpoints that together list its contests."""

    name: str
    endpoints: tuple[Endpoint, ...]


@dataclass(frozen=True)
class Contest:
    """A single normalized contest listing."""

    id: int | str
    name: str
    start_time_seconds: int
    duration_seconds: int
    source: str
    status: Status
    url: str

    @property
    def end_time_seconds(self) -> int:
        return self.start_time_seconds + self.duration_seconds

    @property
    def key(self) -> str:
        """Bookmark key; ids are only unique within a source."""
        return f"{self.source}:{self.id}"


@dataclass(frozen=True)
class VideoCandidate:
    """A video result scraped from a search page."""

    video_id: str
    title: str
    channel: str
