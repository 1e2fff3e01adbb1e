"""Temporal status classification for contests."""

from __future__ import annotations

from contest_hub import Status


def classify(start_time_seconds: int, duration_seconds: int, now_seconds: int) -> Status:
    """Classify a contest relative to ``now_seconds``.

    A contest is running from its start through its end second inclusive,
    and past only once ``now`` is strictly after the end.
    """
    end_time_seconds = start_time_seconds + duration_seconds
    if now_seconds > end_time_seconds:
        return Status.PAST
    if now_seconds >= start_time_seconds:
        return Status.RUNNING
    return Status.UPCOMING
