"""ICS calendar generation from contest data."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from icalendar import Alarm, Calendar, Event

from contest_hub import Contest, Status

# Used as the event length when a source reports no duration
DEFAULT_DURATION = timedelta(hours=2)


def create_contest_calendar(contests: list[Contest], name: str = "Programming Contests") -> Calendar:
    """Create an ICS calendar with one event per contest."""
    cal = Calendar()
    cal.add("prodid", "-//Contest Hub//contest-hub//")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", name)
    cal.add("x-wr-timezone", "UTC")
    # Refresh interval hint for calendar clients (6 hours)
    cal.add("x-published-ttl", "PT6H")

    for contest in contests:
        cal.add_component(_create_event(contest))

    return cal


def _create_event(contest: Contest) -> Event:
    event = Event()
    start = datetime.fromtimestamp(contest.start_time_seconds, tz=timezone.utc)
    duration = timedelta(seconds=contest.duration_seconds) if contest.duration_seconds else DEFAULT_DURATION

    event.add("summary", f"[{contest.source}] {contest.name}")
    event.add("dtstart", start)
    event.add("dtend", start + duration)
    event.add("description", f"{contest.source} contest\n\n{contest.url}")
    event.add("url", contest.url)
    event.add("uid", f"{contest.source.lower()}-{contest.id}@contest-hub")
    event.add("status", "CONFIRMED")

    if contest.status == Status.UPCOMING:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", f"{contest.name} starts in 30 minutes!")
        alarm.add("trigger", timedelta(minutes=-30))
        event.add_component(alarm)
    elif contest.status == Status.PAST:
        event.add("transp", "TRANSPARENT")  # Don't block time for finished contests

    return event


def validate_ics(data: bytes) -> bool:
    """Basic validation that ICS data is well-formed."""
    text = data.decode("utf-8", errors="replace")
    return text.startswith("BEGIN:VCALENDAR") and "END:VCALENDAR" in text
