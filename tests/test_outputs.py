"""Tests for calendar generation, feed output, snapshot caching and the CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from contest_hub import AggregationError, Contest, Status, cli
from contest_hub.cache import TTLCache, load_snapshot, save_snapshot
from contest_hub.calendar_gen import create_contest_calendar, validate_ics
from contest_hub.feeds import generate_atom_feed, generate_json_feed
from contest_hub.notify import send_error_notification

CONTESTS = [
    Contest(
        id=1986,
        name="Codeforces Round 954 (Div. 3)",
        start_time_seconds=1_716_800_000,
        duration_seconds=8100,
        source="Codeforces",
        status=Status.PAST,
        url="https://codeforces.com/contest/1986",
    ),
    Contest(
        id="weekly-contest-401",
        name="Weekly Contest 401",
        start_time_seconds=1_717_200_000,
        duration_seconds=5400,
        source="LeetCode",
        status=Status.UPCOMING,
        url="https://leetcode.com/contest/weekly-contest-401",
    ),
    Contest(
        id="START140",
        name="Starters <140> & friends",
        start_time_seconds=1_717_300_000,
        duration_seconds=0,
        source="CodeChef",
        status=Status.UPCOMING,
        url="https://www.codechef.com/START140",
    ),
]


# --- Calendar generation tests ---


class TestCalendarGen:
    def test_creates_valid_ics(self) -> None:
        ics_bytes = create_contest_calendar(CONTESTS).to_ical()
        assert validate_ics(ics_bytes)

    def test_event_count(self) -> None:
        cal = create_contest_calendar(CONTESTS)
        events = [c for c in cal.walk() if c.name == "VEVENT"]
        assert len(events) == len(CONTESTS)

    def test_upcoming_events_have_alarm(self) -> None:
        cal = create_contest_calendar(CONTESTS)
        for event in (c for c in cal.walk() if c.name == "VEVENT"):
            alarms = [c for c in event.walk() if c.name == "VALARM"]
            is_upcoming = "Codeforces" not in str(event.get("summary"))
            assert len(alarms) == (1 if is_upcoming else 0)

    def test_stable_uid(self) -> None:
        ics = create_contest_calendar(CONTESTS[:1]).to_ical()
        assert b"codeforces-1986@contest-hub" in ics

    def test_missing_duration_uses_default_length(self) -> None:
        cal = create_contest_calendar(CONTESTS[2:])
        [event] = [c for c in cal.walk() if c.name == "VEVENT"]
        length = event.decoded("dtend") - event.decoded("dtstart")
        assert length.total_seconds() == 2 * 3600

    def test_empty_calendar(self) -> None:
        cal = create_contest_calendar([])
        assert validate_ics(cal.to_ical())
        assert not [c for c in cal.walk() if c.name == "VEVENT"]

    def test_validate_ics_invalid(self) -> None:
        assert not validate_ics(b"not a calendar")
        assert not validate_ics(b"")


# --- Feed tests ---


class TestFeeds:
    def test_atom_feed_entries(self) -> None:
        atom = generate_atom_feed(CONTESTS)
        assert atom.startswith("<?xml")
        assert atom.count("<entry>") == len(CONTESTS)

    def test_atom_feed_escapes_names(self) -> None:
        atom = generate_atom_feed(CONTESTS)
        assert "Starters &lt;140&gt; &amp; friends" in atom

    def test_json_feed_structure(self) -> None:
        feed = generate_json_feed(CONTESTS, base_url="https://contests.example")
        assert feed["version"] == "https://jsonfeed.org/version/1.1"
        assert feed["feed_url"] == "https://contests.example/feed.json"
        assert [item["id"] for item in feed["items"]] == [
            "CodeChef:START140",
            "LeetCode:weekly-contest-401",
            "Codeforces:1986",
        ]

    def test_json_feed_item_fields(self) -> None:
        item = generate_json_feed(CONTESTS)["items"][1]
        assert item["tags"] == ["upcoming", "LeetCode"]
        assert item["url"] == "https://leetcode.com/contest/weekly-contest-401"
        assert "1h 30m" in item["content_text"]

    def test_empty_feeds(self) -> None:
        assert "<entry>" not in generate_atom_feed([])
        assert generate_json_feed([])["items"] == []


# --- Cache tests ---


class TestCache:
    def test_snapshot_save_and_load(self, tmp_path: Path) -> None:
        save_snapshot(tmp_path, CONTESTS)
        assert load_snapshot(tmp_path) == CONTESTS

    def test_load_missing_snapshot_returns_none(self, tmp_path: Path) -> None:
        assert load_snapshot(tmp_path) is None

    def test_load_corrupt_snapshot_returns_none(self, tmp_path: Path) -> None:
        (tmp_path / "contests.json").write_text("{}")
        assert load_snapshot(tmp_path) is None

    def test_ttl_cache_reports_age(self) -> None:
        clock = [100.0]
        cache = TTLCache(ttl_seconds=10, clock=lambda: clock[0])
        assert cache.get("k") is None
        cache.set("k", "v")
        clock[0] = 104.0
        assert cache.get("k") == ("v", 4.0)
        clock[0] = 110.0
        assert cache.get("k") is None


# --- Notification tests ---


class TestNotify:
    def test_missing_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PUSHOVER_USER_KEY", raising=False)
        monkeypatch.delenv("PUSHOVER_API_TOKEN", raising=False)
        assert send_error_notification("boom") is False


# --- CLI tests ---


class TestCli:
    @pytest.fixture(autouse=True)
    def no_pushover(self, monkeypatch: pytest.MonkeyPatch) -> list[str]:
        sent: list[str] = []
        monkeypatch.setattr(cli, "send_error_notification", lambda message, **kw: sent.append(message) or True)
        return sent

    def test_generate_writes_outputs_and_snapshot(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cli, "aggregate", lambda sources: CONTESTS)
        out, cache = tmp_path / "public", tmp_path / "cache"

        assert cli.main(["generate", "--output", str(out), "--cache", str(cache)]) == 0

        data = json.loads((out / "contests.json").read_text())
        assert len(data["contests"]) == len(CONTESTS)
        assert validate_ics((out / "contests.ics").read_bytes())
        assert (out / "feed.json").exists()
        assert (out / "feed.xml").exists()
        assert load_snapshot(cache) == CONTESTS

    def test_generate_falls_back_to_snapshot(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, no_pushover: list[str]
    ) -> None:
        def fail(sources):
            raise AggregationError("No contests could be fetched from any source")

        monkeypatch.setattr(cli, "aggregate", fail)
        out, cache = tmp_path / "public", tmp_path / "cache"
        save_snapshot(cache, CONTESTS)

        assert cli.main(["generate", "--output", str(out), "--cache", str(cache)]) == 1
        assert len(json.loads((out / "contests.json").read_text())["contests"]) == len(CONTESTS)
        assert len(no_pushover) == 1

    def test_generate_without_snapshot(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, no_pushover: list[str]
    ) -> None:
        def fail(sources):
            raise AggregationError("No contests could be fetched from any source")

        monkeypatch.setattr(cli, "aggregate", fail)
        out = tmp_path / "public"

        assert cli.main(["generate", "--output", str(out), "--cache", str(tmp_path / "cache")]) == 1
        assert not out.exists()
        assert "No cached data" in no_pushover[0]

    def test_list_filters(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr(cli, "aggregate", lambda sources: CONTESTS)
        assert cli.main(["list", "--source", "LeetCode", "--status", "upcoming"]) == 0
        out = capsys.readouterr().out
        assert "Weekly Contest 401" in out
        assert "Codeforces Round" not in out
        assert "1 of 3 contests" in out

    def test_bookmark_toggle(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = str(tmp_path / "bookmarks.json")
        assert cli.main(["--bookmarks", path, "bookmark", "Codeforces:1986"]) == 0
        assert cli.main(["--bookmarks", path, "bookmarks"]) == 0
        out = capsys.readouterr().out
        assert "Bookmarked: Codeforces:1986" in out
        assert out.strip().endswith("Codeforces:1986")

    def test_list_bookmarked(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr(cli, "aggregate", lambda sources: CONTESTS)
        path = str(tmp_path / "bookmarks.json")
        cli.main(["--bookmarks", path, "bookmark", "CodeChef:START140"])
        capsys.readouterr()

        assert cli.main(["--bookmarks", path, "list", "--bookmarked"]) == 0
        out = capsys.readouterr().out
        assert "CodeChef:START140" in out
        assert "1 of 3 contests" in out

    def test_video_not_found(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr(cli, "find_video_url", lambda name: None)
        assert cli.main(["video", "Weekly Contest 401"]) == 1
        assert "No video found" in capsys.readouterr().out
