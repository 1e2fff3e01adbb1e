"""
Contest Hub command line.

Aggregates contest listings from Codeforces, CodeChef and LeetCode and writes
JSON, ICS, and feed outputs. Also looks up explanation videos and manages
bookmarks.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from contest_hub import AggregationError, Contest
from contest_hub.aggregator import aggregate, reclassify, select_contests
from contest_hub.bookmarks import BookmarkStore
from contest_hub.cache import contest_to_dict, load_snapshot, save_snapshot
from contest_hub.calendar_gen import create_contest_calendar, validate_ics
from contest_hub.config import default_sources, load_sources
from contest_hub.feeds import generate_atom_feed, generate_json_feed
from contest_hub.notify import send_error_notification
from contest_hub.video import find_video_url


def _load_configured_sources(path: str | None):
    return load_sources(path) if path else default_sources()


def write_outputs(contests: list[Contest], output_dir: Path, base_url: str = "") -> None:
    """Write contests.json, contests.ics, feed.json and feed.xml."""
    output_dir.mkdir(parents=True, exist_ok=True)

    generated_utc = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    data = {
        "generated_utc": generated_utc,
        "contests": [contest_to_dict(c) for c in contests],
    }
    json_path = output_dir / "contests.json"
    json_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    print(f"  Saved {json_path}")

    ics_bytes = create_contest_calendar(contests).to_ical()
    if not validate_ics(ics_bytes):
        raise ValueError("Generated ICS failed validation")
    ics_path = output_dir / "contests.ics"
    ics_path.write_bytes(ics_bytes)
    print(f"  Saved {ics_path}")

    feed_path = output_dir / "feed.json"
    feed_path.write_text(json.dumps(generate_json_feed(contests, base_url), indent=2), encoding="utf-8")
    print(f"  Saved {feed_path}")

    atom_path = output_dir / "feed.xml"
    atom_path.write_text(generate_atom_feed(contests, base_url), encoding="utf-8")
    print(f"  Saved {atom_path}")


def cmd_generate(args: argparse.Namespace) -> int:
    sources = _load_configured_sources(args.sources)
    output_dir = Path(args.output)
    cache_dir = Path(args.cache)

    print(f"Fetching contests from {', '.join(s.name for s in sources)}...")
    try:
        contests = aggregate(sources)
    except AggregationError as e:
        print(f"  ERROR: {e}")
        cached = load_snapshot(cache_dir)
        if cached:
            print(f"  Using cached contest list ({len(cached)} contests)")
            write_outputs(reclassify(cached), output_dir, args.base_url)
            send_error_notification(f"{e}\n\nServed {len(cached)} cached contests instead.")
        else:
            send_error_notification(f"{e}\n\nNo cached data available — outputs not written.")
        return 1

    by_source: dict[str, int] = {}
    for c in contests:
        by_source[c.source] = by_source.get(c.source, 0) + 1
    for name, count in by_source.items():
        print(f"  {name}: {count} contests")

    write_outputs(contests, output_dir, args.base_url)
    save_snapshot(cache_dir, contests)

    missing = [s.name for s in sources if s.name not in by_source]
    if missing:
        print(f"  Warning: no contests from {', '.join(missing)}")

    print(f"Done — {len(contests)} contests")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    try:
        contests = aggregate(_load_configured_sources(args.sources))
    except AggregationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    statuses = [s.upper() for s in args.status]
    selected = select_contests(contests, query=args.search, sources=args.source, statuses=statuses)
    if args.bookmarked:
        store = BookmarkStore(args.bookmarks)
        keys = store.load()
        selected = [c for c in selected if c.key in keys]

    for c in selected:
        start = datetime.fromtimestamp(c.start_time_seconds, tz=timezone.utc)
        print(f"{start:%Y-%m-%d %H:%M UTC}  {c.status.value:<8}  {c.key:<40}  {c.name}")
    print(f"{len(selected)} of {len(contests)} contests")
    return 0


def cmd_video(args: argparse.Namespace) -> int:
    url = find_video_url(args.name)
    if url is None:
        print("No video found")
        return 1
    print(url)
    return 0


def cmd_bookmark(args: argparse.Namespace) -> int:
    store = BookmarkStore(args.bookmarks)
    store.load()
    state = "Bookmarked" if store.toggle(args.key) else "Removed bookmark"
    print(f"{state}: {args.key}")
    return 0


def cmd_bookmarks(args: argparse.Namespace) -> int:
    for key in sorted(BookmarkStore(args.bookmarks).load()):
        print(key)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contest-hub", description=__doc__.strip().splitlines()[0])
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--bookmarks", help="Bookmark file (default: ~/.contest_hub/bookmarks.json)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Aggregate contests and write output files")
    gen.add_argument("--sources", help="JSON file with source definitions")
    gen.add_argument("--output", default="public", help="Output directory")
    gen.add_argument("--cache", default="cache", help="Snapshot directory for fallback")
    gen.add_argument("--base-url", default="", help="Public URL prefix used in feeds")
    gen.set_defaults(func=cmd_generate)

    lst = sub.add_parser("list", help="Print contests")
    lst.add_argument("--sources", help="JSON file with source definitions")
    lst.add_argument("--source", action="append", default=[], help="Only this source (repeatable)")
    lst.add_argument(
        "--status",
        action="append",
        default=[],
        choices=["upcoming", "running", "past", "UPCOMING", "RUNNING", "PAST"],
        help="Only this status (repeatable)",
    )
    lst.add_argument("--search", default="", help="Case-insensitive name filter")
    lst.add_argument("--bookmarked", action="store_true", help="Only bookmarked contests")
    lst.set_defaults(func=cmd_list)

    vid = sub.add_parser("video", help="Find an explanation video for a contest")
    vid.add_argument("name", help="Contest name, e.g. 'Weekly Contest 400'")
    vid.set_defaults(func=cmd_video)

    bm = sub.add_parser("bookmark", help="Toggle a bookmark, e.g. 'Codeforces:1985'")
    bm.add_argument("key")
    bm.set_defaults(func=cmd_bookmark)

    bms = sub.add_parser("bookmarks", help="List bookmarked keys")
    bms.set_defaults(func=cmd_bookmarks)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
