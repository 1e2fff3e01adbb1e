"""Tests for source configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from contest_hub import Endpoint
from contest_hub.config import default_sources, load_sources


class TestSources:
    def test_default_sources(self) -> None:
        sources = {s.name: s for s in default_sources()}
        assert set(sources) == {"Codeforces", "CodeChef", "LeetCode"}
        assert len(sources["CodeChef"].endpoints) == 2
        assert all(ep.method == "POST" for ep in sources["LeetCode"].endpoints)
        assert "topTwoContests" in sources["LeetCode"].endpoints[1].body["query"]

    def test_codechef_urls_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODECHEF_FUTURE_URL", "https://proxy.test/future")
        monkeypatch.setenv("CODECHEF_PAST_URL", "https://proxy.test/past")
        codechef = next(s for s in default_sources() if s.name == "CodeChef")
        assert [ep.url for ep in codechef.endpoints] == ["https://proxy.test/future", "https://proxy.test/past"]

    def test_load_sources_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sources.json"
        path.write_text(json.dumps({
            "sources": [
                {"name": "Codeforces", "endpoints": ["https://codeforces.com/api/contest.list"]},
                {"name": "LeetCode", "endpoints": [
                    {"url": "https://leetcode.com/graphql", "method": "post", "body": {"query": "{ topTwoContests { title } }"}},
                ]},
            ]
        }))
        codeforces, leetcode = load_sources(path)
        assert codeforces.endpoints == (Endpoint("https://codeforces.com/api/contest.list"),)
        assert leetcode.endpoints[0].method == "POST"
        assert leetcode.endpoints[0].body == {"query": "{ topTwoContests { title } }"}
