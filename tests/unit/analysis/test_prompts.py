"""Tests for analysis prompt construction."""

from __future__ import annotations

import pytest

from browserlens.analysis.prompts import (
    SYSTEM_PROMPT,
    build_analysis_prompt,
    format_timestamp,
)
from browserlens.types.events import BrowserEvent

BASE_TS = 1_767_268_800.0  # 2026-01-01T12:00:00Z


def _console(n: int, offset: float = 0.0) -> BrowserEvent:
    return BrowserEvent.console_log("s1", "INFO", f"message {n}", timestamp=BASE_TS + offset)


class TestFormatTimestamp:
    def test_iso_utc(self) -> None:
        assert format_timestamp(BASE_TS + 0.25) == "2026-01-01T12:00:00.250Z"


class TestBuildPrompt:
    def test_header(self) -> None:
        events = [
            _console(1, offset=5),
            BrowserEvent.script_exception("s1", "TypeError: boom", timestamp=BASE_TS),
            _console(2, offset=10),
        ]
        prompt = build_analysis_prompt(events, "checkout flow")
        assert "Session: checkout flow" in prompt
        assert "Time Range: 2026-01-01T12:00:00.000Z to 2026-01-01T12:00:10.000Z" in prompt
        assert "Total Events: 3" in prompt

    def test_category_counts_in_first_seen_order(self) -> None:
        events = [
            BrowserEvent.network_request("s1", "https://a.test", 200, 5, timestamp=BASE_TS),
            _console(1, offset=1),
            _console(2, offset=2),
        ]
        prompt = build_analysis_prompt(events, "s")
        assert "- network: 1 events\n- console: 2 events" in prompt

    def test_details_sorted_and_include_level(self) -> None:
        events = [
            _console(2, offset=2),
            BrowserEvent.script_exception("s1", "TypeError: boom", "at app.js:1", timestamp=BASE_TS),
        ]
        prompt = build_analysis_prompt(events, "s")
        first = prompt.index("TypeError: boom")
        second = prompt.index("message 2")
        assert first < second
        assert "  Details: at app.js:1" in prompt
        assert "  Level: ERROR" in prompt

    def test_detail_section_is_bounded(self) -> None:
        events = [_console(n, offset=n) for n in range(25)]
        prompt = build_analysis_prompt(events, "s")
        assert "message 19" in prompt
        assert "message 20" not in prompt
        assert "... and 5 more events" in prompt
        assert "Total Events: 25" in prompt

    def test_no_trailer_at_limit(self) -> None:
        events = [_console(n, offset=n) for n in range(20)]
        assert "more events" not in build_analysis_prompt(events, "s")

    def test_custom_limit(self) -> None:
        events = [_console(n, offset=n) for n in range(5)]
        assert "... and 3 more events" in build_analysis_prompt(events, "s", detail_limit=2)

    def test_empty_events_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_analysis_prompt([], "s")


class TestSystemPrompt:
    def test_describes_output_shape(self) -> None:
        for key in ('"summary"', '"severity"', '"issues"', '"recommendations"', '"priority"'):
            assert key in SYSTEM_PROMPT
