"""Tests for BrowserEvent."""

from __future__ import annotations

import dataclasses

import pytest

from browserlens.types.events import BrowserEvent, EventCategory


class TestFactories:
    def test_console_log(self) -> None:
        event = BrowserEvent.console_log("s1", "WARN", "deprecated API", "app.js")
        assert event.category == EventCategory.CONSOLE
        assert event.level == "WARN"
        assert event.message == "deprecated API"
        assert event.source == "app.js"
        assert event.id

    def test_network_request_levels(self) -> None:
        ok = BrowserEvent.network_request("s1", "https://shop.test/api", 200, 120.7)
        failed = BrowserEvent.network_request("s1", "https://shop.test/api", 503, 80)
        assert ok.level == "INFO"
        assert failed.level == "ERROR"
        assert ok.category == EventCategory.NETWORK
        assert "120ms" in ok.message
        assert ok.source == "https://shop.test/api"

    def test_script_exception(self) -> None:
        event = BrowserEvent.script_exception("s1", "TypeError: x is undefined", "at render (app.js:10)")
        assert event.category == "javascript-exception"
        assert event.level == "ERROR"
        assert event.details == "at render (app.js:10)"

    def test_performance_and_failure(self) -> None:
        metric = BrowserEvent.performance_metric("s1", "first-paint", 310)
        failure = BrowserEvent.network_failure("s1", "https://cdn.test/a.css", "net::ERR_FAILED")
        assert metric.category == EventCategory.PERFORMANCE
        assert "first-paint" in metric.message
        assert failure.category == EventCategory.NETWORK_FAILURE
        assert failure.source == "https://cdn.test/a.css"


class TestImmutability:
    def test_frozen(self) -> None:
        event = BrowserEvent.console_log("s1", "INFO", "hello")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.message = "changed"  # type: ignore[misc]

    def test_metadata_read_only(self) -> None:
        source = {"tab": 1}
        event = BrowserEvent.console_log("s1", "INFO", "hello", metadata=source)
        source["tab"] = 2
        assert event.metadata["tab"] == 1
        with pytest.raises(TypeError):
            event.metadata["tab"] = 3  # type: ignore[index]

    def test_unique_ids(self) -> None:
        a = BrowserEvent.console_log("s1", "INFO", "a")
        b = BrowserEvent.console_log("s1", "INFO", "a")
        assert a.id != b.id


class TestSerialisation:
    def test_from_dict_restores_fields(self) -> None:
        event = BrowserEvent.script_exception("s1", "boom", "stack", metadata={"frame": "main"})
        restored = BrowserEvent.from_dict(event.to_dict())
        assert restored == event

    def test_from_dict_defaults(self) -> None:
        event = BrowserEvent.from_dict({"session_id": "s2", "message": "bare"})
        assert event.category == EventCategory.CONSOLE
        assert event.level == "INFO"
        assert event.details is None
        assert dict(event.metadata) == {}
