"""Fakes for browser handles, report sinks and model replies."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from browserlens.types.analysis import AnalysisResult
from browserlens.types.events import BrowserEvent
from browserlens.types.session import MonitoringSession


def findings_reply(**overrides: Any) -> str:
    """Build a model reply in the expected JSON shape."""
    payload: dict[str, Any] = {
        "summary": "One uncaught exception",
        "severity": "HIGH",
        "issues": [{
            "type": "error",
            "title": "Uncaught TypeError",
            "description": "A script threw while rendering the cart",
            "suggestion": "Guard against an undefined cart",
            "priority": "HIGH",
            "impact": "Checkout cannot complete",
        }],
        "recommendations": [{
            "category": "error-resolution",
            "recommendation": "Add error boundaries",
            "reasoning": "Contain rendering failures",
        }],
    }
    payload.update(overrides)
    return json.dumps(payload)


# ---------------------------------------------------------------------------
# Playwright-style page
# ---------------------------------------------------------------------------


@dataclass
class FakeConsoleMessage:
    type: str
    text: str
    location: dict[str, Any] = field(default_factory=lambda: {"url": "https://shop.test/app.js"})


@dataclass
class FakePageError:
    message: str
    stack: str | None = None


@dataclass
class FakeRequest:
    url: str
    failure: str | None = None
    timing: dict[str, Any] = field(default_factory=lambda: {"responseEnd": 42.0})


@dataclass
class FakeResponse:
    url: str
    status: int
    request: FakeRequest | None = None


class FakePage:
    """Minimal page exposing ``on`` / ``remove_listener`` / ``is_closed``."""

    def __init__(self, *, closed: bool = False) -> None:
        self.listeners: dict[str, list[Callable[[Any], None]]] = {}
        self.closed = closed

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        self.listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event: str, callback: Callable[[Any], None]) -> None:
        self.listeners[event].remove(callback)

    def is_closed(self) -> bool:
        return self.closed

    def emit(self, event: str, payload: Any) -> None:
        for callback in list(self.listeners.get(event, ())):
            callback(payload)

    def console(self, level: str, text: str) -> None:
        self.emit("console", FakeConsoleMessage(level, text))

    def page_error(self, message: str, stack: str | None = None) -> None:
        self.emit("pageerror", FakePageError(message, stack))


class BareHandle:
    """A handle that can be monitored but offers no live subscriptions."""


# ---------------------------------------------------------------------------
# Report sink
# ---------------------------------------------------------------------------


@dataclass
class RecordingSink:
    """Report sink that keeps every handoff in memory."""

    sessions: list[tuple[MonitoringSession, tuple[BrowserEvent, ...], AnalysisResult | None]] = field(
        default_factory=list,
    )
    comprehensive: list[tuple[list[MonitoringSession], dict[str, AnalysisResult | None]]] = field(
        default_factory=list,
    )

    def write_session(
        self,
        session: MonitoringSession,
        events: Sequence[BrowserEvent],
        analysis: AnalysisResult | None,
    ) -> Path | None:
        self.sessions.append((session, tuple(events), analysis))
        return None

    def write_comprehensive(
        self,
        sessions: Sequence[MonitoringSession],
        analyses: Mapping[str, AnalysisResult | None] | None = None,
    ) -> Path | None:
        self.comprehensive.append((list(sessions), dict(analyses or {})))
        return None
