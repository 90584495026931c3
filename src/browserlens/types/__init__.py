"""Core value types: events, sessions, analysis results."""

from browserlens.types.analysis import (
    AnalysisResult,
    Issue,
    Priority,
    Recommendation,
    Severity,
    severity_for,
)
from browserlens.types.events import BrowserEvent, EventCategory
from browserlens.types.session import MonitoringSession, SessionStatus, default_session_name

__all__ = [
    "AnalysisResult",
    "BrowserEvent",
    "EventCategory",
    "Issue",
    "MonitoringSession",
    "Priority",
    "Recommendation",
    "SessionStatus",
    "Severity",
    "default_session_name",
    "severity_for",
]
