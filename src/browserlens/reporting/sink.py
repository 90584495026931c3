"""Report sinks.

A sink receives a finished session (events plus optional analysis) and a
cross-session summary. Sinks are fire-and-forget from the orchestrator's
point of view: write failures are logged here and never raised.
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections import Counter
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from browserlens.config import DEFAULT_REPORT_DIR
from browserlens.types.analysis import AnalysisResult
from browserlens.types.events import BrowserEvent
from browserlens.types.session import MonitoringSession

logger = logging.getLogger(__name__)

COMPREHENSIVE_REPORT_NAME = "comprehensive-report.json"


@runtime_checkable
class ReportSink(Protocol):
    """Destination for session and comprehensive reports."""

    def write_session(
        self,
        session: MonitoringSession,
        events: Sequence[BrowserEvent],
        analysis: AnalysisResult | None,
    ) -> Path | None: ...

    def write_comprehensive(
        self,
        sessions: Sequence[MonitoringSession],
        analyses: Mapping[str, AnalysisResult | None] | None = None,
    ) -> Path | None: ...


def session_report_name(session_id: str) -> str:
    return f"session-{session_id[:8]}-report.json"


def build_session_report(
    session: MonitoringSession,
    events: Sequence[BrowserEvent],
    analysis: AnalysisResult | None,
) -> dict[str, Any]:
    """Assemble the session report document."""
    return {
        "generated_at": time.time(),
        "session": session.to_dict(),
        "event_count": len(events),
        "events_by_category": dict(Counter(e.category for e in events)),
        "events_by_level": dict(Counter(e.level for e in events)),
        "events": [e.to_dict() for e in events],
        "analysis": analysis.to_dict() if analysis is not None else None,
    }


def build_comprehensive_report(
    sessions: Sequence[MonitoringSession],
    analyses: Mapping[str, AnalysisResult | None] | None = None,
) -> dict[str, Any]:
    analyses = analyses or {}
    entries: list[dict[str, Any]] = []
    issue_total = 0
    for session in sessions:
        analysis = analyses.get(session.id)
        if analysis is not None:
            issue_total += len(analysis.issues)
        entries.append({
            **session.to_dict(),
            "report": session_report_name(session.id),
            "severity": str(analysis.severity) if analysis is not None else None,
            "issue_count": len(analysis.issues) if analysis is not None else 0,
            "analysis_failed": analysis is None or analysis.has_error,
        })
    return {
        "generated_at": time.time(),
        "total_sessions": len(entries),
        "active_sessions": sum(1 for s in sessions if s.is_active),
        "degraded_sessions": sum(1 for s in sessions if s.degraded),
        "total_issues": issue_total,
        "sessions": entries,
    }


class JsonReportSink:
    """Writes reports as JSON files under ``report_dir``."""

    def __init__(self, report_dir: str | Path = DEFAULT_REPORT_DIR) -> None:
        self._report_dir = Path(report_dir)

    @property
    def report_dir(self) -> Path:
        return self._report_dir

    def write_session(
        self,
        session: MonitoringSession,
        events: Sequence[BrowserEvent],
        analysis: AnalysisResult | None,
    ) -> Path | None:
        path = self._report_dir / session_report_name(session.id)
        written = self._write(path, build_session_report(session, events, analysis))
        if written:
            logger.info("Session report generated: %s (%d events)", path, len(events))
        return written

    def write_comprehensive(
        self,
        sessions: Sequence[MonitoringSession],
        analyses: Mapping[str, AnalysisResult | None] | None = None,
    ) -> Path | None:
        path = self._report_dir / COMPREHENSIVE_REPORT_NAME
        written = self._write(path, build_comprehensive_report(sessions, analyses))
        if written:
            logger.info("Comprehensive report generated: %s (%d sessions)", path, len(sessions))
        return written

    def _write(self, path: Path, document: dict[str, Any]) -> Path | None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self._report_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2, default=str), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError:
            logger.error("Failed to write report %s", path, exc_info=True)
            return None
        return path
