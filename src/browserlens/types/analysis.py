"""Analysis result types.

An :class:`AnalysisResult` is produced fresh by every Analysis Engine
invocation and never mutated afterwards. Its ``severity`` is derived from
its issues rather than trusted from the model reply.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from browserlens.types.session import MonitoringSession


class Priority(StrEnum):
    """Issue priority, ordered from least to most urgent."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _RANKS[self.value]

    @classmethod
    def parse(cls, value: Any, default: Priority | None = None) -> Priority | None:
        """Parse a case-insensitive priority name, returning *default* if unknown."""
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return default


# Severity shares the same scale as Priority.
Severity = Priority

_RANKS = {"LOW": 0, "MEDIUM": 1, "HIGH": 2, "CRITICAL": 3}


@dataclass(frozen=True, slots=True)
class Issue:
    """A specific detected problem with a suggested remedy."""

    category: str = "unknown"
    title: str = "Unknown Issue"
    description: str = ""
    suggestion: str = ""
    priority: Priority = Priority.MEDIUM
    impact: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.category,
            "title": self.title,
            "description": self.description,
            "suggestion": self.suggestion,
            "priority": str(self.priority),
            "impact": self.impact,
        }


@dataclass(frozen=True, slots=True)
class Recommendation:
    """A general improvement suggestion not tied to a specific issue."""

    category: str = "general"
    recommendation: str = ""
    reasoning: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "recommendation": self.recommendation,
            "reasoning": self.reasoning,
        }


def severity_for(issues: Iterable[Issue]) -> Severity:
    """Maximum priority across *issues*, or ``LOW`` when there are none."""
    worst = Severity.LOW
    for issue in issues:
        if issue.priority.rank > worst.rank:
            worst = issue.priority
    return worst


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Structured findings from one analysis run."""

    session_id: str | None = None
    session_name: str | None = None
    timestamp: float = field(default_factory=time.time)
    summary: str = ""
    issues: tuple[Issue, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    has_error: bool = False
    error_message: str | None = None
    reported_severity: Severity | None = None

    @property
    def severity(self) -> Severity:
        if self.has_error:
            return Severity.CRITICAL
        return severity_for(self.issues)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, message: str, session: MonitoringSession | None = None) -> AnalysisResult:
        return cls(
            session_id=session.id if session else None,
            session_name=session.name if session else None,
            summary=message,
        )

    @classmethod
    def failed(cls, message: str, session: MonitoringSession | None = None) -> AnalysisResult:
        return cls(
            session_id=session.id if session else None,
            session_name=session.name if session else None,
            summary="Analysis failed",
            has_error=True,
            error_message=message,
        )

    @classmethod
    def from_findings(
        cls,
        session: MonitoringSession,
        *,
        summary: str,
        issues: Iterable[Issue] = (),
        recommendations: Iterable[Recommendation] = (),
        reported_severity: Severity | None = None,
    ) -> AnalysisResult:
        return cls(
            session_id=session.id,
            session_name=session.name,
            summary=summary,
            issues=tuple(issues),
            recommendations=tuple(recommendations),
            reported_severity=reported_severity,
        )

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    @property
    def has_recommendations(self) -> bool:
        return bool(self.recommendations)

    @property
    def has_critical_issues(self) -> bool:
        return self.critical_issue_count > 0

    @property
    def critical_issue_count(self) -> int:
        return sum(1 for i in self.issues if i.priority == Priority.CRITICAL)

    @property
    def high_priority_issue_count(self) -> int:
        return sum(1 for i in self.issues if i.priority == Priority.HIGH)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "session_name": self.session_name,
            "timestamp": self.timestamp,
            "summary": self.summary,
            "severity": str(self.severity),
            "reported_severity": str(self.reported_severity) if self.reported_severity else None,
            "issues": [i.to_dict() for i in self.issues],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "has_error": self.has_error,
            "error_message": self.error_message,
        }
