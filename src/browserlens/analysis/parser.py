"""Model reply parsing.

Turns the text returned by a provider into an :class:`AnalysisResult`.
Every optional field falls back to a default on its own, so one malformed
issue never discards the rest of the analysis.
"""

from __future__ import annotations

import logging
from typing import Any

from browserlens.analysis.json_utils import extract_json
from browserlens.errors import AnalysisError
from browserlens.types.analysis import AnalysisResult, Issue, Priority, Recommendation
from browserlens.types.session import MonitoringSession

logger = logging.getLogger(__name__)


def _text(node: dict[str, Any], key: str, default: str = "") -> str:
    value = node.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def parse_issue(node: dict[str, Any]) -> Issue:
    priority = Priority.parse(node.get("priority"), Priority.MEDIUM)
    if "priority" in node and Priority.parse(node.get("priority")) is None:
        logger.debug("Unrecognised issue priority %r, using MEDIUM", node.get("priority"))
    return Issue(
        category=_text(node, "type", "unknown"),
        title=_text(node, "title", "Unknown Issue"),
        description=_text(node, "description"),
        suggestion=_text(node, "suggestion"),
        priority=priority,
        impact=_text(node, "impact"),
    )


def parse_recommendation(node: dict[str, Any]) -> Recommendation:
    return Recommendation(
        category=_text(node, "category", "general"),
        recommendation=_text(node, "recommendation"),
        reasoning=_text(node, "reasoning"),
    )


def _objects(value: Any, label: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.debug("Ignoring non-list %s field (%s)", label, type(value).__name__)
        return []
    entries = [entry for entry in value if isinstance(entry, dict)]
    skipped = len(value) - len(entries)
    if skipped:
        logger.debug("Skipped %d non-object %s entries", skipped, label)
    return entries


def parse_analysis_response(text: str, session: MonitoringSession) -> AnalysisResult:
    """Parse a model reply for *session*.

    Raises:
        AnalysisError: The reply holds no JSON object at all.
    """
    payload = extract_json(text)
    if not isinstance(payload, dict):
        preview = (text or "")[:200]
        raise AnalysisError(
            "Model reply is not a JSON object",
            details={"preview": preview},
        )

    issues = [parse_issue(node) for node in _objects(payload.get("issues"), "issues")]
    recommendations = [
        parse_recommendation(node)
        for node in _objects(payload.get("recommendations"), "recommendations")
    ]

    return AnalysisResult.from_findings(
        session,
        summary=_text(payload, "summary"),
        issues=issues,
        recommendations=recommendations,
        reported_severity=Priority.parse(payload.get("severity")),
    )
