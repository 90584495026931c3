"""Tests for model reply parsing."""

from __future__ import annotations

import json

import pytest

from browserlens.analysis.parser import parse_analysis_response
from browserlens.errors import AnalysisError
from browserlens.types.analysis import Priority, Severity
from browserlens.types.session import MonitoringSession
from tests.helpers.fixtures import findings_reply


class TestParseAnalysisResponse:
    def test_full_reply(self, session: MonitoringSession) -> None:
        result = parse_analysis_response(findings_reply(), session)
        assert result.session_id == session.id
        assert result.session_name == "checkout flow"
        assert result.summary == "One uncaught exception"
        assert result.reported_severity is Severity.HIGH
        assert result.severity is Severity.HIGH

        [issue] = result.issues
        assert issue.category == "error"
        assert issue.title == "Uncaught TypeError"
        assert issue.priority is Priority.HIGH
        assert issue.impact == "Checkout cannot complete"

        [rec] = result.recommendations
        assert rec.category == "error-resolution"
        assert rec.reasoning == "Contain rendering failures"

    def test_missing_priority_defaults_to_medium(self, session: MonitoringSession) -> None:
        reply = json.dumps({"summary": "s", "issues": [{"type": "performance", "title": "Slow API"}]})
        [issue] = parse_analysis_response(reply, session).issues
        assert issue.priority is Priority.MEDIUM
        assert issue.title == "Slow API"
        assert issue.description == ""

    def test_unknown_priority_defaults_to_medium(self, session: MonitoringSession) -> None:
        reply = json.dumps({"issues": [{"title": "x", "priority": "urgent"}]})
        [issue] = parse_analysis_response(reply, session).issues
        assert issue.priority is Priority.MEDIUM

    def test_empty_issue_gets_defaults(self, session: MonitoringSession) -> None:
        reply = json.dumps({"issues": [{}], "recommendations": [{}]})
        result = parse_analysis_response(reply, session)
        assert result.issues[0].category == "unknown"
        assert result.issues[0].title == "Unknown Issue"
        assert result.recommendations[0].category == "general"

    def test_non_object_entries_skipped(self, session: MonitoringSession) -> None:
        reply = json.dumps({"issues": ["oops", {"title": "real"}, 3], "recommendations": "none"})
        result = parse_analysis_response(reply, session)
        assert [i.title for i in result.issues] == ["real"]
        assert result.recommendations == ()

    def test_scalars_are_stringified(self, session: MonitoringSession) -> None:
        reply = json.dumps({"summary": 42, "issues": [{"title": 7, "impact": True}]})
        result = parse_analysis_response(reply, session)
        assert result.summary == "42"
        assert result.issues[0].title == "7"
        assert result.issues[0].impact == "True"

    def test_reported_severity_does_not_override_issues(self, session: MonitoringSession) -> None:
        reply = findings_reply(severity="LOW")
        result = parse_analysis_response(reply, session)
        assert result.reported_severity is Severity.LOW
        assert result.severity is Severity.HIGH

    def test_fenced_reply(self, session: MonitoringSession) -> None:
        reply = "```json\n" + findings_reply() + "\n```"
        assert parse_analysis_response(reply, session).has_issues

    @pytest.mark.parametrize("reply", ["not json at all", "[1, 2, 3]", "", '"just a string"'])
    def test_unparsable(self, session: MonitoringSession, reply: str) -> None:
        with pytest.raises(AnalysisError):
            parse_analysis_response(reply, session)
