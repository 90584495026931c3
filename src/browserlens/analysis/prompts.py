"""Prompt construction for event analysis."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

from browserlens.types.events import BrowserEvent

DEFAULT_DETAIL_LIMIT = 20

SYSTEM_PROMPT = """\
You are an expert browser test automation engineer and web application performance analyst.
Your role is to analyze browser events captured during test execution and provide actionable insights.

Focus on:
1. Performance optimization opportunities
2. Error resolution strategies
3. Test stability improvements
4. Security vulnerabilities
5. Best practices recommendations

Provide specific, actionable suggestions with clear reasoning.
Respond with a single JSON object with the following structure:
{
  "summary": "Brief overview of findings",
  "severity": "LOW|MEDIUM|HIGH|CRITICAL",
  "issues": [
    {
      "type": "performance|error|security|stability|best-practice",
      "title": "Issue title",
      "description": "Detailed description",
      "suggestion": "Specific recommendation",
      "priority": "LOW|MEDIUM|HIGH|CRITICAL",
      "impact": "Potential impact description"
    }
  ],
  "recommendations": [
    {
      "category": "performance-optimization|error-resolution|test-stability|security-improvements|best-practices",
      "recommendation": "Specific recommendation",
      "reasoning": "Why this recommendation is important"
    }
  ]
}
"""

ANALYSIS_PROMPT_TEMPLATE = """\
Analyze the following browser events from an automated test session:

Session: {session_name}
Time Range: {start} to {end}
Total Events: {total}

Events Summary:
{summary}

Event Details:
{details}

Please analyze these events and provide insights on:
1. Any errors or exceptions that occurred
2. Performance issues (slow requests, high resource usage)
3. Potential test stability problems
4. Security concerns
5. Opportunities for optimization

Consider the context of automated testing and provide suggestions that would help improve test reliability and performance.
"""


def format_timestamp(timestamp: float) -> str:
    """ISO-8601 UTC with millisecond precision, ``Z`` suffixed."""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def summarize_categories(events: Sequence[BrowserEvent]) -> str:
    counts = Counter(event.category for event in events)
    return "\n".join(f"- {category}: {count} events" for category, count in counts.items())


def format_event_details(events: Sequence[BrowserEvent], limit: int = DEFAULT_DETAIL_LIMIT) -> str:
    lines: list[str] = []
    for event in events[:limit]:
        lines.append(f"[{format_timestamp(event.timestamp)}] {event.category}: {event.message}")
        if event.details:
            lines.append(f"  Details: {event.details}")
        if event.level:
            lines.append(f"  Level: {event.level}")
        lines.append("")

    omitted = len(events) - limit
    if omitted > 0:
        lines.append(f"... and {omitted} more events")
    return "\n".join(lines)


def build_analysis_prompt(
    events: Sequence[BrowserEvent],
    session_name: str,
    *,
    detail_limit: int = DEFAULT_DETAIL_LIMIT,
) -> str:
    """Build the user prompt for *events*.

    Events are ordered by timestamp before the detail section is cut at
    *detail_limit*, so the earliest events are the ones described.
    """
    if not events:
        raise ValueError("Cannot build an analysis prompt without events")

    ordered = sorted(events, key=lambda e: e.timestamp)
    return ANALYSIS_PROMPT_TEMPLATE.format(
        session_name=session_name,
        start=format_timestamp(ordered[0].timestamp),
        end=format_timestamp(ordered[-1].timestamp),
        total=len(ordered),
        summary=summarize_categories(ordered),
        details=format_event_details(ordered, detail_limit),
    )
