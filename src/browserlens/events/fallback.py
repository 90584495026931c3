"""Synthetic events for sessions without live instrumentation.

When a handle cannot produce live events the session is seeded with a
small fixed sequence so analysis always has something to reason about,
and so report readers can spot degraded monitoring from the events alone.
"""

from __future__ import annotations

import logging
import time

from browserlens.events.buffer import EventBuffer
from browserlens.types.events import BrowserEvent

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "browserlens"
FALLBACK_WARNING = (
    "browserlens: using simulated events - live instrumentation is unavailable "
    "for this browser handle"
)


def synthetic_events(session_id: str) -> list[BrowserEvent]:
    """Build the fixed fallback sequence for *session_id*."""
    marker = {"synthetic": True}
    now_ms = int(time.time() * 1000)
    return [
        BrowserEvent.console_log(session_id, "INFO", "Page navigation started", "about:blank", metadata=marker),
        BrowserEvent.performance_metric(session_id, "navigation-start", now_ms, metadata=marker),
        BrowserEvent.console_log(session_id, "INFO", "DOM content loaded", "test-page", metadata=marker),
        BrowserEvent.performance_metric(session_id, "dom-content-loaded", now_ms, metadata=marker),
        BrowserEvent.console_log(session_id, "WARN", FALLBACK_WARNING, FALLBACK_SOURCE, metadata=marker),
    ]


def seed_fallback_events(buffer: EventBuffer, session_id: str) -> int:
    """Append the fallback sequence to *session_id*; returns events accepted."""
    logger.warning("Using simulated events for session %s (live instrumentation unavailable)", session_id)
    return sum(1 for event in synthetic_events(session_id) if buffer.append(session_id, event))


def is_synthetic(event: BrowserEvent) -> bool:
    return bool(event.metadata.get("synthetic"))
