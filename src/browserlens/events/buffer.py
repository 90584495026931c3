"""Per-session event buffer.

Thread-safe append-only logs, one per monitoring session. Instrumentation
callbacks may fire on arbitrary threads, so every structural change and
every per-session append is serialised by a lock; reads return immutable
snapshots and never block on I/O.

Usage::

    buffer = EventBuffer()
    buffer.start_session("abc")
    buffer.append("abc", BrowserEvent.console_log("abc", "INFO", "loaded"))
    recent = buffer.recent("abc", 10)
    buffer.stop_session("abc")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from browserlens.types.events import BrowserEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _SessionLog:
    events: list[BrowserEvent] = field(default_factory=list)
    open: bool = True
    lock: threading.Lock = field(default_factory=threading.Lock)


class EventBuffer:
    """Per-session append logs with bounded recent-window queries."""

    def __init__(self) -> None:
        self._logs: dict[str, _SessionLog] = {}
        self._registry_lock = threading.Lock()
        self._total_lock = threading.Lock()
        self._total_count = 0

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self, session_id: str) -> None:
        """Allocate an empty log for *session_id*.

        Calling this twice for the same id resets the log.
        """
        with self._registry_lock:
            if session_id in self._logs:
                logger.warning("Event log for session %s reset by a second start", session_id)
            self._logs[session_id] = _SessionLog()
        logger.debug("Started event buffering for session %s", session_id)

    def stop_session(self, session_id: str) -> int:
        """Close buffering for *session_id*; later appends are ignored.

        Returns the number of events buffered at the moment of closing.
        """
        log = self._get(session_id)
        if log is None:
            return 0
        with log.lock:
            log.open = False
            count = len(log.events)
        logger.info("Stopped event buffering for session %s (collected %d events)", session_id, count)
        return count

    def discard(self, session_id: str) -> None:
        """Drop the log for *session_id* entirely."""
        with self._registry_lock:
            self._logs.pop(session_id, None)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def append(self, session_id: str, event: BrowserEvent) -> bool:
        """Append *event* to the session log.

        Returns ``False`` (and drops the event) when the session is
        unknown, already stopped, or the event belongs to another session.
        """
        if event.session_id != session_id:
            logger.debug(
                "Rejected event %s: belongs to session %s, not %s",
                event.id, event.session_id, session_id,
            )
            return False

        log = self._get(session_id)
        if log is None:
            logger.debug("Dropped event %s for unknown session %s", event.id, session_id)
            return False

        with log.lock:
            if not log.open:
                logger.debug("Dropped event %s for stopped session %s", event.id, session_id)
                return False
            log.events.append(event)

        with self._total_lock:
            self._total_count += 1
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def recent(self, session_id: str, limit: int) -> tuple[BrowserEvent, ...]:
        """Return the last *limit* events in arrival order."""
        if limit <= 0:
            return ()
        log = self._get(session_id)
        if log is None:
            return ()
        with log.lock:
            return tuple(log.events[-limit:])

    def all(self, session_id: str) -> tuple[BrowserEvent, ...]:
        """Return the full log for *session_id* as an immutable snapshot."""
        log = self._get(session_id)
        if log is None:
            return ()
        with log.lock:
            return tuple(log.events)

    def count(self, session_id: str) -> int:
        log = self._get(session_id)
        if log is None:
            return 0
        with log.lock:
            return len(log.events)

    def is_open(self, session_id: str) -> bool:
        log = self._get(session_id)
        return log is not None and log.open

    def total_count(self) -> int:
        """Events ever accepted across all sessions (monotonic)."""
        with self._total_lock:
            return self._total_count

    def session_ids(self) -> list[str]:
        with self._registry_lock:
            return list(self._logs)

    def _get(self, session_id: str) -> _SessionLog | None:
        with self._registry_lock:
            return self._logs.get(session_id)
