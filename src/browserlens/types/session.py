"""Monitoring session state."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SessionStatus(StrEnum):
    ACTIVE = "ACTIVE"
    STOPPED = "STOPPED"


def default_session_name(session_id: str) -> str:
    return f"Session-{session_id[:8]}"


@dataclass(slots=True, eq=False)
class MonitoringSession:
    """One monitored unit of browser-driven test execution.

    ``handle`` is the automation object (a page, driver, ...) that live
    instrumentation attaches to. It is never serialised.
    """

    id: str
    name: str
    handle: Any = None
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    status: SessionStatus = SessionStatus.ACTIVE
    degraded: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def duration_seconds(self) -> float | None:
        if self.end_time is None:
            return None
        return round(self.end_time - self.start_time, 3)

    def stop(self) -> bool:
        """Transition ``ACTIVE -> STOPPED``.

        Returns ``True`` only for the call that performed the transition.
        """
        with self._lock:
            if self.status == SessionStatus.STOPPED:
                return False
            self.status = SessionStatus.STOPPED
            self.end_time = time.time()
            return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": str(self.status),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "degraded": self.degraded,
        }

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MonitoringSession):
            return NotImplemented
        return self.id == other.id
