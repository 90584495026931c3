"""Browser runtime event types.

A :class:`BrowserEvent` is one observed occurrence on the page under test:
a console line, a network response, a script exception, a performance
metric, or a failed request. Events are immutable once created.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class EventCategory(StrEnum):
    """Well-known event categories.

    ``BrowserEvent.category`` is a plain string, so adapters may emit
    categories outside this set.
    """

    CONSOLE = "console"
    NETWORK = "network"
    SCRIPT_EXCEPTION = "javascript-exception"
    PERFORMANCE = "performance"
    NETWORK_FAILURE = "network-failure"


@dataclass(frozen=True, slots=True)
class BrowserEvent:
    """A single runtime event tied to a monitoring session."""

    session_id: str
    category: str
    level: str
    message: str
    details: str | None = None
    timestamp: float = field(default_factory=time.time)
    source: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    # ------------------------------------------------------------------
    # Factories for common event shapes
    # ------------------------------------------------------------------

    @classmethod
    def console_log(
        cls,
        session_id: str,
        level: str,
        message: str,
        source: str | None = None,
        **kwargs: Any,
    ) -> BrowserEvent:
        return cls(
            session_id=session_id,
            category=EventCategory.CONSOLE,
            level=level,
            message=message,
            source=source,
            **kwargs,
        )

    @classmethod
    def network_request(
        cls,
        session_id: str,
        url: str,
        status: int,
        duration_ms: float,
        **kwargs: Any,
    ) -> BrowserEvent:
        duration = int(duration_ms)
        return cls(
            session_id=session_id,
            category=EventCategory.NETWORK,
            level="ERROR" if status >= 400 else "INFO",
            message=f"Request to {url} returned {status} in {duration}ms",
            details=f"URL: {url}, Status: {status}, Duration: {duration}ms",
            source=url,
            **kwargs,
        )

    @classmethod
    def script_exception(
        cls,
        session_id: str,
        error: str,
        stack_trace: str | None = None,
        **kwargs: Any,
    ) -> BrowserEvent:
        return cls(
            session_id=session_id,
            category=EventCategory.SCRIPT_EXCEPTION,
            level="ERROR",
            message=error,
            details=stack_trace,
            **kwargs,
        )

    @classmethod
    def performance_metric(
        cls,
        session_id: str,
        metric: str,
        value: Any,
        **kwargs: Any,
    ) -> BrowserEvent:
        return cls(
            session_id=session_id,
            category=EventCategory.PERFORMANCE,
            level="INFO",
            message=f"Performance metric: {metric} = {value}",
            details=f"Metric: {metric}, Value: {value}",
            **kwargs,
        )

    @classmethod
    def network_failure(
        cls,
        session_id: str,
        url: str,
        error_text: str,
        **kwargs: Any,
    ) -> BrowserEvent:
        return cls(
            session_id=session_id,
            category=EventCategory.NETWORK_FAILURE,
            level="ERROR",
            message=f"Network request failed: {error_text}",
            details=f"Error: {error_text}",
            source=url,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "category": str(self.category),
            "level": self.level,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp,
            "source": self.source,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BrowserEvent:
        """Rebuild an event from :meth:`to_dict` output.

        Missing optional keys fall back to the dataclass defaults.
        """
        kwargs: dict[str, Any] = {
            "session_id": str(data.get("session_id", "")),
            "category": str(data.get("category", EventCategory.CONSOLE)),
            "level": str(data.get("level", "INFO")),
            "message": str(data.get("message", "")),
            "details": data.get("details"),
            "source": data.get("source"),
            "metadata": data.get("metadata") or {},
        }
        if data.get("timestamp") is not None:
            kwargs["timestamp"] = float(data["timestamp"])
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)
