"""Browserlens error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCategory(StrEnum):
    """Category of error for classification and handling."""

    PROVIDER = "provider"
    ANALYSIS = "analysis"
    CONFIGURATION = "configuration"
    INSTRUMENTATION = "instrumentation"
    SESSION = "session"
    INTERNAL = "internal"


class MonitorError(Exception):
    """Base error for all browserlens exceptions."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.retryable = retryable
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, category={self.category!r})"


class ProviderError(MonitorError):
    """Error from a language-model provider (HTTP status, network, bad reply)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
        retryable: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, category=ErrorCategory.PROVIDER, retryable=retryable, **kwargs)
        self.provider = provider
        self.status_code = status_code


class AnalysisError(MonitorError):
    """Model output could not be turned into findings."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, category=ErrorCategory.ANALYSIS, retryable=False, **kwargs)


class ConfigurationError(MonitorError):
    """Invalid or missing configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.CONFIGURATION, retryable=False)


class InstrumentationUnavailableError(MonitorError):
    """Live browser events cannot be captured for a handle."""

    def __init__(self, message: str, *, handle_type: str | None = None) -> None:
        super().__init__(message, category=ErrorCategory.INSTRUMENTATION, retryable=False)
        self.handle_type = handle_type


class SessionNotFoundError(MonitorError):
    """Requested monitoring session does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}", category=ErrorCategory.SESSION)
        self.session_id = session_id
