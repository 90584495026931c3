"""browserlens: AI-assisted runtime monitoring for browser automation tests.

Captures console, network and script-exception events from a page under
test, analyses them with a language model and writes per-session reports.
"""

from browserlens.config import MonitorConfig, ProviderKind, load_config
from browserlens.core.orchestrator import MonitoringOrchestrator
from browserlens.errors import (
    AnalysisError,
    ConfigurationError,
    InstrumentationUnavailableError,
    MonitorError,
    ProviderError,
    SessionNotFoundError,
)
from browserlens.types import (
    AnalysisResult,
    BrowserEvent,
    EventCategory,
    Issue,
    MonitoringSession,
    Priority,
    Recommendation,
    SessionStatus,
    Severity,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "BrowserEvent",
    "ConfigurationError",
    "EventCategory",
    "InstrumentationUnavailableError",
    "Issue",
    "MonitorConfig",
    "MonitorError",
    "MonitoringOrchestrator",
    "MonitoringSession",
    "Priority",
    "ProviderError",
    "ProviderKind",
    "Recommendation",
    "SessionNotFoundError",
    "SessionStatus",
    "Severity",
    "__version__",
    "load_config",
]
