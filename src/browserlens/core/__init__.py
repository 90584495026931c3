"""Session orchestration."""

from browserlens.core.orchestrator import REALTIME_WINDOW, MonitoringOrchestrator

__all__ = ["MonitoringOrchestrator", "REALTIME_WINDOW"]
