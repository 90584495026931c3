"""Global test fixtures for browserlens."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from browserlens.config import MonitorConfig
from browserlens.events.buffer import EventBuffer
from browserlens.providers.mock import MockProvider
from browserlens.types.session import MonitoringSession


@pytest.fixture
def tmp_workdir(tmp_path: Path) -> Path:
    """Provide a temporary working directory for file operation tests."""
    return tmp_path


@pytest.fixture
def event_loop_policy():
    """Use default asyncio event loop policy."""
    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def config(tmp_path: Path) -> MonitorConfig:
    """Config that never touches the network and writes reports to tmp."""
    return MonitorConfig(
        provider="local",
        max_retries=2,
        retry_base_delay=0.0,
        timeout=5.0,
        analysis_interval=0.05,
        shutdown_timeout=1.0,
        report_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def buffer() -> EventBuffer:
    return EventBuffer()


@pytest.fixture
def session() -> MonitoringSession:
    return MonitoringSession(id="0123456789abcdef", name="checkout flow")

