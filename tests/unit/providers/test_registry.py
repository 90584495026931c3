"""Tests for provider construction."""

from __future__ import annotations

import pytest

from browserlens.config import MonitorConfig
from browserlens.errors import ConfigurationError
from browserlens.providers.ollama import OllamaProvider
from browserlens.providers.openai import OpenAIProvider
from browserlens.providers.registry import create_base_provider, create_provider
from browserlens.providers.resilient_provider import ResilientProvider


class TestCreateProvider:
    def test_local(self) -> None:
        provider = create_base_provider(MonitorConfig(provider="local", local_model="llama3:8b"))
        assert isinstance(provider, OllamaProvider)
        assert provider.model == "llama3:8b"

    def test_cloud_alias(self) -> None:
        provider = create_base_provider(MonitorConfig(provider="openai", api_key="sk-test"))
        assert isinstance(provider, OpenAIProvider)

    def test_cloud_requires_key(self) -> None:
        with pytest.raises(ConfigurationError, match="API key"):
            create_base_provider(MonitorConfig(provider="cloud", api_key=None))

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            create_provider(MonitorConfig(provider="watson"))

    def test_wrapped_with_resilience(self) -> None:
        config = MonitorConfig(provider="local", max_retries=5, timeout=12.0, retry_base_delay=0.25)
        provider = create_provider(config)
        assert isinstance(provider, ResilientProvider)
        assert isinstance(provider.inner, OllamaProvider)
        assert provider.config.max_attempts == 5
        assert provider.config.timeout_seconds == 12.0
        assert provider.config.retry_base_delay == 0.25
        assert provider.name == "ollama"
