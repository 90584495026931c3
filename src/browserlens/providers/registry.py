"""Provider construction from configuration."""

from __future__ import annotations

from browserlens.config import MonitorConfig, ProviderKind
from browserlens.providers.base import AnalysisProvider
from browserlens.providers.resilient_provider import ResilienceConfig, ResilientProvider


def create_base_provider(config: MonitorConfig) -> AnalysisProvider:
    """Create the bare backend selected by ``config.provider``.

    Raises:
        ConfigurationError: Unsupported provider name or missing credential.
    """
    kind = ProviderKind.parse(config.provider)

    if kind is ProviderKind.CLOUD:
        from browserlens.providers.openai import OpenAIProvider
        return OpenAIProvider(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
        )
    if kind is ProviderKind.LOCAL:
        from browserlens.providers.ollama import OllamaProvider
        return OllamaProvider(
            model=config.local_model,
            base_url=config.local_base_url,
            timeout=config.timeout,
        )

    raise AssertionError(f"Unhandled provider kind: {kind}")


def create_provider(config: MonitorConfig) -> ResilientProvider:
    """Create the configured backend wrapped with retry and timeout."""
    return ResilientProvider(
        create_base_provider(config),
        config=ResilienceConfig(
            max_attempts=config.max_retries,
            retry_base_delay=config.retry_base_delay,
            timeout_seconds=config.timeout,
        ),
    )
