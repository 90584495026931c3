"""Language-model provider adapters."""

from browserlens.providers.base import (
    AnalysisProvider,
    GenerationOptions,
)
from browserlens.providers.mock import MockProvider
from browserlens.providers.ollama import OllamaProvider
from browserlens.providers.openai import OpenAIProvider
from browserlens.providers.registry import create_base_provider, create_provider
from browserlens.providers.resilient_provider import (
    ResilienceConfig,
    ResilienceStats,
    ResilientProvider,
)

__all__ = [
    "AnalysisProvider",
    "GenerationOptions",
    "MockProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "ResilienceConfig",
    "ResilienceStats",
    "ResilientProvider",
    "create_base_provider",
    "create_provider",
]
