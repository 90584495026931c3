"""Resilient provider wrapper.

Wraps any AnalysisProvider with a per-call timeout and a bounded,
linearly backed-off retry loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from tenacity import RetryCallState, RetryError

from browserlens.errors import ProviderError
from browserlens.providers.base import AnalysisProvider
from browserlens.utilities.retry import linear_retrying

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResilienceConfig:
    """Configuration for resilient provider wrapper."""

    max_attempts: int = 3
    retry_base_delay: float = 1.0
    timeout_seconds: float = 60.0


@dataclass(slots=True)
class ResilienceStats:
    """Stats for the resilient provider."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_attempts: int = 0
    retried_attempts: int = 0
    timed_out_attempts: int = 0


class ResilientProvider:
    """Wraps any AnalysisProvider with retry and timeout.

    Usage:
        provider = ResilientProvider(
            OllamaProvider(model="mistral:latest"),
            config=ResilienceConfig(max_attempts=3, timeout_seconds=60),
        )
        text = await provider.analyze(prompt, system_prompt)

    The wrapped instance is shared by all concurrent analyses; only the
    counters in :attr:`stats` change after construction.
    """

    def __init__(
        self,
        inner: AnalysisProvider,
        *,
        config: ResilienceConfig | None = None,
    ) -> None:
        self._inner = inner
        self._config = config or ResilienceConfig()
        self._stats = ResilienceStats()

    @property
    def name(self) -> str:
        return getattr(self._inner, "name", "unknown")

    @property
    def inner(self) -> AnalysisProvider:
        return self._inner

    @property
    def config(self) -> ResilienceConfig:
        return self._config

    @property
    def stats(self) -> ResilienceStats:
        return self._stats

    async def analyze(self, prompt: str, system_prompt: str | None = None) -> str:
        """Call the inner provider with timeout and retry.

        Raises:
            ProviderError: The first non-retryable error, or a wrapper
                carrying the attempt count once every attempt has failed.
        """
        self._stats.total_calls += 1
        max_attempts = max(1, self._config.max_attempts)
        retrying = linear_retrying(
            max_attempts=max_attempts,
            base_delay=self._config.retry_base_delay,
            on_retry=self._log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    self._stats.total_attempts += 1
                    text = await self._attempt(prompt, system_prompt)
        except RetryError as e:
            self._stats.failed_calls += 1
            last = e.last_attempt.exception()
            raise ProviderError(
                f"All {max_attempts} attempts failed: {last}",
                provider=self.name,
                status_code=getattr(last, "status_code", None),
                retryable=False,
                details={"attempts": max_attempts},
            ) from last
        except Exception:
            self._stats.failed_calls += 1
            raise

        self._stats.successful_calls += 1
        return text

    async def _attempt(self, prompt: str, system_prompt: str | None) -> str:
        try:
            return await asyncio.wait_for(
                self._inner.analyze(prompt, system_prompt),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self._stats.timed_out_attempts += 1
            raise ProviderError(
                f"Timeout after {self._config.timeout_seconds}s",
                provider=self.name,
                retryable=True,
            ) from e

    def _log_retry(self, state: RetryCallState) -> None:
        self._stats.retried_attempts += 1
        exc: Any = state.outcome.exception() if state.outcome else None
        logger.warning(
            "%s request attempt %d/%d failed: %s",
            self.name, state.attempt_number, self._config.max_attempts, exc,
        )

    async def is_available(self) -> bool:
        try:
            return await asyncio.wait_for(
                self._inner.is_available(), timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return False

    async def close(self) -> None:
        """Close the inner provider."""
        await self._inner.close()
