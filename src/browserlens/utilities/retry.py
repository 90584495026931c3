"""Retry utilities using tenacity."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from browserlens.errors import ProviderError


def is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable."""
    if isinstance(exc, ProviderError):
        return exc.retryable
    # Network errors and timeouts are retryable
    if isinstance(exc, (ConnectionError, TimeoutError, asyncio.TimeoutError, httpx.TransportError)):
        return True
    return False


def linear_retrying(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    on_retry: Callable[[RetryCallState], None] | None = None,
) -> AsyncRetrying:
    """Build an async retry controller with linear backoff.

    Attempt ``n`` that fails with a retryable error waits ``n * base_delay``
    before the next attempt. Non-retryable errors propagate immediately.
    When attempts run out a :class:`tenacity.RetryError` is raised, wrapping
    the last attempt.

    Args:
        max_attempts: Total number of attempts, including the first.
        base_delay: Delay unit in seconds.
        on_retry: Optional callback invoked before each backoff sleep.
    """
    kwargs: dict[str, Any] = {
        "stop": stop_after_attempt(max(1, max_attempts)),
        "wait": wait_incrementing(start=base_delay, increment=base_delay),
        "retry": retry_if_exception(is_retryable),
        "reraise": False,
    }
    if on_retry:
        kwargs["before_sleep"] = on_retry
    return AsyncRetrying(**kwargs)
