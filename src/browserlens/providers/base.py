"""Language-model provider protocol and shared helpers.

Every backend exposes the same small capability: turn a prompt plus a
system prompt into reply text, report whether it is reachable, and
release its connections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class AnalysisProvider(Protocol):
    """Protocol for language-model backends."""

    @property
    def name(self) -> str: ...

    async def analyze(self, prompt: str, system_prompt: str | None = None) -> str:
        """Return the model's trimmed reply text.

        Raises:
            ProviderError: On transport, HTTP, or reply-shape failures.
        """
        ...

    async def is_available(self) -> bool: ...

    async def close(self) -> None:
        """Release resources (e.g. HTTP client connections)."""
        ...


@dataclass(slots=True)
class GenerationOptions:
    """Sampling options sent with every analysis request."""

    max_tokens: int = 2000
    temperature: float = 0.3
    top_p: float = 0.9


def describe_request_error(e: httpx.RequestError) -> str:
    """Build a descriptive error message for httpx request errors.

    httpx.ReadTimeout and similar errors often have empty str(e),
    so we fall back to the exception type name and include the
    chained cause when available.
    """
    msg = str(e)
    if not msg:
        msg = type(e).__name__
    if e.__cause__ and str(e.__cause__):
        msg = f"{msg} (caused by {type(e.__cause__).__name__}: {e.__cause__})"
    return msg


def is_client_error(status: int) -> bool:
    return 400 <= status < 500
