"""Cloud chat-completion provider (OpenAI-compatible) using httpx."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from browserlens.errors import ConfigurationError, ProviderError
from browserlens.providers.base import (
    GenerationOptions,
    describe_request_error,
    is_client_error,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4"


class OpenAIProvider:
    """Chat-completion provider authenticated with a bearer key.

    One HTTP request per :meth:`analyze` call; retries are layered on top
    by :class:`~browserlens.providers.resilient_provider.ResilientProvider`.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        options: GenerationOptions | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "OpenAI API key is required. Set OPENAI_API_KEY or api_key in the config."
            )
        self._api_key = api_key.strip()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._options = options or GenerationOptions()
        self._client = self._create_client()
        logger.info("OpenAI provider initialized with model %s at %s", model, self._base_url)

    def _create_client(self) -> httpx.AsyncClient:
        """Create a fresh httpx client."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            headers={"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"},
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the client, recreating it if closed."""
        if self._client.is_closed:
            self._client = self._create_client()
        return self._client

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    @property
    def completions_url(self) -> str:
        return f"{self._base_url}/chat/completions"

    async def analyze(self, prompt: str, system_prompt: str | None = None) -> str:
        client = self._ensure_client()
        body = self._build_body(prompt, system_prompt)

        try:
            response = await client.post(self.completions_url, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(
                f"OpenAI API error {status}: {e.response.text[:500]}",
                provider=self.name, status_code=status, retryable=not is_client_error(status),
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"OpenAI request error: {describe_request_error(e)}",
                provider=self.name, retryable=True,
            ) from e

        return self._extract_content(response.text)

    async def is_available(self) -> bool:
        client = self._ensure_client()
        body = {
            "model": self._model,
            "max_tokens": 1,
            "messages": [{"role": "user", "content": "test"}],
        }
        try:
            response = await client.post(self.completions_url, json=body)
        except httpx.HTTPError as e:
            logger.debug("OpenAI availability check failed: %s", e)
            return False
        return response.is_success

    def _build_body(self, prompt: str, system_prompt: str | None) -> dict[str, Any]:
        messages: list[dict[str, str]] = []
        if system_prompt and system_prompt.strip():
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self._model,
            "max_tokens": self._options.max_tokens,
            "temperature": self._options.temperature,
            "top_p": self._options.top_p,
            "messages": messages,
        }

    def _extract_content(self, body: str) -> str:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ProviderError(
                f"Failed to parse OpenAI response: {e}", provider=self.name,
            ) from e
        if not isinstance(data, dict):
            raise ProviderError("OpenAI response is not a JSON object", provider=self.name)

        if error := data.get("error"):
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise ProviderError(f"OpenAI API error: {message}", provider=self.name)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ProviderError("No choices in OpenAI response", provider=self.name)
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise ProviderError("No message in OpenAI choice", provider=self.name)

        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise ProviderError("Empty content in OpenAI response", provider=self.name)
        return content.strip()

    async def close(self) -> None:
        await self._client.aclose()
