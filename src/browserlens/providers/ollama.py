"""Local inference provider for an Ollama server using httpx."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from browserlens.errors import ProviderError
from browserlens.providers.base import (
    GenerationOptions,
    describe_request_error,
    is_client_error,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "mistral:latest"


class OllamaProvider:
    """Provider backed by a local Ollama server.

    Before each analysis the provider checks that the configured model is
    present in the server's registry and asks the server to pull it when it
    is not. A failed pull is only logged: the generate call still runs and
    reports its own error.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        options: GenerationOptions | None = None,
    ) -> None:
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._options = options or GenerationOptions()
        self._model_ready = False
        self._client = self._create_client()
        logger.info("Ollama provider initialized with model %s at %s", model, self._base_url)

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={"Content-Type": "application/json"},
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client.is_closed:
            self._client = self._create_client()
        return self._client

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    async def analyze(self, prompt: str, system_prompt: str | None = None) -> str:
        await self.ensure_model()
        client = self._ensure_client()

        try:
            response = await client.post("/api/generate", json=self._build_body(prompt, system_prompt))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(
                f"Ollama API error {status}: {e.response.text[:500]}",
                provider=self.name, status_code=status, retryable=not is_client_error(status),
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(
                f"Ollama request error: {describe_request_error(e)}",
                provider=self.name, retryable=True,
            ) from e

        return self._extract_content(response.text)

    async def is_available(self) -> bool:
        client = self._ensure_client()
        try:
            response = await client.get("/api/tags")
        except httpx.HTTPError as e:
            logger.debug("Ollama availability check failed: %s", e)
            return False
        return response.is_success

    # ------------------------------------------------------------------
    # Model registry
    # ------------------------------------------------------------------

    async def ensure_model(self) -> bool:
        """Make sure the configured model is present, pulling it if needed.

        Returns ``True`` once the model is known to be available. The
        positive result is cached for the life of the provider.
        """
        if self._model_ready:
            return True
        if await self.has_model():
            self._model_ready = True
            return True
        return await self.pull_model()

    async def has_model(self) -> bool:
        client = self._ensure_client()
        try:
            response = await client.get("/api/tags")
            if not response.is_success:
                return False
            data = response.json()
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.debug("Failed to check model availability: %s", e)
            return False

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            return False
        return any(isinstance(m, dict) and m.get("name") == self._model for m in models)

    async def pull_model(self) -> bool:
        logger.info("Model %s not found locally, attempting to pull", self._model)
        client = self._ensure_client()
        try:
            response = await client.post("/api/pull", json={"name": self._model, "stream": False})
        except httpx.HTTPError as e:
            logger.error("Error pulling model %s: %s", self._model, e)
            return False

        if not response.is_success:
            logger.warning(
                "Failed to pull model %s: HTTP %d - %s",
                self._model, response.status_code, response.text[:500],
            )
            return False

        logger.info("Successfully pulled model %s", self._model)
        self._model_ready = True
        return True

    # ------------------------------------------------------------------
    # Request / response shapes
    # ------------------------------------------------------------------

    def _build_body(self, prompt: str, system_prompt: str | None) -> dict[str, Any]:
        full_prompt = ""
        if system_prompt and system_prompt.strip():
            full_prompt = f"SYSTEM: {system_prompt}\n\n"
        full_prompt += f"USER: {prompt}"
        return {
            "model": self._model,
            "stream": False,
            "format": "json",
            "prompt": full_prompt,
            "options": {
                "temperature": self._options.temperature,
                "top_p": self._options.top_p,
                "num_predict": self._options.max_tokens,
            },
        }

    def _extract_content(self, body: str) -> str:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ProviderError(f"Failed to parse Ollama response: {e}", provider=self.name) from e
        if not isinstance(data, dict):
            raise ProviderError("Ollama response is not a JSON object", provider=self.name)

        if error := data.get("error"):
            raise ProviderError(f"Ollama API error: {error}", provider=self.name)

        content = data.get("response")
        if not isinstance(content, str) or not content.strip():
            raise ProviderError("Empty content in Ollama response", provider=self.name)
        return content.strip()

    async def close(self) -> None:
        await self._client.aclose()
