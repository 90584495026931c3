"""Tests for MockProvider."""

from __future__ import annotations

import json

import pytest

from browserlens.errors import ProviderError
from browserlens.providers.base import AnalysisProvider
from browserlens.providers.mock import DEFAULT_REPLY, MockProvider


class TestMockProvider:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(MockProvider(), AnalysisProvider)

    @pytest.mark.asyncio
    async def test_queued_replies_then_default(self) -> None:
        provider = MockProvider().add_reply("first").add_reply({"summary": "second"})
        assert await provider.analyze("a") == "first"
        assert json.loads(await provider.analyze("b")) == {"summary": "second"}
        assert await provider.analyze("c") == DEFAULT_REPLY
        assert provider.call_count == 3
        assert provider.call_history[0] == ("a", None)

    @pytest.mark.asyncio
    async def test_queued_error_is_raised(self) -> None:
        provider = MockProvider().add_error(ProviderError("boom"))
        with pytest.raises(ProviderError, match="boom"):
            await provider.analyze("a")

    @pytest.mark.asyncio
    async def test_reset(self) -> None:
        provider = MockProvider().add_reply("once")
        await provider.analyze("a")
        provider.reset()
        assert provider.call_count == 0
        assert await provider.analyze("a") == "once"

    @pytest.mark.asyncio
    async def test_close_and_availability(self) -> None:
        provider = MockProvider(available=False)
        assert not await provider.is_available()
        await provider.close()
        assert provider.closed
