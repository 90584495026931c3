"""Mock language-model provider for testing."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

DEFAULT_REPLY = json.dumps({
    "summary": "No notable issues detected",
    "severity": "LOW",
    "issues": [],
    "recommendations": [],
})


@dataclass
class MockProvider:
    """Scripted in-memory provider.

    Queued replies are returned in order; an entry that is an exception
    instance is raised instead. Once the queue is drained every call gets
    ``default_reply``.
    """

    replies: list[str | BaseException] = field(default_factory=list)
    reply_fn: Callable[[str, str | None], Awaitable[str]] | None = None
    default_reply: str = DEFAULT_REPLY
    available: bool = True
    call_history: list[tuple[str, str | None]] = field(default_factory=list)
    closed: bool = False
    _reply_index: int = field(default=0, init=False)

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_count(self) -> int:
        return len(self.call_history)

    async def analyze(self, prompt: str, system_prompt: str | None = None) -> str:
        self.call_history.append((prompt, system_prompt))
        if self.reply_fn is not None:
            return await self.reply_fn(prompt, system_prompt)
        if self._reply_index < len(self.replies):
            reply = self.replies[self._reply_index]
            self._reply_index += 1
            if isinstance(reply, BaseException):
                raise reply
            return reply
        return self.default_reply

    def add_reply(self, reply: str | dict[str, Any]) -> MockProvider:
        self.replies.append(reply if isinstance(reply, str) else json.dumps(reply))
        return self

    def add_error(self, error: BaseException) -> MockProvider:
        self.replies.append(error)
        return self

    def reset(self) -> None:
        self.call_history.clear()
        self._reply_index = 0

    async def is_available(self) -> bool:
        return self.available

    async def close(self) -> None:
        self.closed = True
