from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMessages:
    """Stands in for `AsyncAnthropic().messages`.

    Each reply is a string (returned as one text block), an exception (raised),
    or a callable taking the create() kwargs and returning either.
    The last reply repeats once the list is exhausted.
    """

    def __init__(self, replies: list[Any]):
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if callable(reply) and not isinstance(reply, Exception):
            reply = reply(kwargs)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text=reply)],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_llm():
    def _make(*replies: Any) -> SimpleNamespace:
        return SimpleNamespace(messages=FakeMessages(list(replies)))

    return _make
