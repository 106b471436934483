"""Anthropic client factory for per-request credentials."""
from __future__ import annotations

from typing import Any

import anthropic

from app.config import settings
from app.models.pipeline import Deadline


def get_client(api_key: str) -> anthropic.AsyncAnthropic:
    """Build an AsyncAnthropic client for the caller's key.

    Keys arrive with each request, so clients are never cached or shared.
    """
    return anthropic.AsyncAnthropic(api_key=api_key)


def get_model() -> str:
    """Get the configured model id."""
    return settings.llm_model


def response_text(response: Any) -> str:
    """Concatenate the text blocks of a Messages response; other blocks are ignored."""
    parts: list[str] = []
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) != "text":
            continue
        text = getattr(block, "text", None)
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def response_usage(response: Any) -> tuple[int, int]:
    usage = getattr(response, "usage", None)
    input_tokens = getattr(usage, "input_tokens", 0) if usage else 0
    output_tokens = getattr(usage, "output_tokens", 0) if usage else 0
    return int(input_tokens or 0), int(output_tokens or 0)


def call_timeout(deadline: Deadline) -> float:
    """Request timeout for one LLM call: what is left of the deadline, floored."""
    return max(deadline.remaining(), float(settings.llm_min_timeout_seconds))
