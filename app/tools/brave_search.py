from __future__ import annotations

from typing import Any

import httpx

from app.config import settings
from app.models.pipeline import SearchResult
from app.tools import web_utils


async def search(
    query: str,
    *,
    api_key: str,
    max_results: int | None = None,
    timeout: float | None = None,
) -> list[SearchResult]:
    """Execute a Brave web search and normalize results.

    Raises `httpx.HTTPError` on transport failures and error statuses, and
    `ValueError` when the payload is not JSON or not shaped like a Brave
    web search response.
    """
    if not api_key:
        raise ValueError("Brave API key is required")

    params: dict[str, Any] = {
        "q": query,
        "count": max_results or settings.search_result_count,
    }

    async with httpx.AsyncClient(timeout=timeout or settings.search_timeout_seconds) as client:
        response = await client.get(
            settings.brave_search_url,
            params=params,
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": api_key,
            },
        )
        response.raise_for_status()
        payload = response.json()

    if not isinstance(payload, dict):
        raise ValueError("malformed Brave payload")
    web = payload.get("web") or {}
    if not isinstance(web, dict):
        raise ValueError("malformed Brave payload")
    raw_results = web.get("results") or []
    if not isinstance(raw_results, list):
        raise ValueError("malformed Brave payload")

    mapped: list[SearchResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            raise ValueError("malformed Brave payload")
        url = item.get("url", "") or ""
        if not web_utils.is_valid_url(url):
            continue
        mapped.append(
            SearchResult(
                title=(item.get("title", "") or "").strip(),
                url=url,
                description=(item.get("description", "") or "").strip(),
            )
        )
    return mapped
