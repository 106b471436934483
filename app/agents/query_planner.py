from __future__ import annotations

import json
import time
from datetime import date
from typing import Any

from app.config import settings
from app.llm_client import call_timeout, get_model, response_text, response_usage
from app.models.errors import PlannerOutputError
from app.models.pipeline import Deadline, QueryPlan
from app.services import logger as log_service
from app.services.fallback import with_fallback
from app.services.prompt_store import render_prompt
from app.tools import web_utils

MIN_QUERIES = 5


def normalize_queries(raw: Any, *, max_queries: int) -> list[str]:
    """Keep non-empty strings, collapse whitespace, drop case-insensitive duplicates."""
    if not isinstance(raw, list):
        return []
    cleaned: list[str] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, str):
            continue
        query = " ".join(item.split()).strip()
        if not query:
            continue
        key = query.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(query)
    return cleaned[: max(max_queries, 1)]


def parse_queries(text: str, *, max_queries: int) -> list[str]:
    """Parse the planner's JSON array; raise PlannerOutputError when unusable."""
    try:
        raw = json.loads(web_utils.extract_json_array(text))
    except json.JSONDecodeError as e:
        raise PlannerOutputError(f"planner output is not JSON: {e}") from e
    queries = normalize_queries(raw, max_queries=max_queries)
    if not queries:
        raise PlannerOutputError("planner output contains no queries")
    return queries


def fallback_queries(content: str, title: str, *, year: int | None = None) -> list[str]:
    """Fixed query set templated from the title. Never empty, never raises."""
    year = year or date.today().year
    subject = " ".join((title or "").split())
    if not subject:
        words = web_utils.strip_tags(content or "").split()
        subject = " ".join(words[:6])
    if not subject:
        subject = "blog post"
    return [
        f"{subject} pricing {year}",
        f"{subject} features comparison",
        f"{subject} latest updates {year}",
        f"{subject} vs competitors",
        f"LinkedIn connection request limits {year}",
    ]


class QueryPlanner:
    """Derives a bounded list of search queries from post content."""

    name = "planner"

    def __init__(self, client: Any, *, model: str | None = None):
        self.client = client
        self.model = model or get_model()
        self.max_queries = max(int(settings.max_search_queries), 1)
        self.sample_chars = max(int(settings.planner_sample_chars), 500)

    async def _ask_llm(
        self,
        content: str,
        title: str,
        research_instructions: str | None,
        deadline: Deadline,
    ) -> list[str]:
        today = date.today()
        t0 = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=settings.planner_max_tokens,
                timeout=call_timeout(deadline),
                system=render_prompt(
                    "planner.system",
                    today_iso=today.isoformat(),
                    current_year=today.year,
                    min_queries=min(MIN_QUERIES, self.max_queries),
                    max_queries=self.max_queries,
                ),
                messages=[
                    {
                        "role": "user",
                        "content": render_prompt(
                            "planner.user",
                            title=title or "(untitled)",
                            research_instructions=research_instructions or "(none)",
                            content_sample=content[: self.sample_chars],
                        ),
                    }
                ],
            )
        except Exception as e:
            log_service.log_llm_call(
                model=self.model,
                caller=self.name,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise

        input_tokens, output_tokens = response_usage(response)
        log_service.log_llm_call(
            model=self.model,
            caller=self.name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return parse_queries(response_text(response), max_queries=self.max_queries)

    async def generate_queries(
        self,
        content: str,
        title: str,
        research_instructions: str | None = None,
        deadline: Deadline | None = None,
    ) -> QueryPlan:
        deadline = deadline or Deadline.start(settings.pipeline_budget_seconds)
        queries, used_fallback = await with_fallback(
            lambda: self._ask_llm(content, title, research_instructions, deadline),
            lambda: fallback_queries(content, title)[: self.max_queries],
            caller=self.name,
        )
        return QueryPlan(
            queries=queries,
            llm_calls=0 if used_fallback else 1,
            used_fallback=used_fallback,
        )
