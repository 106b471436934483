from __future__ import annotations

import asyncio
import time

import httpx

from app.config import settings
from app.models.pipeline import Deadline, ResearchOutcome, SearchFinding
from app.services import logger as log_service
from app.services.logger import logger
from app.tools import brave_search

DIGEST_HEADER = "# SEARCH FINDINGS\n\n"


def render_digest(findings: list[SearchFinding]) -> str:
    return DIGEST_HEADER + "\n".join(finding.render() for finding in findings)


class Researcher:
    """Runs search queries one at a time and folds results into a digest.

    Searches are sequential with a fixed pause between them to stay under the
    provider's rate limit. A failed query is logged and skipped; the caller
    decides what zero successes means.
    """

    def __init__(
        self,
        *,
        delay_seconds: float | None = None,
        timeout_seconds: float | None = None,
        result_count: int | None = None,
        top_results: int | None = None,
    ):
        self.delay_seconds = settings.search_delay_seconds if delay_seconds is None else delay_seconds
        self.timeout_seconds = timeout_seconds or settings.search_timeout_seconds
        self.result_count = max(int(result_count or settings.search_result_count), 1)
        self.top_results = max(int(top_results or settings.search_top_results), 1)

    async def research(self, queries: list[str], search_key: str, deadline: Deadline) -> ResearchOutcome:
        findings: list[SearchFinding] = []
        searches_used = 0
        searches_attempted = 0
        truncated = False

        for index, query in enumerate(queries):
            if index > 0 and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)
            if deadline.expired():
                truncated = True
                logger.warning(
                    f"Research deadline reached after {searches_attempted}/{len(queries)} queries; "
                    "continuing with partial findings"
                )
                break

            searches_attempted += 1
            t0 = time.monotonic()
            try:
                results = await brave_search.search(
                    query,
                    api_key=search_key,
                    max_results=self.result_count,
                    timeout=self.timeout_seconds,
                )
            except (httpx.HTTPError, ValueError) as e:
                log_service.log_search_call(
                    query,
                    status="error",
                    duration_ms=int((time.monotonic() - t0) * 1000),
                    error=f"{type(e).__name__}: {e}",
                )
                continue

            searches_used += 1
            top = results[: self.top_results]
            findings.append(SearchFinding(query=query, results=top))
            log_service.log_search_call(
                query,
                status="success",
                results_count=len(top),
                duration_ms=int((time.monotonic() - t0) * 1000),
            )

        return ResearchOutcome(
            digest=render_digest(findings),
            findings=findings,
            searches_used=searches_used,
            searches_attempted=searches_attempted,
            truncated=truncated,
        )
