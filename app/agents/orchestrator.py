from __future__ import annotations

import time
from typing import Any, Callable

from app.agents.query_planner import QueryPlanner
from app.agents.researcher import Researcher
from app.agents.rewriter import Rewriter
from app.config import settings
from app.llm_client import get_client, get_model
from app.models.errors import (
    AnalysisError,
    InvalidRequestError,
    PipelineTimeoutError,
    ResearchUnavailableError,
)
from app.models.pipeline import (
    AnalysisRequest,
    AnalysisResult,
    Deadline,
    QueryPlan,
    ResearchOutcome,
    RewriteOutcome,
)
from app.services import logger as log_service
from app.services.logger import logger

QUALITATIVE_CHANGES = [
    "Verified pricing and features against search results",
    "Fixed factual inaccuracies found in research",
    "Added missing features identified in research",
    "Improved grammar and readability",
    "Applied writing style rules (contractions, active voice, no em dashes)",
]


def validate_request(request: AnalysisRequest) -> None:
    missing = [
        name
        for name, value in (
            ("blogContent", request.content),
            ("anthropicKey", request.credentials.llm_key),
            ("braveKey", request.credentials.search_key),
        )
        if not (value or "").strip()
    ]
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")


def build_change_summary(plan: QueryPlan, research: ResearchOutcome, rewrite: RewriteOutcome) -> list[str]:
    changes = [
        f"Performed {research.searches_used} web searches for fact-checking",
        f"Made {rewrite.llm_calls} rewrite call{'s' if rewrite.llm_calls != 1 else ''}",
    ]
    if plan.used_fallback:
        changes.append("Used default search queries (query planning unavailable)")
    if research.truncated:
        changes.append(
            f"Research stopped early after {research.searches_attempted} of {len(plan.queries)} queries (time budget)"
        )
    if rewrite.chunked:
        changes.append(f"Rewrote {rewrite.chunks_rewritten} of {rewrite.chunks_total} sections")
    if rewrite.chunks_failed:
        changes.append(f"Kept original text for {rewrite.chunks_failed} section(s) that could not be rewritten")
    if rewrite.chunks_skipped:
        changes.append(f"Left {rewrite.chunks_skipped} section(s) unchanged after the time budget ran out")
    changes.extend(QUALITATIVE_CHANGES)
    return changes


class ContentAnalysisPipeline:
    """Orchestrates fact-check and rewrite for one post.

    Flow:
      1. Validate the request
      2. Plan search queries (LLM, deterministic fallback)
      3. Research: sequential, rate-limited searches into one digest
      4. Rewrite: single pass, or chunked for large content
      5. Assemble the change summary and metrics

    Every run owns its deadline and counters; nothing is shared between runs.

    Research gets its own `research_budget_seconds` window, capped by the
    run's deadline. This is stricter than truncating on the run deadline
    alone: long search phases stop early so the rewrite still gets time.
    """

    def __init__(
        self,
        *,
        client_factory: Callable[[str], Any] = get_client,
        model: str | None = None,
        clock: Callable[[], float] = time.monotonic,
        researcher: Researcher | None = None,
    ):
        self.client_factory = client_factory
        self.model = model or get_model()
        self.clock = clock
        self.researcher = researcher or Researcher()
        self.budget_seconds = float(settings.pipeline_budget_seconds)
        self.research_budget_seconds = float(settings.research_budget_seconds)

    async def run(self, request: AnalysisRequest) -> AnalysisResult:
        started = self.clock()
        try:
            validate_request(request)
            client = self.client_factory(request.credentials.llm_key)
            try:
                return await self._run(request, client)
            finally:
                close = getattr(client, "close", None)
                if callable(close):
                    await close()
        except AnalysisError as e:
            if e.duration_ms is None:
                e.duration_ms = int((self.clock() - started) * 1000)
            logger.error(f"Analysis failed after {e.duration_ms}ms: {e.message}")
            raise

    async def _run(self, request: AnalysisRequest, client: Any) -> AnalysisResult:
        deadline = Deadline.start(self.budget_seconds, clock=self.clock)
        logger.info(f"Starting analysis for: {request.title or '(untitled)'} ({len(request.content)} chars)")

        # Stage 1: query planning
        log_service.log_pipeline_stage("plan", "started", deadline.elapsed_ms())
        planner = QueryPlanner(client, model=self.model)
        plan = await planner.generate_queries(
            request.content,
            request.title,
            request.research_instructions,
            deadline,
        )
        log_service.log_pipeline_stage(
            "plan",
            "completed",
            deadline.elapsed_ms(),
            {"queries": plan.queries, "fallback": plan.used_fallback},
        )
        if deadline.expired():
            raise PipelineTimeoutError("Time budget exceeded during query planning")

        # Stage 2: research
        log_service.log_pipeline_stage("research", "started", deadline.elapsed_ms())
        research = await self.researcher.research(
            plan.queries,
            request.credentials.search_key,
            deadline.narrowed(self.research_budget_seconds),
        )
        log_service.log_pipeline_stage(
            "research",
            "completed",
            deadline.elapsed_ms(),
            {
                "searches_used": research.searches_used,
                "searches_attempted": research.searches_attempted,
                "truncated": research.truncated,
            },
        )
        if research.searches_used == 0:
            raise ResearchUnavailableError(
                f"Research unavailable: all {research.searches_attempted} searches failed "
                "(check the Brave API key)"
            )
        if deadline.expired():
            raise PipelineTimeoutError("Time budget exceeded before rewriting")

        # Stage 3: rewrite
        log_service.log_pipeline_stage("rewrite", "started", deadline.elapsed_ms())
        rewriter = Rewriter(client, model=self.model)
        rewrite = await rewriter.rewrite(request.content, research.digest, request.writing_instructions, deadline)
        log_service.log_pipeline_stage(
            "rewrite",
            "completed",
            deadline.elapsed_ms(),
            {
                "llm_calls": rewrite.llm_calls,
                "chunks_total": rewrite.chunks_total,
                "chunks_failed": rewrite.chunks_failed,
                "chunks_skipped": rewrite.chunks_skipped,
            },
        )

        duration_ms = deadline.elapsed_ms()
        logger.info(
            f"Analysis complete in {duration_ms / 1000:.1f}s: {research.searches_used} searches, "
            f"{plan.llm_calls} planner call(s), {rewrite.llm_calls} rewrite call(s)"
        )
        return AnalysisResult(
            rewritten_content=rewrite.content,
            change_summary=build_change_summary(plan, research, rewrite),
            searches_used=research.searches_used,
            llm_calls=rewrite.llm_calls,
            duration_ms=duration_ms,
            planner_calls=plan.llm_calls,
            searches_attempted=research.searches_attempted,
            queries=list(plan.queries),
            used_fallback_queries=plan.used_fallback,
            chunks_total=rewrite.chunks_total,
            chunks_rewritten=rewrite.chunks_rewritten,
            chunks_failed=rewrite.chunks_failed,
            chunks_skipped=rewrite.chunks_skipped,
        )
