from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(slots=True)
class Deadline:
    """Absolute expiry on a monotonic clock, polled before each external call."""

    started_at: float
    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def start(cls, budget_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        now = clock()
        return cls(started_at=now, expires_at=now + max(budget_seconds, 0.0), clock=clock)

    def expired(self) -> bool:
        return self.clock() >= self.expires_at

    def remaining(self) -> float:
        return max(self.expires_at - self.clock(), 0.0)

    def elapsed_ms(self) -> int:
        return int((self.clock() - self.started_at) * 1000)

    def narrowed(self, budget_seconds: float) -> "Deadline":
        """Sub-deadline that starts now and never outlives this one."""
        now = self.clock()
        return Deadline(
            started_at=self.started_at,
            expires_at=min(self.expires_at, now + max(budget_seconds, 0.0)),
            clock=self.clock,
        )


@dataclass(slots=True)
class Credentials:
    search_key: str
    llm_key: str


@dataclass(slots=True)
class AnalysisRequest:
    content: str
    title: str
    credentials: Credentials
    research_instructions: str | None = None
    writing_instructions: str | None = None


@dataclass(slots=True)
class SearchResult:
    title: str
    url: str
    description: str


@dataclass(slots=True)
class SearchFinding:
    query: str
    results: list[SearchResult] = field(default_factory=list)

    def render(self) -> str:
        lines = [f'## Query: "{self.query}"']
        for index, result in enumerate(self.results, 1):
            lines.append(f"{index}. **{result.title}**")
            lines.append(f"   URL: {result.url}")
            lines.append(f"   {result.description}")
            lines.append("")
        return "\n".join(lines) + "\n"


@dataclass(slots=True)
class QueryPlan:
    queries: list[str]
    llm_calls: int = 0
    used_fallback: bool = False


@dataclass(slots=True)
class ResearchOutcome:
    digest: str
    findings: list[SearchFinding] = field(default_factory=list)
    searches_used: int = 0
    searches_attempted: int = 0
    truncated: bool = False


@dataclass(slots=True)
class RewriteOutcome:
    content: str
    llm_calls: int = 0
    chunks_total: int = 1
    chunks_rewritten: int = 0
    chunks_failed: int = 0
    chunks_skipped: int = 0

    @property
    def chunked(self) -> bool:
        return self.chunks_total > 1


@dataclass(slots=True)
class AnalysisResult:
    rewritten_content: str
    change_summary: list[str]
    searches_used: int
    llm_calls: int
    duration_ms: int
    planner_calls: int = 0
    searches_attempted: int = 0
    queries: list[str] = field(default_factory=list)
    used_fallback_queries: bool = False
    chunks_total: int = 1
    chunks_rewritten: int = 0
    chunks_failed: int = 0
    chunks_skipped: int = 0
