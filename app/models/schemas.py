from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.models.pipeline import AnalysisRequest, AnalysisResult, Credentials


# --- Requests ---


class AnalyzeRequest(BaseModel):
    """Wire body of POST /api/analyze.

    Every field is optional at the schema level so missing ones produce the
    service's own 400 instead of a 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    blog_content: str | None = Field(default=None, alias="blogContent")
    title: str | None = None
    anthropic_key: str | None = Field(default=None, alias="anthropicKey")
    brave_key: str | None = Field(default=None, alias="braveKey")
    research_prompt: str | None = Field(default=None, alias="researchPrompt")
    writing_prompt: str | None = Field(default=None, alias="writingPrompt")

    def to_analysis_request(self) -> AnalysisRequest:
        return AnalysisRequest(
            content=self.blog_content or "",
            title=self.title or "",
            credentials=Credentials(
                search_key=self.brave_key or "",
                llm_key=self.anthropic_key or "",
            ),
            research_instructions=self.research_prompt,
            writing_instructions=self.writing_prompt,
        )


# --- Responses ---


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    changes: list[str]
    searches_used: int = Field(alias="searchesUsed")
    claude_calls: int = Field(alias="claudeCalls")
    sections_updated: int = Field(alias="sectionsUpdated")
    duration: int
    planner_calls: int = Field(default=0, alias="plannerCalls")
    queries: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalyzeResponse":
        return cls(
            content=result.rewritten_content,
            changes=result.change_summary,
            searches_used=result.searches_used,
            claude_calls=result.llm_calls,
            sections_updated=len(result.change_summary),
            duration=result.duration_ms,
            planner_calls=result.planner_calls,
            queries=result.queries,
        )


class ErrorResponse(BaseModel):
    error: str
    duration: int | None = None
