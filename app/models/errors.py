from __future__ import annotations


class AnalysisError(Exception):
    """Fatal pipeline failure surfaced to the caller.

    `duration_ms` is stamped by the orchestrator so callers can tell slow
    failures from fast ones.
    """

    status_code: int = 500

    def __init__(self, message: str, *, duration_ms: int | None = None):
        super().__init__(message)
        self.message = message
        self.duration_ms = duration_ms


class InvalidRequestError(AnalysisError):
    """Required request fields are missing."""

    status_code = 400


class ResearchUnavailableError(AnalysisError):
    """Every search call failed, usually a bad search credential."""


class PipelineTimeoutError(AnalysisError):
    """The wall-clock budget ran out before a stage that cannot be skipped."""


class RewriteFailedError(AnalysisError):
    """The single-pass rewrite call failed or returned nothing."""


class PlannerOutputError(ValueError):
    """The planner's LLM output could not be parsed into queries."""
