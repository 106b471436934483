from __future__ import annotations

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.agents.orchestrator import ContentAnalysisPipeline
from app.models.errors import AnalysisError
from app.models.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from app.services.logger import logger

router = APIRouter(prefix="/api", tags=["analyze"])


def get_pipeline() -> ContentAnalysisPipeline:
    return ContentAnalysisPipeline()


def _error(status_code: int, message: str, duration_ms: int | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, duration=duration_ms).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(request: AnalyzeRequest):
    """Fact-check and rewrite a blog post."""
    started = time.monotonic()
    try:
        result = await get_pipeline().run(request.to_analysis_request())
    except AnalysisError as e:
        duration = None if e.status_code == 400 else e.duration_ms
        return _error(e.status_code, e.message, duration)
    except Exception as e:
        logger.exception("Unexpected analysis failure")
        return _error(500, str(e) or type(e).__name__, int((time.monotonic() - started) * 1000))

    return JSONResponse(content=AnalyzeResponse.from_result(result).model_dump(by_alias=True))
