"""Pass-through proxy for Webflow CMS collection items.

The caller's Authorization header is forwarded unchanged; nothing is stored.
"""
from __future__ import annotations

from typing import Any

import httpx
from fastapi import APIRouter, Body, Header, Query
from fastapi.responses import JSONResponse

from app.config import settings
from app.services.logger import logger

router = APIRouter(prefix="/api/webflow", tags=["webflow"])


async def _forward(method: str, path: str, authorization: str, payload: Any = None) -> JSONResponse:
    headers = {"Authorization": authorization, "accept": "application/json"}
    kwargs: dict[str, Any] = {"headers": headers}
    if payload is not None:
        kwargs["json"] = payload

    url = f"{settings.webflow_api_base.rstrip('/')}{path}"
    try:
        async with httpx.AsyncClient(timeout=settings.webflow_timeout_seconds) as client:
            response = await client.request(method, url, **kwargs)
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Webflow {method} {path} failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

    return JSONResponse(status_code=response.status_code, content=data)


@router.get("")
async def list_items(
    collection_id: str | None = Query(default=None, alias="collectionId"),
    authorization: str | None = Header(default=None),
):
    if not collection_id or not authorization:
        return JSONResponse(status_code=400, content={"error": "Missing collectionId or authorization"})
    return await _forward("GET", f"/collections/{collection_id}/items", authorization)


@router.patch("")
async def update_item(
    collection_id: str | None = Query(default=None, alias="collectionId"),
    item_id: str | None = Query(default=None, alias="itemId"),
    authorization: str | None = Header(default=None),
    payload: dict[str, Any] = Body(default_factory=dict),
):
    if not collection_id or not item_id or not authorization:
        return JSONResponse(status_code=400, content={"error": "Missing required parameters"})
    return await _forward(
        "PATCH",
        f"/collections/{collection_id}/items/{item_id}",
        authorization,
        payload,
    )
