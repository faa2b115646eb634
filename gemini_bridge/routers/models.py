from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from gemini_bridge.core.errors import UpstreamError
from gemini_bridge.dependencies import get_upstream
from gemini_bridge.openai.errors import MODELS_FETCH_FAILED
from gemini_bridge.openai.schemas import ModelsErrorResponse
from gemini_bridge.openai.upstream import UpstreamClient

logger = logging.getLogger("gemini-bridge.models")

router = APIRouter(prefix="/v1", tags=["openai"])


@router.get("/models")
async def list_models(
    authorization: str = Header(default=""),
    upstream: UpstreamClient = Depends(get_upstream),
):
    try:
        return await upstream.list_models(authorization)
    except UpstreamError as exc:
        logger.warning("Model list unavailable: %s", exc)
        return JSONResponse(
            status_code=500,
            content=ModelsErrorResponse(error=MODELS_FETCH_FAILED).model_dump(),
        )
