from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.core.types import BRIDGE_NAME
from gemini_bridge.dependencies import get_config
from gemini_bridge.openai.schemas import HealthResponse

router = APIRouter(tags=["internal"])

_STARTED_AT = time.monotonic()


@router.get("/health", response_model=HealthResponse)
async def health(config: BridgeConfig = Depends(get_config)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        bridge=BRIDGE_NAME,
        target=config.target_url,
        uptime=time.monotonic() - _STARTED_AT,
    )
