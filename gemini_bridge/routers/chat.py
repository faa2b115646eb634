from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.dependencies import get_config, get_upstream
from gemini_bridge.openai.adapter import parse_body, relay_chat_completion
from gemini_bridge.openai.upstream import UpstreamClient

router = APIRouter(prefix="/v1", tags=["openai"])


@router.post("/chat/completions")
async def chat_completions(
    request: Request,
    config: BridgeConfig = Depends(get_config),
    upstream: UpstreamClient = Depends(get_upstream),
):
    # Bodies are taken raw: Gemini clients send shapes no schema would accept.
    payload = parse_body(await request.body())
    return await relay_chat_completion(payload, request.headers, config, upstream)
