from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.openai.errors import BridgeCompatError
from gemini_bridge.openai.upstream import UpstreamClient


def get_config(request: Request) -> BridgeConfig:
    return request.app.state.config


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BridgeCompatError)
    async def handle_bridge_error(
        _request: Request,
        exc: BridgeCompatError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.to_error()},
        )
