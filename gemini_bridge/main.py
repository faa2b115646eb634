from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.dependencies import register_exception_handlers
from gemini_bridge.internal import admin
from gemini_bridge.openai.upstream import UpstreamClient
from gemini_bridge.routers import chat, models

logger = logging.getLogger("gemini-bridge.server")


def create_app(
    config: BridgeConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    upstream = UpstreamClient(config, transport=transport)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("Bridge forwarding to %s", config.target_url)
        yield
        await upstream.aclose()
        logger.info("Upstream client closed")

    app = FastAPI(
        title="gemini-openai-bridge",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.upstream = upstream

    register_exception_handlers(app)

    app.include_router(admin.router)
    app.include_router(models.router)
    app.include_router(chat.router)

    return app
