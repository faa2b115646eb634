from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Mapping

import httpx
from fastapi.responses import JSONResponse, Response, StreamingResponse

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.core.logs import (
    preview_messages,
    pretty_json,
    redact_headers,
)
from gemini_bridge.core.normalizer import normalize_request
from gemini_bridge.core.types import GEMINI_ONLY_FIELDS

from .errors import BridgeCompatError, map_bridge_error
from .upstream import UpstreamClient

logger = logging.getLogger("gemini-bridge.adapter")

# The ASGI server re-frames the body, and httpx has already decoded it.
_DROPPED_RESPONSE_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "content-length",
        "content-encoding",
    }
)


def parse_body(raw: bytes) -> Any:
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        logger.warning("Rejecting request body that is not valid JSON: %s", exc)
        raise BridgeCompatError(
            status_code=400,
            message="Bridge error: request body is not valid JSON",
            error_type="bridge_error",
        ) from exc


def relay_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        name: value
        for name, value in headers.items()
        if name.lower() not in _DROPPED_RESPONSE_HEADERS
    }


async def relay_chat_completion(
    payload: Any,
    request_headers: Mapping[str, str],
    config: BridgeConfig,
    upstream: UpstreamClient,
) -> Response:
    logger.info("Incoming request to bridge")

    if config.debug:
        logger.debug("=== INCOMING REQUEST ===")
        logger.debug("Headers: %s", redact_headers(dict(request_headers)))
        logger.debug("Body: %s", pretty_json(payload))
        logger.debug("Messages: %s", preview_messages(payload))

    try:
        return await _forward(payload, request_headers, config, upstream)
    except Exception as exc:
        if config.debug:
            logger.debug("=== BRIDGE ERROR ===", exc_info=exc)
        mapped = map_bridge_error(exc)
        logger.error("Chat completion failed: %s", mapped.message)
        raise mapped from exc


async def _forward(
    payload: Any,
    request_headers: Mapping[str, str],
    config: BridgeConfig,
    upstream: UpstreamClient,
) -> Response:
    normalized = normalize_request(payload)

    if config.debug:
        logger.debug("=== CLEANED REQUEST ===")
        logger.debug("%s", pretty_json(normalized))
        if isinstance(payload, dict):
            dropped = sorted(GEMINI_ONLY_FIELDS & payload.keys())
            logger.debug("Dropped Gemini fields: %s", dropped or "none")

    logger.info("Forwarding to: %s", upstream.chat_completions_url)

    response = await upstream.open_chat_completion(
        normalized,
        authorization=request_headers.get("authorization", ""),
        accept=request_headers.get("accept", "application/json"),
    )

    if config.debug:
        logger.debug("=== TARGET RESPONSE ===")
        logger.debug("Status: %s", response.status_code)
        logger.debug("Headers: %s", dict(response.headers))
        logger.debug("Stream flag: %s", normalized.get("stream"))
        logger.debug("Content-Type: %s", response.headers.get("content-type"))

    if normalized.get("stream") is True:
        return await _stream_response(response)

    try:
        await response.aread()
    finally:
        await response.aclose()

    return JSONResponse(status_code=response.status_code, content=response.json())


async def _stream_response(response: httpx.Response) -> StreamingResponse:
    chunks = response.aiter_text()

    # Pull the first chunk before committing to a status line, so an upstream
    # that dies immediately still gets a proper JSON error.
    try:
        first_chunk = await chunks.__anext__()
    except StopAsyncIteration:
        first_chunk = None
    except httpx.HTTPError as exc:
        await response.aclose()
        raise BridgeCompatError.stream_error(exc) from exc
    except BaseException:
        await response.aclose()
        raise

    return StreamingResponse(
        _relay_chunks(response, chunks, first_chunk),
        status_code=response.status_code,
        headers=relay_headers(response.headers),
    )


async def _relay_chunks(
    response: httpx.Response,
    chunks: AsyncIterator[str],
    first_chunk: str | None,
) -> AsyncIterator[str]:
    try:
        if first_chunk is None:
            return
        if first_chunk:
            yield first_chunk
        async for chunk in chunks:
            if chunk:
                yield chunk
    except httpx.HTTPError as exc:
        # Headers are already on the wire; all we can do is end the stream.
        error = BridgeCompatError.stream_error(exc)
        logger.error("%s (type=%s)", error.message, error.error_type)
    finally:
        await response.aclose()
