from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.core.errors import UpstreamError

logger = logging.getLogger("gemini-bridge.upstream")


class UpstreamClient:
    """Thin wrapper around one ``httpx.AsyncClient`` bound to the target URL."""

    def __init__(
        self,
        config: BridgeConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = config.target_url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.upstream_timeout),
            transport=transport,
        )

    @property
    def chat_completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    @property
    def models_url(self) -> str:
        return f"{self.base_url}/models"

    async def list_models(self, authorization: str) -> Any:
        try:
            response = await self._client.get(
                self.models_url,
                headers={"Authorization": authorization},
            )
        except Exception as exc:
            # Covers transport errors and headers httpx cannot encode.
            raise UpstreamError(f"GET {self.models_url} failed: {exc!r}") from exc

        if response.is_error:
            raise UpstreamError(
                f"GET {self.models_url} returned {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"GET {self.models_url} returned a non-JSON body"
            ) from exc

    async def open_chat_completion(
        self,
        payload: dict[str, Any],
        authorization: str,
        accept: str,
    ) -> httpx.Response:
        """Send the request and return the response with its body unread.

        The caller owns the response and must close it.
        """
        request = self._client.build_request(
            "POST",
            self.chat_completions_url,
            content=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": authorization,
                "Accept": accept,
            },
        )
        return await self._client.send(request, stream=True)

    async def aclose(self) -> None:
        await self._client.aclose()
