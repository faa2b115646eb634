from __future__ import annotations

from dataclasses import dataclass
from typing import Any

MODELS_FETCH_FAILED = "Failed to fetch models"


@dataclass
class BridgeCompatError(Exception):
    """OpenAI-style error wrapper with HTTP metadata."""

    status_code: int
    message: str
    error_type: str = "bridge_error"

    def __str__(self) -> str:
        return self.message

    def to_error(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "type": self.error_type,
        }

    @classmethod
    def stream_error(cls, exc: BaseException) -> "BridgeCompatError":
        return cls(
            status_code=500,
            message=f"Stream error: {_describe(exc)}",
            error_type="stream_error",
        )


def map_bridge_error(exc: Exception) -> BridgeCompatError:
    """Wrap anything raised while forwarding into the bridge error envelope."""

    if isinstance(exc, BridgeCompatError):
        return exc

    return BridgeCompatError(
        status_code=500,
        message=f"Bridge error: {_describe(exc)}",
        error_type="bridge_error",
    )


def _describe(exc: BaseException) -> str:
    # httpx transport errors frequently carry an empty message.
    return str(exc) or exc.__class__.__name__
