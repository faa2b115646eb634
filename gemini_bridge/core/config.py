from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"


class BridgeConfig(BaseModel):
    """Process-wide bridge settings, fixed at startup."""

    model_config = ConfigDict(frozen=True)

    target_url: str
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    debug: bool = False
    # None keeps upstream calls unbounded.
    upstream_timeout: float | None = None
    log_level: str = "info"

    @field_validator("target_url")
    @classmethod
    def normalize_target_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("target URL must not be empty")
        return v

    @field_validator("port")
    @classmethod
    def check_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"port {v} is out of range")
        return v

    @field_validator("upstream_timeout")
    @classmethod
    def check_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("upstream timeout must be positive")
        return v

    @property
    def effective_log_level(self) -> str:
        return "debug" if self.debug else self.log_level.lower()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BridgeConfig":
        env = os.environ if environ is None else environ

        target_url = env.get("BRIDGE_TARGET_URL") or env.get("OPENAI_BASE_URL")
        if not target_url:
            raise ConfigurationError(
                "No BRIDGE_TARGET_URL or OPENAI_BASE_URL defined; "
                "cannot start bridge without a target URL."
            )

        values: dict[str, object] = {
            "target_url": target_url,
            "debug": env.get("BRIDGE_DEBUG", "").strip().lower() == "true",
        }
        if env.get("BRIDGE_PORT"):
            values["port"] = env["BRIDGE_PORT"]
        if env.get("BRIDGE_HOST"):
            values["host"] = env["BRIDGE_HOST"]
        if env.get("BRIDGE_TIMEOUT_SECONDS"):
            values["upstream_timeout"] = env["BRIDGE_TIMEOUT_SECONDS"]
        if env.get("BRIDGE_LOG_LEVEL"):
            values["log_level"] = env["BRIDGE_LOG_LEVEL"]

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            first_error = exc.errors()[0]
            field = ".".join(str(part) for part in first_error["loc"])
            raise ConfigurationError(
                f"Invalid bridge configuration for {field}: {first_error['msg']}"
            ) from exc
