from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    status: str
    bridge: str
    target: str
    uptime: float

    model_config = ConfigDict(extra="forbid")


class ModelsErrorResponse(BaseModel):
    error: str
