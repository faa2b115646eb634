from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BridgeError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigurationError(BridgeError):
    """Raised at startup when the bridge cannot be configured."""


@dataclass
class UpstreamError(BridgeError):
    """Raised when the upstream cannot be reached or answers unusably."""
