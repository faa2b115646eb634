from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PREVIEW_CHARS = 100

_SECRET_MARKERS = ("KEY", "TOKEN", "SECRET", "AUTHORIZATION")


def configure_logging(log_level: str = "info") -> None:
    """Install a single stream handler on the root logger.

    uvicorn is started with ``log_config=None`` so its loggers propagate here
    instead of installing their own formatters.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lgr = logging.getLogger(name)
        lgr.setLevel(level)
        lgr.propagate = True


def mask_secret(value: str) -> str:
    if not value:
        return value
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-4:]}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        name: mask_secret(value) if _is_secret(name) else value
        for name, value in headers.items()
    }


def redact_environment(
    environ: Mapping[str, str],
    prefixes: Iterable[str] = ("BRIDGE", "OPENAI", "GEMINI"),
) -> dict[str, str]:
    """Pick the bridge-related variables out of ``environ`` for startup logs."""
    markers = tuple(prefixes)
    selected: dict[str, str] = {}
    for name in sorted(environ):
        if not any(marker in name for marker in markers):
            continue
        value = environ[name]
        selected[name] = mask_secret(value) if _is_secret(name) else value
    return selected


def pretty_json(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(payload)


def preview_messages(payload: Any) -> list[dict[str, Any]] | str:
    if not isinstance(payload, dict) or not isinstance(payload.get("messages"), list):
        return "none"

    previews: list[dict[str, Any]] = []
    for message in payload["messages"]:
        if not isinstance(message, dict):
            previews.append({"role": None, "content": repr(message)[:PREVIEW_CHARS]})
            continue
        content = message.get("content")
        text = content if isinstance(content, str) else json.dumps(content)
        previews.append(
            {
                "role": message.get("role"),
                "content": text[:PREVIEW_CHARS] + "...",
            }
        )
    return previews


def _is_secret(name: str) -> bool:
    upper = name.upper()
    return any(marker in upper for marker in _SECRET_MARKERS)
