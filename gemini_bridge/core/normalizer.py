from __future__ import annotations

from typing import Any

from .types import (
    DEFAULT_MODEL_ID,
    MAX_TOKENS_CEILING,
    PASSTHROUGH_FIELDS,
    SAFE_MAX_TOKENS,
    JSONObject,
)

_MISSING = object()


def normalize_request(payload: Any) -> JSONObject:
    """Turn a Gemini-flavoured chat request into an OpenAI-compatible one.

    The input is treated as untrusted JSON: anything that is not an object
    yields a request carrying only the default model. Only the fields listed
    here are copied, so Gemini-only keys (``generationConfig``,
    ``safetySettings``, ``tools``, ``toolConfig``, ``systemInstruction``)
    never reach the upstream. The input is not mutated.
    """

    if not isinstance(payload, dict):
        return {"model": DEFAULT_MODEL_ID}

    normalized: JSONObject = {"model": payload.get("model") or DEFAULT_MODEL_ID}

    messages = payload.get("messages")
    if isinstance(messages, list):
        normalized["messages"] = list(messages)

    system_text = _system_instruction_text(payload.get("systemInstruction"))
    if system_text:
        normalized.setdefault("messages", []).insert(
            0,
            {"role": "system", "content": system_text},
        )

    generation_config = payload.get("generationConfig")
    if not isinstance(generation_config, dict):
        generation_config = {}

    temperature = _first_present(
        (payload, "temperature"),
        (generation_config, "temperature"),
    )
    if temperature is not _MISSING:
        normalized["temperature"] = temperature

    max_tokens = _first_present(
        (payload, "max_tokens"),
        (generation_config, "maxOutputTokens"),
    )
    if max_tokens is not _MISSING:
        normalized["max_tokens"] = _clamp_max_tokens(max_tokens)

    for field_name in PASSTHROUGH_FIELDS:
        if field_name in payload:
            normalized[field_name] = payload[field_name]

    return normalized


def _system_instruction_text(system_instruction: Any) -> str:
    if not isinstance(system_instruction, dict):
        return ""

    parts = system_instruction.get("parts")
    if not isinstance(parts, list):
        return ""

    texts: list[str] = []
    for part in parts:
        text = part.get("text") if isinstance(part, dict) else None
        texts.append(str(text) if text else "")

    return "\n".join(texts)


def _first_present(*sources: tuple[JSONObject, str]) -> Any:
    for source, key in sources:
        if key in source:
            return source[key]
    return _MISSING


def _clamp_max_tokens(value: Any) -> Any:
    # Numeric strings are compared by value.
    number = _as_number(value)
    if number is not None and number > MAX_TOKENS_CEILING:
        return SAFE_MAX_TOKENS
    return value


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None
