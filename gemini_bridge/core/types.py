from __future__ import annotations

from typing import Any

DEFAULT_MODEL_ID = "qwen3-coder:latest"
BRIDGE_NAME = "gemini-openai-bridge"

# Gemini clients routinely ask for 200k+ output tokens.
MAX_TOKENS_CEILING = 100_000
SAFE_MAX_TOKENS = 4096

PASSTHROUGH_FIELDS = (
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "stream",
    "stop",
    "n",
)

GEMINI_ONLY_FIELDS = frozenset(
    {
        "generationConfig",
        "safetySettings",
        "tools",
        "toolConfig",
        "systemInstruction",
    }
)

JSONObject = dict[str, Any]
