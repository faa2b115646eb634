from __future__ import annotations

import copy

import pytest

from gemini_bridge.core.normalizer import normalize_request
from gemini_bridge.core.types import DEFAULT_MODEL_ID, GEMINI_ONLY_FIELDS


@pytest.mark.parametrize("payload", [None, [], "hello", 42])
def test_non_object_payload_yields_default_model_only(payload):
    assert normalize_request(payload) == {"model": DEFAULT_MODEL_ID}


@pytest.mark.parametrize("payload", [{}, {"model": ""}, {"model": None}])
def test_missing_model_falls_back_to_default(payload):
    assert normalize_request(payload)["model"] == DEFAULT_MODEL_ID


def test_model_is_preserved():
    assert normalize_request({"model": "llama3:8b"})["model"] == "llama3:8b"


def test_full_gemini_request_is_translated():
    payload = {
        "model": "qwen3-coder:latest",
        "messages": [{"role": "user", "content": "Hello"}],
        "max_tokens": 229018,
        "generationConfig": {"temperature": 0.7, "maxOutputTokens": 8192},
        "safetySettings": [{"category": "HARM", "threshold": "HIGH"}],
        "systemInstruction": {"parts": [{"text": "You are a helpful assistant."}]},
    }

    assert normalize_request(payload) == {
        "model": "qwen3-coder:latest",
        "messages": [
            {"role": "system", "content": "You are a helpful assistant."},
            {"role": "user", "content": "Hello"},
        ],
        "max_tokens": 4096,
        "temperature": 0.7,
    }


def test_gemini_only_fields_are_never_copied():
    payload = {
        "generationConfig": {"topK": 3},
        "safetySettings": [],
        "tools": [{"functionDeclarations": []}],
        "toolConfig": {"mode": "AUTO"},
        "systemInstruction": {"parts": []},
        "unknown": True,
    }

    normalized = normalize_request(payload)

    assert not GEMINI_ONLY_FIELDS & normalized.keys()
    assert "unknown" not in normalized


def test_system_instruction_parts_are_joined_and_prepended():
    payload = {
        "messages": [{"role": "user", "content": "hi"}],
        "systemInstruction": {"parts": [{"text": "A"}, {"text": "B"}]},
    }

    messages = normalize_request(payload)["messages"]

    assert messages[0] == {"role": "system", "content": "A\nB"}
    assert messages[1] == {"role": "user", "content": "hi"}


def test_system_instruction_creates_messages_when_absent():
    payload = {"systemInstruction": {"parts": [{"text": "Be brief."}]}}

    assert normalize_request(payload)["messages"] == [
        {"role": "system", "content": "Be brief."}
    ]


def test_system_instruction_parts_without_text_count_as_empty():
    payload = {
        "systemInstruction": {"parts": [{"text": "A"}, {"inlineData": {}}, {"text": "C"}]},
    }

    assert normalize_request(payload)["messages"][0]["content"] == "A\n\nC"


def test_empty_system_instruction_adds_no_message():
    payload = {"systemInstruction": {"parts": [{}]}}

    assert "messages" not in normalize_request(payload)


def test_several_empty_parts_still_join_into_a_system_message():
    payload = {"systemInstruction": {"parts": [{}, {"text": ""}]}}

    assert normalize_request(payload)["messages"] == [
        {"role": "system", "content": "\n"}
    ]


def test_temperature_prefers_top_level_value():
    payload = {"temperature": 0.1, "generationConfig": {"temperature": 0.9}}

    assert normalize_request(payload)["temperature"] == 0.1


def test_temperature_falls_back_to_generation_config():
    payload = {"generationConfig": {"temperature": 0.9}}

    assert normalize_request(payload)["temperature"] == 0.9


def test_temperature_omitted_when_absent():
    assert "temperature" not in normalize_request({"generationConfig": {}})


@pytest.mark.parametrize(
    ("requested", "expected"),
    [(8192, 8192), (100_000, 100_000), (100_001, 4096), (229_018, 4096)],
)
def test_max_output_tokens_are_clamped(requested, expected):
    payload = {"generationConfig": {"maxOutputTokens": requested}}

    assert normalize_request(payload)["max_tokens"] == expected


@pytest.mark.parametrize(
    ("requested", "expected"),
    [("229018", 4096), (" 150000 ", 4096), ("8192", "8192"), ("many", "many"), (True, True)],
)
def test_max_tokens_strings_are_clamped_by_value(requested, expected):
    assert normalize_request({"max_tokens": requested})["max_tokens"] == expected


def test_top_level_max_tokens_wins_over_generation_config():
    payload = {"max_tokens": 512, "generationConfig": {"maxOutputTokens": 8192}}

    assert normalize_request(payload)["max_tokens"] == 512


def test_max_tokens_omitted_when_absent():
    assert "max_tokens" not in normalize_request({"messages": []})


def test_openai_fields_pass_through():
    payload = {
        "top_p": 0.5,
        "frequency_penalty": 0.1,
        "presence_penalty": 0.2,
        "stream": True,
        "stop": ["\n"],
        "n": 2,
    }

    normalized = normalize_request(payload)

    for key, value in payload.items():
        assert normalized[key] == value


def test_normalizing_is_idempotent():
    payload = {
        "model": "m",
        "messages": [{"role": "user", "content": "x"}],
        "temperature": 0.3,
        "max_tokens": 100,
        "stream": False,
    }

    once = normalize_request(payload)

    assert once == payload
    assert normalize_request(once) == once


def test_input_is_not_mutated():
    payload = {
        "messages": [{"role": "user", "content": "hi"}],
        "systemInstruction": {"parts": [{"text": "sys"}]},
        "generationConfig": {"maxOutputTokens": 999_999},
    }
    original = copy.deepcopy(payload)

    normalized = normalize_request(payload)

    assert payload == original
    assert normalized["messages"] is not payload["messages"]
