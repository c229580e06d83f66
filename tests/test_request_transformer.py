from __future__ import annotations

from typing import Any

from models import ModelOptions, UserConfig
from prompts import CLAUDE_CODE_TOOL_GUIDE
from proxy.handlers.request_handler import TransformOptions, transform_request_body


def _body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "model": "gpt-5-codex-high",
        "input": [
            {"id": "msg_1", "type": "message", "role": "user", "content": [{"type": "input_text", "text": "hi"}]},
            {"type": "item_reference", "id": "rs_1"},
            {"id": "fc_1", "type": "function_call_output", "call_id": "c1", "output": "ok"},
        ],
        "stream": False,
        "metadata": {"user": "x"},
        "max_output_tokens": 100,
        "max_completion_tokens": 100,
    }
    body.update(overrides)
    return body


def test_strips_fields_and_forces_stateless_streaming() -> None:
    result = transform_request_body(_body(), TransformOptions(instructions="INSTR"))
    body = result.body

    assert "metadata" not in body
    assert "max_output_tokens" not in body
    assert "max_completion_tokens" not in body
    assert body["store"] is False
    assert body["stream"] is True
    assert result.original_stream is False
    assert result.original_model == "gpt-5-codex-high"
    assert body["model"] == "gpt-5-codex"


def test_input_items_lose_ids_and_references_in_order() -> None:
    body = transform_request_body(_body(), TransformOptions()).body

    assert [item["type"] for item in body["input"]] == ["message", "function_call_output"]
    assert all("id" not in item for item in body["input"])


def test_tool_guide_is_prepended_only_when_tools_present() -> None:
    with_tools = transform_request_body(_body(tools=[{"type": "function", "name": "bash"}]), TransformOptions()).body
    first = with_tools["input"][0]
    assert first["role"] == "developer"
    assert first["content"][0]["text"] == CLAUDE_CODE_TOOL_GUIDE
    assert with_tools["input"][1]["type"] == "message"

    without_tools = transform_request_body(_body(), TransformOptions()).body
    assert without_tools["input"][0]["role"] == "user"


def test_tool_guide_respects_profile_and_disable_flag() -> None:
    tools = [{"type": "function", "name": "bash"}]
    disabled = transform_request_body(_body(tools=tools), TransformOptions(disable_env_override=True)).body
    assert disabled["input"][0]["role"] == "user"

    no_profile = transform_request_body(_body(tools=tools), TransformOptions(tool_profile="none")).body
    assert no_profile["input"][0]["role"] == "user"


def test_instruction_resolution() -> None:
    caller = transform_request_body(_body(instructions="mine"), TransformOptions(instructions="INSTR")).body
    assert caller["instructions"] == "mine"

    cached = transform_request_body(_body(instructions="  "), TransformOptions(instructions="INSTR")).body
    assert cached["instructions"] == "INSTR"

    disabled = transform_request_body(_body(), TransformOptions(instructions="INSTR", disable_instructions=True)).body
    assert disabled["instructions"] == ""


def test_reasoning_and_text_merge_onto_caller_objects() -> None:
    body = transform_request_body(
        _body(model="gpt-5-mini", reasoning={"effort": "high", "extra": 1}, text={"format": {"type": "text"}}),
        TransformOptions(),
    ).body

    assert body["model"] == "gpt-5"
    assert body["reasoning"] == {"effort": "minimal", "summary": "auto", "extra": 1}
    assert body["text"] == {"format": {"type": "text"}, "verbosity": "medium"}


def test_include_resolution() -> None:
    default = transform_request_body(_body(), TransformOptions()).body
    assert default["include"] == ["reasoning.encrypted_content"]

    caller = transform_request_body(_body(include=["a"]), TransformOptions()).body
    assert caller["include"] == ["a"]

    config = UserConfig(models={"gpt-5-codex-high": ModelOptions(include=["b"])})
    override = transform_request_body(_body(), TransformOptions(user_config=config)).body
    assert override["include"] == ["b"]


def test_correlation_id_prefers_prompt_cache_key() -> None:
    keyed = transform_request_body(_body(prompt_cache_key="conv-1"), TransformOptions())
    assert keyed.correlation_id == "conv-1"

    first = transform_request_body(_body(), TransformOptions())
    second = transform_request_body(_body(), TransformOptions())
    assert first.correlation_id != second.correlation_id
    assert len(first.correlation_id) == 36


def test_caller_stream_preference_is_captured_before_forcing() -> None:
    result = transform_request_body(_body(stream=True), TransformOptions())
    assert result.original_stream is True
    assert result.body["stream"] is True
