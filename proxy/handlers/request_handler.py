"""
Request transformation for the Codex backend.

The ChatGPT backend runs in stateless mode and only streams, so every caller
body is rewritten before it is forwarded:

- caller metadata and output-token limits are removed
- ``store`` is forced off and ``stream`` forced on (the caller's own
  preference is captured first)
- instructions fall back to the cached Codex instruction text
- input items lose their ids and server-state references
- model names collapse to the two backend variants
- reasoning, text verbosity and ``include`` get Codex CLI defaults
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from codex_compat import add_tool_guide_message, filter_input
from models import (
    UserConfig,
    get_model_config,
    get_reasoning_config,
    get_text_verbosity,
    normalize_model,
)
from prompts import get_tool_guide

logger = logging.getLogger(__name__)

STRIPPED_FIELDS = ("metadata", "max_output_tokens", "max_completion_tokens")
ENCRYPTED_REASONING_INCLUDE = "reasoning.encrypted_content"


@dataclass
class TransformOptions:
    """Per-instance request shaping configuration"""
    instructions: str = ""
    user_config: UserConfig = field(default_factory=UserConfig)
    tool_profile: Optional[str] = "claude"
    disable_instructions: bool = False
    disable_env_override: bool = False


@dataclass
class TransformResult:
    """Upstream-ready body plus what the proxy needs to answer the caller"""
    body: Dict[str, Any]
    original_stream: bool
    correlation_id: str
    original_model: Optional[str]


def resolve_instructions(body: Dict[str, Any], options: TransformOptions) -> str:
    caller_instructions = body.get("instructions")
    if isinstance(caller_instructions, str) and caller_instructions.strip():
        return caller_instructions
    if options.disable_instructions:
        return ""
    return options.instructions


def resolve_correlation_id(body: Dict[str, Any]) -> str:
    """Caller's prompt cache key, or a fresh id used for this call only"""
    cache_key = body.get("prompt_cache_key")
    if isinstance(cache_key, str) and cache_key.strip():
        return cache_key
    return str(uuid.uuid4())


def transform_request_body(
    body: Dict[str, Any],
    options: TransformOptions,
    request_id: str = "-",
) -> TransformResult:
    """
    Rewrite a parsed Responses API body in place for the Codex backend.

    Args:
        body: Parsed caller JSON object
        options: Request shaping configuration
        request_id: Request ID for logging

    Returns:
        TransformResult wrapping the mutated body
    """
    for field_name in STRIPPED_FIELDS:
        body.pop(field_name, None)

    original_stream = bool(body.get("stream"))
    original_model = body.get("model") if isinstance(body.get("model"), str) else None
    normalized_model = normalize_model(original_model)

    # Options are keyed by the caller's model name so aliases can carry their own presets
    model_options = get_model_config(original_model or normalized_model, options.user_config)
    logger.debug(
        f"[{request_id}] Model '{original_model}' -> '{normalized_model}', "
        f"per-model config: {original_model in options.user_config.models}"
    )

    body["model"] = normalized_model
    body["store"] = False
    body["stream"] = True
    body["instructions"] = resolve_instructions(body, options)

    if isinstance(body.get("input"), list):
        original_ids = [item.get("id") for item in body["input"] if isinstance(item, dict) and item.get("id")]
        if original_ids:
            logger.debug(f"[{request_id}] Stripping {len(original_ids)} input item ids")

        caller_items = filter_input(body["input"])
        guide_text = None if options.disable_env_override else get_tool_guide(options.tool_profile)
        body["input"] = add_tool_guide_message(caller_items, bool(body.get("tools")), guide_text)

    reasoning = body.get("reasoning") if isinstance(body.get("reasoning"), dict) else {}
    body["reasoning"] = {
        **reasoning,
        **get_reasoning_config(original_model, normalized_model, model_options),
    }

    text = body.get("text") if isinstance(body.get("text"), dict) else {}
    body["text"] = {
        **text,
        "verbosity": get_text_verbosity(model_options),
    }

    caller_include = body.get("include")
    if not (isinstance(caller_include, list) and caller_include):
        body["include"] = list(model_options.include or [ENCRYPTED_REASONING_INCLUDE])

    return TransformResult(
        body=body,
        original_stream=original_stream,
        correlation_id=resolve_correlation_id(body),
        original_model=original_model,
    )
