"""
Logging utilities for request debugging and tracing.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "x-api-key", "api-key", "cookie"}


@dataclass
class PreviewOptions:
    verbose: bool = False
    head_chars: int = 400
    tail_chars: int = 200
    separator: str = "-" * 60


def preview_text(text: str, head_chars: int, tail_chars: int) -> str:
    """Keep the start and end of long text, eliding the middle"""
    if len(text) <= head_chars + tail_chars:
        return text
    omitted = len(text) - head_chars - tail_chars
    tail = text[-tail_chars:] if tail_chars > 0 else ""
    return f"{text[:head_chars]} ...[{omitted} chars omitted]... {tail}"


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
            elif isinstance(part, str):
                parts.append(part)
        return "\n".join(parts)
    return ""


def last_input_text(body: Dict[str, Any]) -> str:
    """Text of the most recent input message carrying any"""
    items = body.get("input")
    if isinstance(items, str):
        return items
    if not isinstance(items, list):
        return ""
    for item in reversed(items):
        if isinstance(item, dict):
            text = _content_text(item.get("content"))
            if text:
                return text
    return ""


def log_request_preview(
    request_id: str,
    body: Dict[str, Any],
    endpoint: str,
    options: PreviewOptions,
    headers: Optional[Dict[str, str]] = None,
):
    """Log a trimmed summary of an incoming Responses API request"""
    level = logging.INFO if options.verbose else logging.DEBUG
    if not logger.isEnabledFor(level):
        return

    tools = body.get("tools")
    tool_count = len(tools) if isinstance(tools, list) else 0

    logger.log(level, f"[{request_id}] {options.separator}")
    logger.log(level, f"[{request_id}] Endpoint: {endpoint}")
    logger.log(level, f"[{request_id}] Model: {body.get('model', 'unknown')}")
    logger.log(level, f"[{request_id}] Stream: {body.get('stream', False)}")
    logger.log(level, f"[{request_id}] Tools: {tool_count}")

    if headers:
        for header_name, header_value in headers.items():
            if header_name.lower() in SENSITIVE_HEADERS:
                logger.log(level, f"[{request_id}] {header_name}: [REDACTED]")
            else:
                logger.log(level, f"[{request_id}] {header_name}: {header_value}")

    instructions = body.get("instructions")
    if isinstance(instructions, str) and instructions:
        logger.log(
            level,
            f"[{request_id}] Instructions: "
            f"{preview_text(instructions, options.head_chars, options.tail_chars)}",
        )

    prompt = last_input_text(body)
    if prompt:
        logger.log(
            level,
            f"[{request_id}] Last input: {preview_text(prompt, options.head_chars, options.tail_chars)}",
        )
    logger.log(level, f"[{request_id}] {options.separator}")
