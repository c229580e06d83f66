"""
Codex backend compatibility helpers.

Stateless input filtering, SSE parsing and stream consolidation.
"""
from .input_filter import filter_input, add_tool_guide_message, build_tool_guide_message
from .sse_parser import SSEEvent, SSEParser, parse_sse_text
from .response_converter import (
    TERMINAL_EVENT_TYPES,
    ConsolidationError,
    consolidate_sse,
    dumps_response,
)
from .tool_names import TOOL_NAME_MAP, remap_tool_name, normalize_tool_names

__all__ = [
    "filter_input",
    "add_tool_guide_message",
    "build_tool_guide_message",
    "SSEEvent",
    "SSEParser",
    "parse_sse_text",
    "TERMINAL_EVENT_TYPES",
    "ConsolidationError",
    "consolidate_sse",
    "dumps_response",
    "TOOL_NAME_MAP",
    "remap_tool_name",
    "normalize_tool_names",
]
