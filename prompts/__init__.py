"""Prompt text injected into Codex requests"""

from .claude_code import CLAUDE_CODE_TOOL_GUIDE
from .codex_instructions import (
    DEFAULT_CODEX_INSTRUCTIONS,
    TOOL_GUIDES,
    load_codex_instructions,
    get_tool_guide,
)

__all__ = [
    "CLAUDE_CODE_TOOL_GUIDE",
    "DEFAULT_CODEX_INSTRUCTIONS",
    "TOOL_GUIDES",
    "load_codex_instructions",
    "get_tool_guide",
]
