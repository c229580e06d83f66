"""Codex system instructions and tool-guidance selection"""

import logging
from pathlib import Path
from typing import Optional, Union

from .claude_code import CLAUDE_CODE_TOOL_GUIDE

logger = logging.getLogger(__name__)

DEFAULT_CODEX_INSTRUCTIONS = (
    "You are Codex, a coding agent based on GPT-5. "
    "You help the user with software development tasks in their workspace. "
    "Provide clear, accurate, and well-structured code solutions."
)

TOOL_GUIDES = {
    "claude": CLAUDE_CODE_TOOL_GUIDE,
}


def load_codex_instructions(path: Optional[Union[str, Path]]) -> str:
    """
    Read the cached Codex instruction text.

    Args:
        path: Location of the cached instructions file

    Returns:
        File contents, or a built-in default when the file is unavailable
    """
    if path:
        try:
            text = Path(path).read_text(encoding="utf-8")
            if text.strip():
                logger.debug(f"Loaded Codex instructions from {path}")
                return text
        except FileNotFoundError:
            logger.warning(f"Codex instructions file not found at {path}, using default")
        except OSError as e:
            logger.warning(f"Failed to read Codex instructions from {path}: {e}, using default")
    return DEFAULT_CODEX_INSTRUCTIONS


def get_tool_guide(profile: Optional[str]) -> Optional[str]:
    """Guidance text for a tool profile, or None if the profile has none"""
    return TOOL_GUIDES.get((profile or "").strip().lower())
