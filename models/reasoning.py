"""Reasoning configuration defaults (Codex CLI presets)"""

from typing import Optional, TypedDict

from .resolution import CODEX_MODEL, ModelOptions

DEFAULT_REASONING_SUMMARY = "auto"
DEFAULT_TEXT_VERBOSITY = "medium"
LIGHTWEIGHT_MARKERS = ("mini", "nano")


class ReasoningConfig(TypedDict):
    effort: str
    summary: str


def is_lightweight_model(model: Optional[str]) -> bool:
    lowered = (model or "").lower()
    return any(marker in lowered for marker in LIGHTWEIGHT_MARKERS)


def get_reasoning_config(
    original_model: Optional[str],
    normalized_model: str,
    options: Optional[ModelOptions] = None,
) -> ReasoningConfig:
    """
    Resolve reasoning effort and summary for a request.

    Lightweight variants (mini/nano) default to "minimal", everything else to
    "medium". The codex model has no "minimal" preset, so it is raised to "low".
    """
    options = options or ModelOptions()

    default_effort = "minimal" if is_lightweight_model(original_model) else "medium"
    effort = options.reasoning_effort or default_effort

    if normalized_model == CODEX_MODEL and effort == "minimal":
        effort = "low"

    return {
        "effort": effort,
        "summary": options.reasoning_summary or DEFAULT_REASONING_SUMMARY,
    }


def get_text_verbosity(options: Optional[ModelOptions] = None) -> str:
    options = options or ModelOptions()
    return options.text_verbosity or DEFAULT_TEXT_VERBOSITY
