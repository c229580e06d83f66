"""Model name normalization and per-model configuration for the Codex backend"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

CODEX_MODEL = "gpt-5-codex"
BASE_MODEL = "gpt-5"


@dataclass
class ModelOptions:
    """Reasoning and text settings; unset fields fall back to defaults"""
    reasoning_effort: Optional[str] = None
    reasoning_summary: Optional[str] = None
    text_verbosity: Optional[str] = None
    include: Optional[List[str]] = None

    def merged_with(self, override: "ModelOptions") -> "ModelOptions":
        """Return a copy where every field set on ``override`` wins"""
        return ModelOptions(
            reasoning_effort=override.reasoning_effort or self.reasoning_effort,
            reasoning_summary=override.reasoning_summary or self.reasoning_summary,
            text_verbosity=override.text_verbosity or self.text_verbosity,
            include=override.include if override.include else self.include,
        )


@dataclass
class UserConfig:
    """Global options plus per-model options keyed by the caller's model name"""
    global_options: ModelOptions = field(default_factory=ModelOptions)
    models: Dict[str, ModelOptions] = field(default_factory=dict)


def normalize_model(model: Optional[str]) -> str:
    """
    Map any caller model name onto a backend-supported variant.

    Examples:
        >>> normalize_model("gpt-5-codex-high")
        'gpt-5-codex'
        >>> normalize_model("GPT 5")
        'gpt-5'
        >>> normalize_model(None)
        'gpt-5'
    """
    if not model:
        return BASE_MODEL

    lowered = model.lower()
    if "codex" in lowered:
        return CODEX_MODEL
    if "gpt-5" in lowered or "gpt 5" in lowered:
        return BASE_MODEL

    logger.debug("Unknown model '%s', falling back to %s", model, BASE_MODEL)
    return BASE_MODEL


def get_model_config(model_name: str, user_config: Optional[UserConfig] = None) -> ModelOptions:
    """
    Resolve options for a model: model-specific options override global ones.

    Args:
        model_name: Original (un-normalized) model name used as config key
        user_config: Configured overrides

    Returns:
        Merged options for this model
    """
    user_config = user_config or UserConfig()
    model_options = user_config.models.get(model_name)
    if model_options is None:
        return user_config.global_options
    return user_config.global_options.merged_with(model_options)
