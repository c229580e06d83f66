"""Model normalization and reasoning defaults for the Codex backend"""

from .resolution import (
    CODEX_MODEL,
    BASE_MODEL,
    ModelOptions,
    UserConfig,
    normalize_model,
    get_model_config,
)
from .reasoning import (
    DEFAULT_REASONING_SUMMARY,
    DEFAULT_TEXT_VERBOSITY,
    ReasoningConfig,
    is_lightweight_model,
    get_reasoning_config,
    get_text_verbosity,
)

__all__ = [
    "CODEX_MODEL",
    "BASE_MODEL",
    "ModelOptions",
    "UserConfig",
    "normalize_model",
    "get_model_config",
    "DEFAULT_REASONING_SUMMARY",
    "DEFAULT_TEXT_VERBOSITY",
    "ReasoningConfig",
    "is_lightweight_model",
    "get_reasoning_config",
    "get_text_verbosity",
]
