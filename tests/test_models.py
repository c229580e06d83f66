from __future__ import annotations

from models import (
    BASE_MODEL,
    CODEX_MODEL,
    ModelOptions,
    UserConfig,
    get_model_config,
    get_reasoning_config,
    get_text_verbosity,
    normalize_model,
)


def test_normalize_model_variants() -> None:
    assert normalize_model("gpt-5-codex-high") == CODEX_MODEL
    assert normalize_model("GPT-5-CODEX") == CODEX_MODEL
    assert normalize_model("GPT 5") == BASE_MODEL
    assert normalize_model("gpt-5-mini") == BASE_MODEL
    assert normalize_model("unknown-model") == BASE_MODEL
    assert normalize_model(None) == BASE_MODEL
    assert normalize_model("") == BASE_MODEL


def test_reasoning_defaults_by_model_weight() -> None:
    assert get_reasoning_config("gpt-5", BASE_MODEL) == {"effort": "medium", "summary": "auto"}
    assert get_reasoning_config("gpt-5-nano", BASE_MODEL)["effort"] == "minimal"


def test_codex_minimal_effort_is_raised_to_low() -> None:
    options = ModelOptions(reasoning_effort="minimal")
    assert get_reasoning_config("gpt-5-codex", CODEX_MODEL, options)["effort"] == "low"
    assert get_reasoning_config("codex-mini", CODEX_MODEL)["effort"] == "low"
    assert get_reasoning_config("gpt-5", BASE_MODEL, options)["effort"] == "minimal"


def test_per_model_options_override_global_options() -> None:
    config = UserConfig(
        global_options=ModelOptions(reasoning_effort="low", text_verbosity="high"),
        models={"gpt-5-codex-high": ModelOptions(reasoning_effort="high", include=["x"])},
    )

    specific = get_model_config("gpt-5-codex-high", config)
    assert specific.reasoning_effort == "high"
    assert specific.text_verbosity == "high"
    assert specific.include == ["x"]

    fallback = get_model_config("gpt-5", config)
    assert fallback.reasoning_effort == "low"
    assert get_text_verbosity(fallback) == "high"
    assert get_text_verbosity(None) == "medium"
