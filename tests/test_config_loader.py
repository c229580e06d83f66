from __future__ import annotations

from pathlib import Path
from typing import Any

from config import ConfigLoader


def _loader(tmp_path: Any) -> ConfigLoader:
    return ConfigLoader(env_path=str(tmp_path / "missing.env"))


def test_values_are_coerced_to_default_type(tmp_path: Any, monkeypatch: Any) -> None:
    monkeypatch.setenv("CODEX_PROXY_PORT", "9100")
    monkeypatch.setenv("CODEX_PROXY_FORCE_JSON", "yes")
    monkeypatch.setenv("UPSTREAM_CONNECT_TIMEOUT", "2.5")
    loader = _loader(tmp_path)

    assert loader.get("CODEX_PROXY_PORT", 9000) == 9100
    assert loader.get("CODEX_PROXY_FORCE_JSON", False) is True
    assert loader.get("UPSTREAM_CONNECT_TIMEOUT", 10.0) == 2.5


def test_unparsable_numbers_fall_back_to_default(tmp_path: Any, monkeypatch: Any) -> None:
    monkeypatch.setenv("CODEX_PROXY_PORT", "not-a-port")
    assert _loader(tmp_path).get("CODEX_PROXY_PORT", 9000) == 9000


def test_home_relative_paths_are_expanded(tmp_path: Any, monkeypatch: Any) -> None:
    monkeypatch.setenv("CODEX_PROXY_TOKEN_PATH", "~/tokens/codex.json")
    value = _loader(tmp_path).get("CODEX_PROXY_TOKEN_PATH", "")
    assert value == str(Path.home() / "tokens" / "codex.json")


def test_dotenv_file_does_not_override_environment(tmp_path: Any, monkeypatch: Any) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("CODEX_TOOL_PROFILE=none\nCODEX_PROXY_HOST=0.0.0.0\n", encoding="utf-8")
    monkeypatch.setenv("CODEX_TOOL_PROFILE", "claude")
    # Registered so the value loaded from the file is removed again afterwards
    monkeypatch.setenv("CODEX_PROXY_HOST", "placeholder")
    monkeypatch.delenv("CODEX_PROXY_HOST")

    loader = ConfigLoader(env_path=str(env_file))

    assert loader.get("CODEX_TOOL_PROFILE", "claude") == "claude"
    assert loader.get("CODEX_PROXY_HOST", "127.0.0.1") == "0.0.0.0"
