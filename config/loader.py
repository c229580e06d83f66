"""Environment-driven configuration for the Codex OAuth Proxy

Values are resolved in this order:
1. Process environment
2. A ``.env`` file (never overrides the process environment)
3. The default passed by the caller
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUTHY_VALUES = ("true", "1", "yes", "on")


class ConfigLoader:
    """Reads typed settings from the environment"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: Location of the .env file, ``./.env`` when omitted
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if not self.env_path.exists():
            logger.debug(f"No .env file at {self.env_path}")
            return
        load_dotenv(dotenv_path=self.env_path, override=False)
        logger.debug(f"Loaded .env file from {self.env_path}")

    def get(self, env_var: str, default: Any) -> Any:
        """Look up ``env_var`` and coerce it to the type of ``default``

        Booleans accept true/1/yes/on. Numbers that fail to parse fall back
        to the default with a warning. Strings starting with ``~/`` are
        expanded against the home directory.
        """
        raw = os.getenv(env_var)
        if raw is None:
            return _expand_home(default)
        return _coerce(env_var, raw, default)


def _coerce(env_var: str, raw: str, default: Any) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(default, bool):
        return raw.strip().lower() in TRUTHY_VALUES
    if isinstance(default, (int, float)):
        try:
            return type(default)(raw)
        except ValueError:
            logger.warning(f"Ignoring {env_var}={raw!r}: expected {type(default).__name__}, using {default}")
            return default
    return _expand_home(raw)


def _expand_home(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("~/"):
        return str(Path(value).expanduser())
    return value


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Process-wide loader, created on first use"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
