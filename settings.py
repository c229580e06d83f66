from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

DATA_DIR = Path.home() / ".opencode"

# Server configuration
PORT = config.get("CODEX_PROXY_PORT", 9000)
BIND_ADDRESS = config.get("CODEX_PROXY_HOST", "127.0.0.1")
LOG_LEVEL = config.get("LOG_LEVEL", "info")

# Storage locations
TOKEN_FILE = config.get("CODEX_PROXY_TOKEN_PATH", str(DATA_DIR / "codex-oauth-token.json"))
ERROR_LOG_FILE = config.get("CODEX_PROXY_LOG_PATH", str(DATA_DIR / "logs" / "codex-proxy-errors.ndjson"))
CODEX_INSTRUCTIONS_FILE = config.get(
    "CODEX_INSTRUCTIONS_FILE", str(DATA_DIR / "cache" / "codex-instructions.md")
)

# Response shaping
# When enabled, streaming callers also receive one consolidated JSON document
FORCE_JSON_RESPONSES = config.get("CODEX_PROXY_FORCE_JSON", False)

# Request shaping
TOOL_PROFILE = str(config.get("CODEX_TOOL_PROFILE", "claude")).strip().lower()
DISABLE_INSTRUCTIONS = config.get("CODEX_DISABLE_INSTRUCTIONS", False)
DISABLE_ENV_OVERRIDE = config.get("CODEX_DISABLE_ENV_OVERRIDE", False)

# Global reasoning/text overrides (empty string means "use model defaults")
REASONING_EFFORT = config.get("CODEX_REASONING_EFFORT", "")
REASONING_SUMMARY = config.get("CODEX_REASONING_SUMMARY", "")
TEXT_VERBOSITY = config.get("CODEX_TEXT_VERBOSITY", "")

# Request preview logging
VERBOSE_LOGGING = config.get("CODEX_PROXY_VERBOSE", False)
PREVIEW_HEAD_CHARS = config.get("CODEX_PROXY_PREVIEW_HEAD", 400)
PREVIEW_TAIL_CHARS = config.get("CODEX_PROXY_PREVIEW_TAIL", 200)
LOG_SEPARATOR = config.get("CODEX_PROXY_LOG_SEPARATOR", "-" * 60)

# Upstream timeouts in seconds. A read timeout of 0 disables it, so a hung
# upstream blocks only the request that is waiting on it.
UPSTREAM_CONNECT_TIMEOUT = config.get("UPSTREAM_CONNECT_TIMEOUT", 10.0)
UPSTREAM_READ_TIMEOUT = config.get("UPSTREAM_READ_TIMEOUT", 0.0)

# ChatGPT backend (hardcoded - not user configurable)
CODEX_BASE_URL = "https://chatgpt.com/backend-api"
