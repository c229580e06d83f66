"""
Per-instance proxy state.

Everything a request handler needs lives on one ``ProxyContext`` attached to
the FastAPI app, so two apps in one process never share credentials.
"""
import logging
from dataclasses import dataclass, field

import settings
from codex_oauth import AuthStateMachine, CredentialStore
from models import ModelOptions, UserConfig
from prompts import load_codex_instructions
from .error_log import ErrorLogger
from .handlers.request_handler import TransformOptions
from .handlers.streaming_handler import StreamConverter
from .logging_utils import PreviewOptions
from .upstream import UpstreamClient, build_http_client

logger = logging.getLogger(__name__)


@dataclass
class ProxyContext:
    auth: AuthStateMachine
    upstream: UpstreamClient
    converter: StreamConverter
    error_logger: ErrorLogger
    transform_options: TransformOptions = field(default_factory=TransformOptions)
    preview: PreviewOptions = field(default_factory=PreviewOptions)
    bootstrap_on_startup: bool = True

    async def aclose(self):
        await self.upstream.http_client.aclose()


def build_user_config() -> UserConfig:
    """Global overrides from the environment; no per-model presets"""
    return UserConfig(
        global_options=ModelOptions(
            reasoning_effort=settings.REASONING_EFFORT or None,
            reasoning_summary=settings.REASONING_SUMMARY or None,
            text_verbosity=settings.TEXT_VERBOSITY or None,
        )
    )


def build_context() -> ProxyContext:
    """Assemble a context from ``settings``"""
    instructions = ""
    if not settings.DISABLE_INSTRUCTIONS:
        instructions = load_codex_instructions(settings.CODEX_INSTRUCTIONS_FILE)

    logger.debug(
        f"Building proxy context: token_file={settings.TOKEN_FILE} "
        f"tool_profile={settings.TOOL_PROFILE} force_json={settings.FORCE_JSON_RESPONSES}"
    )

    http_client = build_http_client(settings.UPSTREAM_CONNECT_TIMEOUT, settings.UPSTREAM_READ_TIMEOUT)
    return ProxyContext(
        auth=AuthStateMachine(CredentialStore(settings.TOKEN_FILE)),
        upstream=UpstreamClient(http_client, settings.CODEX_BASE_URL),
        converter=StreamConverter(
            force_json=settings.FORCE_JSON_RESPONSES,
            normalize_tools=settings.TOOL_PROFILE == "claude",
        ),
        error_logger=ErrorLogger(settings.ERROR_LOG_FILE),
        transform_options=TransformOptions(
            instructions=instructions,
            user_config=build_user_config(),
            tool_profile=settings.TOOL_PROFILE,
            disable_instructions=settings.DISABLE_INSTRUCTIONS,
            disable_env_override=settings.DISABLE_ENV_OVERRIDE,
        ),
        preview=PreviewOptions(
            verbose=settings.VERBOSE_LOGGING,
            head_chars=settings.PREVIEW_HEAD_CHARS,
            tail_chars=settings.PREVIEW_TAIL_CHARS,
            separator=settings.LOG_SEPARATOR,
        ),
    )
