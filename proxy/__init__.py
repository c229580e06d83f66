"""
Codex OAuth Proxy - local reverse proxy for the ChatGPT Codex backend.

This package serves the OpenAI Responses API on localhost and forwards calls
to the Codex backend with cached, auto-refreshing ChatGPT OAuth credentials.
"""
from .server import ProxyServer
from .app import create_app
from .context import ProxyContext, build_context

__version__ = "1.0.0"

__all__ = [
    'ProxyServer',
    'create_app',
    'ProxyContext',
    'build_context',
]
