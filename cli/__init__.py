"""CLI package for the Codex OAuth Proxy"""

from cli.main import main

__all__ = [
    "main",
]
