"""
ProxyServer class for CLI control of the FastAPI application.
"""
import logging
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from .app import create_app
from .context import ProxyContext

logger = logging.getLogger(__name__)


class ProxyServer:
    """Proxy server wrapper for CLI control"""

    def __init__(
        self,
        context: Optional[ProxyContext] = None,
        bind_address: Optional[str] = None,
        port: Optional[int] = None,
    ):
        self.server = None
        self.config = None
        self.context = context
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT

    @property
    def base_url(self) -> str:
        return f"http://{self.bind_address}:{self.port}"

    def run(self):
        """Run the proxy server (blocking)"""
        logger.info(f"Starting Codex OAuth Proxy on {self.base_url}")
        logger.info("Available endpoints: POST /v1/responses, GET /health")
        self.config = uvicorn.Config(
            create_app(self.context),
            host=self.bind_address,
            port=self.port,
            log_level=LOG_LEVEL,
            access_log=False  # Reduce noise in CLI
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the proxy server"""
        if self.server:
            self.server.should_exit = True
