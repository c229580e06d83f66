"""
Loopback listener for the OAuth redirect.

Runs an aiohttp site on the registered redirect port for the duration of one
login attempt and hands the authorization code back to the login flow.
"""
import asyncio
import logging
from typing import Optional

from aiohttp import web

from .constants import OAUTH_CALLBACK_PORT, OAUTH_CALLBACK_PATH, OAUTH_CALLBACK_TIMEOUT

logger = logging.getLogger(__name__)

SUCCESS_PAGE = """
<html>
    <body>
        <h1>Signed in to ChatGPT</h1>
        <p>The Codex proxy has your credentials. This tab can be closed.</p>
    </body>
</html>
"""


class OAuthCallbackServer:
    """Captures the first redirect whose state matches this login attempt"""

    def __init__(self, expected_state: str, host: str = "127.0.0.1", port: int = OAUTH_CALLBACK_PORT):
        self.expected_state = expected_state
        self.host = host
        self.port = port
        self.code: Optional[str] = None
        self._received = asyncio.Event()
        self._runner: Optional[web.AppRunner] = None

        self.app = web.Application()
        self.app.router.add_get(OAUTH_CALLBACK_PATH, self._handle_callback)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        query = request.query
        if "error" in query:
            reason = f"{query['error']} {query.get('error_description', '')}".rstrip()
            logger.error(f"Authorization server returned an error: {reason}")
            return web.Response(text=f"Authentication failed: {query['error']}", status=400)

        code, state = query.get("code"), query.get("state")
        if not code or not state:
            return web.Response(text="Missing code or state parameter", status=400)
        if state != self.expected_state:
            logger.warning("Ignoring OAuth redirect with unexpected state")
            return web.Response(text="Invalid state parameter", status=400)

        self.code = code
        self._received.set()
        return web.Response(text=SUCCESS_PAGE, content_type="text/html")

    async def start(self) -> None:
        """
        Raises:
            OSError: If the port cannot be bound
        """
        runner = web.AppRunner(self.app)
        await runner.setup()
        try:
            await web.TCPSite(runner, host=self.host, port=self.port).start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        logger.info(f"Waiting for OAuth redirect on http://{self.host}:{self.port}{OAUTH_CALLBACK_PATH}")

    async def wait_for_code(self, timeout: float = OAUTH_CALLBACK_TIMEOUT) -> Optional[str]:
        """Authorization code, or None if nothing arrived within ``timeout`` seconds"""
        try:
            await asyncio.wait_for(self._received.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"No OAuth redirect after {timeout} seconds")
            return None
        return self.code

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None


async def start_callback_server(expected_state: str) -> OAuthCallbackServer:
    """Bind the redirect listener for one login attempt"""
    server = OAuthCallbackServer(expected_state)
    await server.start()
    return server
