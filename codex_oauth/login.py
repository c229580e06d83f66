"""Interactive browser login for ChatGPT OAuth"""

import asyncio
import logging
import webbrowser
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from .authorization import create_authorization_flow, parse_authorization_input
from .callback_server import start_callback_server
from .errors import LoginFailure
from .models import TokenSuccess
from .token_exchange import exchange_code_for_tokens

logger = logging.getLogger(__name__)

MANUAL_CODE_PROMPT = "Paste the full redirected URL or authorization code from the browser"


async def interactive_login(console: Optional[Console] = None) -> TokenSuccess:
    """
    Run the browser-based OAuth consent flow.

    Opens the authorization URL, waits for the local redirect listener to
    capture the code and falls back to asking the user to paste it.

    Returns:
        Raw tokens from the code exchange

    Raises:
        LoginFailure: If no code is obtained or the exchange fails
    """
    console = console or Console(stderr=True)
    flow = create_authorization_flow()

    server = None
    try:
        server = await start_callback_server(flow.state)
    except OSError as e:
        logger.warning(f"Could not start OAuth callback server: {e}")

    console.print("[bold cyan]Sign in with your ChatGPT Plus/Pro account to continue.[/bold cyan]")
    console.print("Opening browser for OAuth login...")
    console.print(f"If the browser does not open automatically, visit:\n[link={flow.url}]{flow.url}[/link]\n")
    webbrowser.open(flow.url)

    code = None
    if server is not None:
        try:
            code = await server.wait_for_code()
        finally:
            await server.stop()

    if not code:
        try:
            manual_input = await asyncio.to_thread(Prompt.ask, MANUAL_CODE_PROMPT, console=console)
        except EOFError:
            # stdin closed (service manager, detached container)
            raise LoginFailure("Authorization code not provided") from None
        code, state = parse_authorization_input(manual_input)
        if state and state != flow.state:
            raise LoginFailure("Authorization state mismatch")
        if not code:
            raise LoginFailure("Authorization code not provided")

    tokens = await exchange_code_for_tokens(code, flow.pkce.verifier)
    if tokens is None:
        raise LoginFailure("Failed to exchange authorization code for tokens")

    console.print("[green]✓ Authenticated with ChatGPT[/green]")
    return tokens
