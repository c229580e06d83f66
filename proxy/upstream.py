"""
Upstream client for the ChatGPT Codex backend.

Builds the backend URL and headers and issues the POST. The response is
returned unread so the caller decides whether to stream or consolidate it.
"""
import json
import logging
from typing import Any, Dict, Optional

import httpx

from codex_oauth import Credentials
from settings import CODEX_BASE_URL
from .errors import UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)

CODEX_NAMESPACE = "/codex/"
OPENAI_BETA = "responses=experimental"
ORIGINATOR = "codex_cli_rs"


def normalize_path(pathname: str) -> str:
    """
    Strip the OpenAI version prefix from a request path.

    Examples:
        >>> normalize_path("/v1/responses")
        '/responses'
        >>> normalize_path("/v1")
        '/'
        >>> normalize_path("/other")
        '/other'
    """
    if not pathname.startswith("/"):
        return f"/{pathname}"
    if pathname.startswith("/v1/"):
        return pathname[3:]
    if pathname == "/v1":
        return "/"
    return pathname


def rewrite_url_for_codex(url: str) -> str:
    """Move a Responses API URL onto the backend's codex route"""
    return url.replace("/responses", "/codex/responses", 1)


def build_codex_url(pathname: str, query: str = "", base_url: str = CODEX_BASE_URL) -> str:
    """
    Target URL for a proxied request path.

    Paths already inside the codex namespace are kept, anything else is
    rewritten onto ``/codex/responses``.
    """
    normalized = normalize_path(pathname)
    target = f"{base_url.rstrip('/')}{normalized}"
    if query:
        target = f"{target}?{query}"
    if CODEX_NAMESPACE in normalized:
        return target
    return rewrite_url_for_codex(target)


def create_codex_headers(
    credentials: Credentials,
    correlation_id: str,
    prompt_cache_key: Optional[str] = None,
) -> Dict[str, str]:
    """
    Headers required by the Codex backend.

    Args:
        credentials: Fresh OAuth credentials
        correlation_id: Session id for this call
        prompt_cache_key: Caller's stable cache key, if it sent one

    Returns:
        Header dictionary
    """
    headers = {
        "Authorization": f"Bearer {credentials.access}",
        "chatgpt-account-id": credentials.account_id,
        "OpenAI-Beta": OPENAI_BETA,
        "originator": ORIGINATOR,
        "content-type": "application/json",
        "accept": "text/event-stream",
        "session_id": correlation_id,
    }
    if prompt_cache_key:
        headers["conversation_id"] = prompt_cache_key
    return headers


class UpstreamClient:
    """Sends transformed requests to the Codex backend"""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = CODEX_BASE_URL):
        self.http_client = http_client
        self.base_url = base_url

    async def send(
        self,
        pathname: str,
        query: str,
        body: Dict[str, Any],
        credentials: Credentials,
        correlation_id: str,
        request_id: str,
    ) -> httpx.Response:
        """
        POST the body and return the raw streaming response.

        Raises:
            UpstreamTimeout: If connecting or reading timed out
            UpstreamUnavailable: On any other transport failure
        """
        url = build_codex_url(pathname, query, self.base_url)
        prompt_cache_key = body.get("prompt_cache_key")
        headers = create_codex_headers(
            credentials,
            correlation_id,
            prompt_cache_key if isinstance(prompt_cache_key, str) else None,
        )

        logger.debug(f"[{request_id}] POST {url} model={body.get('model')} session={correlation_id}")

        request = self.http_client.build_request(
            "POST",
            url,
            content=json.dumps(body).encode("utf-8"),
            headers=headers,
        )
        try:
            return await self.http_client.send(request, stream=True)
        except httpx.TimeoutException as e:
            logger.error(f"[{request_id}] Upstream request timed out: {e}")
            raise UpstreamTimeout() from e
        except httpx.RequestError as e:
            logger.error(f"[{request_id}] Upstream request failed: {e}")
            raise UpstreamUnavailable(f"Upstream request failed: {e}") from e


def build_http_client(connect_timeout: float, read_timeout: float) -> httpx.AsyncClient:
    """
    Shared HTTP client for upstream calls.

    A non-positive read timeout disables the read/write/pool timeouts.
    """
    other = read_timeout if read_timeout and read_timeout > 0 else None
    timeout = httpx.Timeout(other, connect=connect_timeout if connect_timeout > 0 else None)
    return httpx.AsyncClient(timeout=timeout)
