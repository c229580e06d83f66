"""
Convert the Codex backend's event stream into the response the caller asked for.

Streaming callers get the upstream bytes untouched. Everyone else gets the
terminal event's ``response`` object as one JSON document, or the raw stream
text when consolidation is not possible.
"""
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, Optional

import httpx

from codex_compat import ConsolidationError, consolidate_sse, dumps_response, normalize_tool_names
from ..errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

# Recomputed by the server for whatever body is finally written
DROPPED_HEADERS = {
    "content-length",
    "content-encoding",
    "transfer-encoding",
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "upgrade",
}

JSON_CONTENT_TYPE = "application/json"
SSE_CONTENT_TYPE = "text/event-stream"


@dataclass
class ClientResponse:
    """What gets written back to the caller. Exactly one of body/stream is set."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    stream: Optional[AsyncIterator[bytes]] = None
    reason_phrase: str = ""

    @property
    def is_streaming(self) -> bool:
        return self.stream is not None


def sanitize_headers(headers: httpx.Headers) -> Dict[str, str]:
    """Upstream headers minus framing and hop-by-hop entries"""
    return {
        name: value
        for name, value in headers.items()
        if name.lower() not in DROPPED_HEADERS
    }


async def iterate_upstream(upstream: httpx.Response, request_id: str) -> AsyncIterator[bytes]:
    """Yield upstream chunks as they arrive and always close the upstream response"""
    chunk_count = 0
    try:
        async for chunk in upstream.aiter_bytes():
            chunk_count += 1
            yield chunk
    except httpx.HTTPError as e:
        logger.error(f"[{request_id}] Upstream stream failed after {chunk_count} chunks: {e}")
        raise UpstreamUnavailable(f"Upstream stream failed: {e}") from e
    finally:
        await upstream.aclose()
        logger.debug(f"[{request_id}] Upstream stream closed after {chunk_count} chunks")


class StreamConverter:
    """Decides between pass-through and consolidation for each upstream response"""

    def __init__(self, force_json: bool = False, normalize_tools: bool = True):
        self.force_json = force_json
        self.normalize_tools = normalize_tools

    async def _read_body(self, upstream: httpx.Response, request_id: str) -> bytes:
        try:
            return await upstream.aread()
        except httpx.HTTPError as e:
            logger.error(f"[{request_id}] Failed reading upstream body: {e}")
            raise UpstreamUnavailable(f"Upstream stream failed: {e}") from e
        finally:
            await upstream.aclose()

    async def convert(
        self,
        upstream: httpx.Response,
        client_wanted_stream: bool,
        request_id: str = "-",
    ) -> ClientResponse:
        """
        Build the client response for an upstream response.

        Args:
            upstream: Unread streaming response from the backend
            client_wanted_stream: The caller's original ``stream`` flag
            request_id: Request ID for logging

        Returns:
            ClientResponse with sanitized headers and either a body or a stream
        """
        headers = sanitize_headers(upstream.headers)

        if not upstream.is_success:
            body = await self._read_body(upstream, request_id)
            logger.debug(f"[{request_id}] Relaying upstream {upstream.status_code} ({len(body)} bytes)")
            return ClientResponse(
                status_code=upstream.status_code,
                headers=headers,
                body=body,
                reason_phrase=upstream.reason_phrase,
            )

        if client_wanted_stream and not self.force_json:
            headers.setdefault("content-type", SSE_CONTENT_TYPE)
            return ClientResponse(
                status_code=upstream.status_code,
                headers=headers,
                stream=iterate_upstream(upstream, request_id),
                reason_phrase=upstream.reason_phrase,
            )

        raw = await self._read_body(upstream, request_id)
        text = raw.decode("utf-8", errors="replace")
        try:
            response = consolidate_sse(text, request_id)
        except ConsolidationError as e:
            logger.warning(f"[{request_id}] Consolidation failed, relaying raw stream: {e}")
            headers.setdefault("content-type", SSE_CONTENT_TYPE)
            return ClientResponse(
                status_code=upstream.status_code,
                headers=headers,
                body=raw,
                reason_phrase=upstream.reason_phrase,
            )

        if self.normalize_tools:
            normalize_tool_names(response)

        headers = {name: value for name, value in headers.items() if name.lower() != "content-type"}
        headers["content-type"] = JSON_CONTENT_TYPE
        return ClientResponse(
            status_code=upstream.status_code,
            headers=headers,
            body=dumps_response(response),
            reason_phrase=upstream.reason_phrase,
        )
