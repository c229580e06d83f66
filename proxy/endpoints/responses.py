"""
OpenAI Responses API endpoint proxied to the ChatGPT Codex backend.

Every path that normalizes to something starting with ``/responses`` lands
here (``/v1/responses`` included). The body is validated, credentials are
made fresh, the body is rewritten for the backend and the upstream response
is converted back into what the caller asked for.
"""
import asyncio
import json
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Request

from ..context import ProxyContext
from ..error_log import ProxyErrorRecord
from ..errors import AuthRequired, BadRequest, MethodNotAllowed
from ..handlers.request_handler import transform_request_body
from ..handlers.response_forwarder import forward_response
from ..logging_utils import log_request_preview
from ..upstream import build_codex_url
from .health import ALL_METHODS

logger = logging.getLogger(__name__)
router = APIRouter()


def parse_request_body(raw: bytes) -> Dict[str, Any]:
    """
    Decode a caller body into a JSON object.

    Raises:
        BadRequest: If the body is empty, not JSON, or not an object
    """
    if not raw:
        raise BadRequest("Request body is required")
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise BadRequest(f"Invalid JSON body: {e}") from e
    if not isinstance(parsed, dict):
        raise BadRequest("Invalid JSON body: expected a JSON object")
    return parsed


@router.api_route("/responses{suffix:path}", methods=ALL_METHODS)
@router.api_route("/v1/responses{suffix:path}", methods=ALL_METHODS)
async def responses(request: Request):
    """Proxy a Responses API call to the Codex backend"""
    request_id = str(uuid.uuid4())[:8]
    context: ProxyContext = request.app.state.context

    if request.method != "POST":
        raise MethodNotAllowed()

    body = parse_request_body(await request.body())
    log_request_preview(request_id, body, request.url.path, context.preview, dict(request.headers))

    credentials = await context.auth.ensure_fresh()
    if credentials is None:
        logger.warning(f"[{request_id}] No usable credentials (auth status: {context.auth.status.value})")
        raise AuthRequired()

    # Length of the caller body minus metadata, not of the rewritten one
    caller_body_length = len(json.dumps({k: v for k, v in body.items() if k != "metadata"}, separators=(",", ":")))

    result = transform_request_body(body, context.transform_options, request_id)
    logger.info(
        f"[{request_id}] {result.original_model or '?'} -> {result.body['model']} "
        f"(client stream={result.original_stream}, tools={bool(result.body.get('tools'))})"
    )

    upstream = await context.upstream.send(
        request.url.path,
        request.url.query,
        result.body,
        credentials,
        result.correlation_id,
        request_id,
    )
    client_response = await context.converter.convert(upstream, result.original_stream, request_id)

    if not 200 <= client_response.status_code < 300:
        body_text = (client_response.body or b"").decode("utf-8", errors="replace")
        instructions = result.body.get("instructions") or ""
        # Blocking file I/O stays off the event loop
        await asyncio.to_thread(
            context.error_logger.log,
            ProxyErrorRecord(
                trace_id=result.correlation_id,
                url=build_codex_url(request.url.path, request.url.query, context.upstream.base_url),
                status=client_response.status_code,
                status_text=client_response.reason_phrase,
                model=result.body.get("model"),
                has_tools=bool(result.body.get("tools")),
                body_length=caller_body_length,
                response_body=body_text,
                had_instructions=bool(instructions),
                instr_length=len(instructions),
                include=result.body.get("include"),
            ),
        )

    return forward_response(client_response, request_id)
