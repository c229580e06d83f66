"""
Write a converted upstream response back to the caller.

Streamed bodies are moved through a bounded queue: a producer task drains the
upstream iterator, the response iterator consumes from the queue. Errors on
the producer side are re-raised on the consumer side so the server aborts the
client connection instead of leaving it hanging.
"""
import asyncio
import logging
from typing import AsyncIterator

from fastapi.responses import Response, StreamingResponse

from .streaming_handler import ClientResponse

logger = logging.getLogger(__name__)

CHANNEL_SIZE = 16

_END = object()


class _ChannelError:
    __slots__ = ("error",)

    def __init__(self, error: BaseException):
        self.error = error


async def relay_through_channel(
    source: AsyncIterator[bytes],
    request_id: str,
    maxsize: int = CHANNEL_SIZE,
) -> AsyncIterator[bytes]:
    """
    Re-yield ``source`` through a bounded producer/consumer channel.

    Raises:
        Whatever the source raised, after logging it
    """
    channel: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

    async def produce():
        try:
            async for chunk in source:
                await channel.put(chunk)
        except Exception as e:
            await channel.put(_ChannelError(e))
        else:
            await channel.put(_END)
        finally:
            aclose = getattr(source, "aclose", None)
            if aclose is not None:
                await aclose()

    producer = asyncio.create_task(produce())
    try:
        while True:
            item = await channel.get()
            if item is _END:
                break
            if isinstance(item, _ChannelError):
                logger.error(f"[{request_id}] Stream relay aborted: {item.error}")
                raise item.error
            yield item
    finally:
        # Consumer gone (finished, failed or client disconnected)
        if not producer.done():
            producer.cancel()
            try:
                await producer
            except asyncio.CancelledError:
                pass


def forward_response(client_response: ClientResponse, request_id: str) -> Response:
    """
    Turn a ClientResponse into the FastAPI response object.

    Status and the converter-sanitized headers are copied as-is.
    """
    if client_response.is_streaming:
        logger.debug(f"[{request_id}] Streaming {client_response.status_code} to client")
        return StreamingResponse(
            relay_through_channel(client_response.stream, request_id),
            status_code=client_response.status_code,
            headers=client_response.headers,
        )

    body = client_response.body or b""
    logger.debug(f"[{request_id}] Writing {len(body)} bytes with status {client_response.status_code}")
    return Response(
        content=body,
        status_code=client_response.status_code,
        headers=client_response.headers,
    )
