from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator

import httpx
import pytest
from codex_test_utils import completed_stream, sse_body

from proxy.errors import UpstreamUnavailable
from proxy.handlers.response_forwarder import relay_through_channel
from proxy.handlers.streaming_handler import StreamConverter, sanitize_headers


class _ChunkStream(httpx.AsyncByteStream):
    def __init__(self, chunks: list[bytes], fail_after: bool = False) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk
        if self.fail_after:
            raise httpx.ReadError("connection reset")

    async def aclose(self) -> None:
        self.closed = True


def _upstream(status: int, stream: httpx.AsyncByteStream, **headers: str) -> httpx.Response:
    default_headers = {"content-type": "text/event-stream", "content-length": "999", "connection": "keep-alive"}
    default_headers.update(headers)
    return httpx.Response(
        status,
        headers=default_headers,
        stream=stream,
        request=httpx.Request("POST", "https://upstream.test/codex/responses"),
    )


async def _drain(stream: AsyncIterator[bytes]) -> list[bytes]:
    return [chunk async for chunk in stream]


def test_sanitize_headers_drops_framing_and_hop_by_hop() -> None:
    headers = httpx.Headers(
        {"content-length": "1", "Transfer-Encoding": "chunked", "Connection": "close", "x-request-id": "abc"}
    )
    assert sanitize_headers(headers) == {"x-request-id": "abc"}


def test_streaming_caller_gets_chunks_unchanged() -> None:
    source = _ChunkStream([b"event: a\n", b"data: {}\n\n"])

    async def run() -> Any:
        converted = await StreamConverter().convert(_upstream(200, source), True, "req1")
        return converted, await _drain(converted.stream)

    converted, chunks = asyncio.run(run())

    assert converted.is_streaming
    assert chunks == [b"event: a\n", b"data: {}\n\n"]
    assert converted.headers["content-type"] == "text/event-stream"
    assert "content-length" not in converted.headers
    assert source.closed


def test_non_streaming_caller_gets_consolidated_json() -> None:
    body = completed_stream("r1")
    source = _ChunkStream([body[:10], body[10:]])

    async def run() -> Any:
        return await StreamConverter().convert(_upstream(200, source), False, "req1")

    converted = asyncio.run(run())

    assert not converted.is_streaming
    assert converted.headers["content-type"] == "application/json"
    assert json.loads(converted.body)["id"] == "r1"
    assert source.closed


def test_force_json_consolidates_streaming_callers() -> None:
    source = _ChunkStream([completed_stream("r1")])

    async def run() -> Any:
        return await StreamConverter(force_json=True).convert(_upstream(200, source), True, "req1")

    assert json.loads(asyncio.run(run()).body)["id"] == "r1"


def test_consolidated_tool_calls_are_renamed() -> None:
    item = {"type": "function_call", "name": "bash", "arguments": "{}", "call_id": "c1"}
    source = _ChunkStream([sse_body({"type": "response.completed", "response": {"id": "r1", "output": [item]}})])

    async def run() -> Any:
        return await StreamConverter(normalize_tools=True).convert(_upstream(200, source), False, "req1")

    assert json.loads(asyncio.run(run()).body)["output"][0]["name"] == "Bash"


def test_consolidation_failure_relays_raw_text(caplog: Any) -> None:
    raw = b"data: not json\n\n"
    source = _ChunkStream([raw])

    async def run() -> Any:
        return await StreamConverter().convert(_upstream(200, source), False, "req1")

    with caplog.at_level(logging.WARNING):
        converted = asyncio.run(run())

    assert converted.status_code == 200
    assert converted.body == raw
    assert converted.headers["content-type"] == "text/event-stream"
    assert "relaying raw stream" in caplog.text


def test_error_status_is_relayed_without_consolidation() -> None:
    error_body = b'{"detail": "Unsupported model"}'
    source = _ChunkStream([error_body])

    async def run() -> Any:
        return await StreamConverter(force_json=True).convert(
            _upstream(400, source, **{"content-type": "application/json"}), True, "req1"
        )

    converted = asyncio.run(run())

    assert converted.status_code == 400
    assert converted.body == error_body
    assert converted.headers["content-type"] == "application/json"


def test_stream_error_propagates_through_relay(caplog: Any) -> None:
    source = _ChunkStream([b"data: 1\n\n"], fail_after=True)

    async def run() -> list[bytes]:
        converted = await StreamConverter().convert(_upstream(200, source), True, "req1")
        received: list[bytes] = []
        async for chunk in relay_through_channel(converted.stream, "req1"):
            received.append(chunk)
        return received

    with caplog.at_level(logging.ERROR), pytest.raises(UpstreamUnavailable):
        asyncio.run(run())

    assert source.closed
    assert "Stream relay aborted" in caplog.text


def test_relay_preserves_order_with_small_channel() -> None:
    async def numbers() -> AsyncIterator[bytes]:
        for i in range(50):
            yield str(i).encode()

    async def run() -> list[bytes]:
        return await _drain(relay_through_channel(numbers(), "req1", maxsize=2))

    assert asyncio.run(run()) == [str(i).encode() for i in range(50)]


def test_relay_stops_producer_when_consumer_goes_away() -> None:
    produced: list[int] = []

    async def endless() -> AsyncIterator[bytes]:
        i = 0
        while True:
            produced.append(i)
            yield b"x"
            i += 1

    async def run() -> None:
        relay = relay_through_channel(endless(), "req1", maxsize=1)
        await relay.__anext__()
        await relay.aclose()
        count = len(produced)
        await asyncio.sleep(0.01)
        assert len(produced) == count

    asyncio.run(run())
