from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import parse_qs

import httpx

from codex_oauth import CLIENT_ID, TOKEN_URL, exchange_code_for_tokens, parse_authorization_input, refresh_access_token


def _client(handler: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_refresh_posts_form_and_parses_tokens(monkeypatch: Any) -> None:
    seen: dict[str, Any] = {}
    monkeypatch.setattr("codex_oauth.token_exchange.current_time_ms", lambda: 1_000)

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"access_token": "a2", "refresh_token": "r2", "expires_in": 3600})

    async def run() -> Any:
        async with _client(handler) as client:
            return await refresh_access_token("r1", client=client)

    tokens = asyncio.run(run())

    assert seen["url"] == TOKEN_URL
    assert seen["form"]["grant_type"] == ["refresh_token"]
    assert seen["form"]["client_id"] == [CLIENT_ID]
    assert seen["form"]["refresh_token"] == ["r1"]
    assert (tokens.access, tokens.refresh, tokens.expires) == ("a2", "r2", 1_000 + 3_600_000)


def test_refresh_keeps_old_refresh_token_when_not_rotated() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"access_token": "a2", "expires_in": 10})

    async def run() -> Any:
        async with _client(handler) as client:
            return await refresh_access_token("r1", client=client)

    assert asyncio.run(run()).refresh == "r1"


def test_refresh_failure_status_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "invalid_grant"})

    async def run() -> Any:
        async with _client(handler) as client:
            return await refresh_access_token("r1", client=client)

    assert asyncio.run(run()) is None


def test_refresh_transport_error_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async def run() -> Any:
        async with _client(handler) as client:
            return await refresh_access_token("r1", client=client)

    assert asyncio.run(run()) is None


def test_code_exchange_sends_pkce_verifier() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"access_token": "a", "refresh_token": "r", "expires_in": 60})

    async def run() -> Any:
        async with _client(handler) as client:
            return await exchange_code_for_tokens("code-1", "verifier-1", client=client)

    assert asyncio.run(run()).access == "a"
    assert seen["form"]["grant_type"] == ["authorization_code"]
    assert seen["form"]["code_verifier"] == ["verifier-1"]


def test_parse_authorization_input_variants() -> None:
    assert parse_authorization_input("http://localhost:1455/auth/callback?code=c1&state=s1") == ("c1", "s1")
    assert parse_authorization_input("c2#s2") == ("c2", "s2")
    assert parse_authorization_input("code=c3&state=s3") == ("c3", "s3")
    assert parse_authorization_input("c4") == ("c4", None)
    assert parse_authorization_input("  ") == (None, None)
