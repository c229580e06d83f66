"""
Token endpoint calls: authorization-code exchange and refresh.

Both return None on any failure; callers decide how to escalate.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from .constants import TOKEN_URL, CLIENT_ID, REDIRECT_URI
from .models import TokenSuccess, current_time_ms

logger = logging.getLogger(__name__)

TOKEN_REQUEST_TIMEOUT = 30.0


def _parse_token_payload(payload: Dict[str, Any], fallback_refresh: Optional[str] = None) -> Optional[TokenSuccess]:
    """Build a TokenSuccess from a token endpoint JSON payload"""
    access_token = payload.get("access_token")
    refresh_token = payload.get("refresh_token") or fallback_refresh
    expires_in = payload.get("expires_in")

    if not access_token or not refresh_token or not isinstance(expires_in, (int, float)):
        logger.error("Token response missing access_token, refresh_token or expires_in")
        return None

    return TokenSuccess(
        access=access_token,
        refresh=refresh_token,
        expires=current_time_ms() + int(expires_in * 1000),
    )


async def _post_token_request(
    data: Dict[str, str],
    client: Optional[httpx.AsyncClient],
    action: str,
) -> Optional[Dict[str, Any]]:
    """POST a form to the token endpoint and return the decoded JSON body"""
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=TOKEN_REQUEST_TIMEOUT)

    try:
        response = await client.post(
            TOKEN_URL,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        if response.status_code != 200:
            logger.error(f"Token {action} failed with status {response.status_code}: {response.text}")
            return None

        payload = response.json()

    except httpx.RequestError as e:
        logger.error(f"Token {action} request failed: {e}")
        return None
    except ValueError as e:
        logger.error(f"Failed to parse token {action} response: {e}")
        return None
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(payload, dict):
        logger.error(f"Token {action} response is not a JSON object")
        return None
    return payload


async def exchange_code_for_tokens(
    code: str,
    code_verifier: str,
    redirect_uri: str = REDIRECT_URI,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[TokenSuccess]:
    """
    Trade the code captured by the redirect for a token triple.

    Args:
        code: Authorization code
        code_verifier: Verifier matching the challenge sent to the browser
        redirect_uri: Must equal the one used in the authorization URL
        client: HTTP client to reuse, a short-lived one otherwise
    """
    logger.info("Exchanging authorization code for tokens")
    payload = await _post_token_request(
        {
            "grant_type": "authorization_code",
            "client_id": CLIENT_ID,
            "code": code,
            "code_verifier": code_verifier,
            "redirect_uri": redirect_uri,
        },
        client,
        "exchange",
    )
    if payload is None:
        return None
    return _parse_token_payload(payload)


async def refresh_access_token(
    refresh_token: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[TokenSuccess]:
    """New access token for ``refresh_token``, or None if the endpoint refuses"""
    if not refresh_token:
        logger.error("Cannot refresh without a refresh token")
        return None

    payload = await _post_token_request(
        {
            "grant_type": "refresh_token",
            "client_id": CLIENT_ID,
            "refresh_token": refresh_token,
        },
        client,
        "refresh",
    )
    if payload is None:
        return None

    # The endpoint may not rotate the refresh token
    return _parse_token_payload(payload, fallback_refresh=refresh_token)
