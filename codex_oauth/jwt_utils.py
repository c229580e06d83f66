"""
Unverified JWT payload decoding.

The proxy never validates tokens itself; it only needs the ChatGPT account id
that the auth server embeds in the access token.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional

from .constants import JWT_CLAIM_PATH, CHATGPT_ACCOUNT_ID_CLAIM

logger = logging.getLogger(__name__)


def decode_jwt(token: str) -> Optional[Dict[str, Any]]:
    """Payload of a compact JWT as a dict, or None if it is not one"""
    if not isinstance(token, str) or token.count(".") != 2:
        logger.debug("Value is not a compact JWT")
        return None

    segment = token.split(".")[1]
    # base64url segments come without padding
    segment += "=" * (-len(segment) % 4)

    try:
        payload = json.loads(base64.urlsafe_b64decode(segment))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Undecodable JWT payload: {e}")
        return None

    return payload if isinstance(payload, dict) else None


def extract_chatgpt_account_id(access_token: str) -> Optional[str]:
    """
    Read ``payload[JWT_CLAIM_PATH][CHATGPT_ACCOUNT_ID_CLAIM]``.

    Returns:
        Non-empty account id, or None when the token or claim is missing
    """
    auth_claims = (decode_jwt(access_token) or {}).get(JWT_CLAIM_PATH)
    if not isinstance(auth_claims, dict):
        logger.debug(f"Access token has no {JWT_CLAIM_PATH} claim")
        return None

    account_id = auth_claims.get(CHATGPT_ACCOUNT_ID_CLAIM)
    if isinstance(account_id, str) and account_id:
        return account_id

    logger.debug(f"Access token has no {CHATGPT_ACCOUNT_ID_CLAIM}")
    return None
