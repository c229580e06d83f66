"""
PKCE authorization-code flow for ChatGPT sign-in, using the same client and
parameters as the Codex CLI so the resulting tokens work on the Codex backend.
"""
import base64
import hashlib
import secrets
from typing import NamedTuple, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

from .constants import (
    CLIENT_ID,
    AUTHORIZE_URL,
    REDIRECT_URI,
    SCOPE,
)

# Extra query parameters the Codex CLI sends; the token endpoint expects them
CODEX_CLI_AUTHORIZE_PARAMS = {
    "id_token_add_organizations": "true",
    "codex_cli_simplified_flow": "true",
    "originator": "codex_cli_rs",
}


class PKCEPair(NamedTuple):
    verifier: str
    challenge: str


class AuthorizationFlow(NamedTuple):
    """Everything needed to finish one login attempt"""
    pkce: PKCEPair
    state: str
    url: str


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def generate_pkce() -> PKCEPair:
    """RFC 7636 S256 pair: 43-char random verifier, SHA-256 challenge"""
    verifier = _b64url(secrets.token_bytes(32))
    return PKCEPair(verifier=verifier, challenge=_b64url(hashlib.sha256(verifier.encode("ascii")).digest()))


def create_state() -> str:
    """Random state parameter for CSRF protection"""
    return secrets.token_hex(16)


def create_authorization_flow() -> AuthorizationFlow:
    """Fresh PKCE pair and state plus the browser URL that uses them"""
    pkce = generate_pkce()
    state = create_state()

    query = urlencode({
        "response_type": "code",
        "client_id": CLIENT_ID,
        "redirect_uri": REDIRECT_URI,
        "scope": SCOPE,
        "state": state,
        "code_challenge": pkce.challenge,
        "code_challenge_method": "S256",
        **CODEX_CLI_AUTHORIZE_PARAMS,
    })
    return AuthorizationFlow(pkce=pkce, state=state, url=f"{AUTHORIZE_URL}?{query}")


def parse_authorization_input(value: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Parse what a user pasted after the browser redirect.

    Accepts the full redirect URL, a ``code#state`` pair, a bare query string
    (``code=...&state=...``) or just the code.

    Returns:
        Tuple of (code, state); either may be None
    """
    value = (value or "").strip()
    if not value:
        return None, None

    if "://" in value:
        query = parse_qs(urlparse(value).query)
        return (query.get("code") or [None])[0], (query.get("state") or [None])[0]

    if "#" in value:
        code, _, state = value.partition("#")
        return code or None, state or None

    if "code=" in value:
        query = parse_qs(value)
        return (query.get("code") or [None])[0], (query.get("state") or [None])[0]

    return value, None
