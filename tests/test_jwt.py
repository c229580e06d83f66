from __future__ import annotations

from codex_test_utils import make_jwt

from codex_oauth import decode_jwt, extract_chatgpt_account_id


def test_extract_account_id_from_auth_claim() -> None:
    assert extract_chatgpt_account_id(make_jwt("acct-42")) == "acct-42"


def test_extract_account_id_missing_claim() -> None:
    assert extract_chatgpt_account_id(make_jwt(None)) is None


def test_decode_jwt_rejects_malformed_tokens() -> None:
    assert decode_jwt("not-a-jwt") is None
    assert decode_jwt("a.!!!.c") is None
    assert decode_jwt(None) is None  # type: ignore[arg-type]


def test_decode_jwt_handles_unpadded_payload() -> None:
    payload = decode_jwt(make_jwt("acct-1"))
    assert payload is not None
    assert payload["sub"] == "user"
