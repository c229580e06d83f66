"""Data models for ChatGPT OAuth credentials"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import EXPIRY_BUFFER_MS


def current_time_ms() -> int:
    """Current wall-clock time as epoch milliseconds"""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class TokenSuccess:
    """Raw token triple returned by a successful code exchange or refresh

    Attributes:
        access: Bearer token for API authentication (JWT)
        refresh: Token for refreshing expired access tokens
        expires: Access token expiry as epoch milliseconds
    """
    access: str
    refresh: str
    expires: int


class Credentials(BaseModel):
    """Credential record owned by the auth state machine and mirrored to disk

    Serializes to ``{access, refresh, expires, accountId}``. Instances are
    immutable; a refresh produces a new record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access: str
    refresh: str
    expires: int
    account_id: str = Field(alias="accountId")

    @classmethod
    def from_tokens(cls, tokens: TokenSuccess, account_id: str) -> "Credentials":
        return cls(
            access=tokens.access,
            refresh=tokens.refresh,
            expires=tokens.expires,
            account_id=account_id,
        )

    def is_valid(self, now_ms: Optional[int] = None) -> bool:
        """True while more than the expiry buffer remains before ``expires``"""
        now = current_time_ms() if now_ms is None else now_ms
        return self.expires - now > EXPIRY_BUFFER_MS

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def has_valid_access(credentials: Optional[Credentials], now_ms: Optional[int] = None) -> bool:
    """Validity check that also accepts a missing record"""
    if credentials is None:
        return False
    return credentials.is_valid(now_ms)
