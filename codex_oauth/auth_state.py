"""OAuth credential lifecycle with single-flight refresh

One ``AuthStateMachine`` belongs to one proxy instance. It owns the current
credentials, mirrors them to a ``CredentialStore`` and guarantees that
concurrent requests needing a refresh share a single token-endpoint call.

States::

    UNAUTHENTICATED --cache hit, valid--> READY
    UNAUTHENTICATED --cache hit, expired--> REFRESHING --> READY | LOGIN_REQUIRED
    UNAUTHENTICATED --no cache--> LOGIN_REQUIRED --> READY | FAILED
    READY --expiry reached--> REFRESHING --> READY | LOGIN_REQUIRED

FAILED is reported to the caller; the next request starts over.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from .errors import AuthError, ClaimExtractionFailure, RefreshFailure
from .jwt_utils import extract_chatgpt_account_id
from .login import interactive_login
from .models import Credentials, TokenSuccess, current_time_ms, has_valid_access
from .storage import CredentialStore
from .token_exchange import refresh_access_token

logger = logging.getLogger(__name__)

Refresher = Callable[[str], Awaitable[Optional[TokenSuccess]]]
LoginFlow = Callable[[], Awaitable[TokenSuccess]]
Clock = Callable[[], int]


class AuthStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    READY = "ready"
    REFRESHING = "refreshing"
    LOGIN_REQUIRED = "login_required"
    FAILED = "failed"


class AuthStateMachine:
    """Owns the proxy's credentials and keeps them fresh"""

    def __init__(
        self,
        store: CredentialStore,
        refresher: Refresher = refresh_access_token,
        login: LoginFlow = interactive_login,
        clock: Clock = current_time_ms,
    ):
        """
        Args:
            store: Durable mirror of the credential record
            refresher: Exchanges a refresh token for new tokens, None on failure
            login: Interactive login producing fresh tokens
            clock: Epoch-milliseconds clock used for validity checks
        """
        self.store = store
        self._refresher = refresher
        self._login = login
        self._clock = clock

        self.credentials: Optional[Credentials] = None
        self.status = AuthStatus.UNAUTHENTICATED
        self._inflight_refresh: Optional[asyncio.Task] = None
        self._inflight_bootstrap: Optional[asyncio.Task] = None

    @property
    def refresh_in_flight(self) -> bool:
        return self._inflight_refresh is not None

    def is_valid(self, credentials: Optional[Credentials]) -> bool:
        return has_valid_access(credentials, self._clock())

    async def ensure_fresh(self) -> Optional[Credentials]:
        """
        Return usable credentials, refreshing or bootstrapping when needed.

        Returns:
            Valid credentials, or None if none could be obtained
        """
        if self.is_valid(self.credentials):
            return self.credentials

        if self.credentials is None:
            return await self._shared_bootstrap()

        # Check-and-set of the handle happens without an intervening await
        task = self._inflight_refresh
        if task is None:
            task = asyncio.ensure_future(self._run_refresh(self.credentials))
            self._inflight_refresh = task
        failed_refresh_token = await asyncio.shield(task)

        if self.credentials is None:
            return await self._shared_bootstrap(skip_refresh_token=failed_refresh_token)
        return self.credentials

    async def _run_refresh(self, current: Credentials) -> Optional[str]:
        """Shared refresh body; returns the refresh token that failed, if any"""
        self.status = AuthStatus.REFRESHING
        try:
            self.credentials = await self.refresh(current)
            self.status = AuthStatus.READY
            return None
        except (AuthError, OSError) as e:
            logger.error(f"Refresh failed: {e}")
            self.credentials = None
            self.status = AuthStatus.LOGIN_REQUIRED
            return current.refresh
        finally:
            self._inflight_refresh = None

    async def _shared_bootstrap(self, skip_refresh_token: Optional[str] = None) -> Optional[Credentials]:
        task = self._inflight_bootstrap
        if task is None:
            task = asyncio.ensure_future(self._run_bootstrap(skip_refresh_token))
            self._inflight_bootstrap = task
        return await asyncio.shield(task)

    async def _run_bootstrap(self, skip_refresh_token: Optional[str]) -> Optional[Credentials]:
        try:
            return await self.bootstrap(skip_refresh_token=skip_refresh_token)
        except (AuthError, OSError) as e:
            logger.error(f"Unable to obtain credentials: {e}")
            self.credentials = None
            self.status = AuthStatus.FAILED
            return None
        finally:
            self._inflight_bootstrap = None

    async def bootstrap(self, skip_refresh_token: Optional[str] = None) -> Credentials:
        """
        Acquire credentials: valid cache, then expired cache + refresh, then login.

        Args:
            skip_refresh_token: Refresh token already known to be rejected;
                a cached record carrying it goes straight to login

        Raises:
            AuthError: If the interactive login fails
            OSError: If the new record cannot be persisted
        """
        if self.is_valid(self.credentials):
            return self.credentials

        cached = self.store.load()
        if cached is not None and self.is_valid(cached):
            logger.info("Using cached ChatGPT credentials")
            self.credentials = cached
            self.status = AuthStatus.READY
            return cached

        if cached is not None and cached.refresh != skip_refresh_token:
            self.status = AuthStatus.REFRESHING
            try:
                self.credentials = await self.refresh(cached)
                self.status = AuthStatus.READY
                return self.credentials
            except (AuthError, OSError) as e:
                logger.warning(f"Failed to refresh cached credentials: {e}")

        self.status = AuthStatus.LOGIN_REQUIRED
        logger.info("Interactive login required")
        tokens = await self._login()
        self.credentials = self._adopt(tokens)
        self.status = AuthStatus.READY
        return self.credentials

    async def refresh(self, current: Credentials) -> Credentials:
        """
        Exchange the refresh token for a new record and persist it.

        Raises:
            RefreshFailure: If the token endpoint rejects the refresh
            ClaimExtractionFailure: If the new access token has no account id
        """
        logger.info("Refreshing ChatGPT access token...")
        tokens = await self._refresher(current.refresh)
        if tokens is None:
            raise RefreshFailure("Token refresh failed")
        credentials = self._adopt(tokens)
        logger.info("Successfully refreshed ChatGPT access token")
        return credentials

    def _adopt(self, tokens: TokenSuccess) -> Credentials:
        account_id = extract_chatgpt_account_id(tokens.access)
        if not account_id:
            raise ClaimExtractionFailure("Failed to extract ChatGPT account id from token")
        credentials = Credentials.from_tokens(tokens, account_id)
        self.store.save(credentials)
        return credentials
