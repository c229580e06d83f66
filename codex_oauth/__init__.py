"""
ChatGPT OAuth credential lifecycle for the Codex backend
"""
from .constants import (
    CLIENT_ID,
    AUTHORIZE_URL,
    TOKEN_URL,
    REDIRECT_URI,
    SCOPE,
    JWT_CLAIM_PATH,
    CHATGPT_ACCOUNT_ID_CLAIM,
    EXPIRY_BUFFER_MS,
)
from .errors import AuthError, RefreshFailure, ClaimExtractionFailure, LoginFailure
from .models import Credentials, TokenSuccess, current_time_ms, has_valid_access
from .storage import CredentialStore
from .jwt_utils import decode_jwt, extract_chatgpt_account_id
from .authorization import (
    PKCEPair,
    AuthorizationFlow,
    generate_pkce,
    create_state,
    create_authorization_flow,
    parse_authorization_input,
)
from .token_exchange import exchange_code_for_tokens, refresh_access_token
from .callback_server import OAuthCallbackServer, start_callback_server
from .login import interactive_login
from .auth_state import AuthStateMachine, AuthStatus

__all__ = [
    # Constants
    "CLIENT_ID",
    "AUTHORIZE_URL",
    "TOKEN_URL",
    "REDIRECT_URI",
    "SCOPE",
    "JWT_CLAIM_PATH",
    "CHATGPT_ACCOUNT_ID_CLAIM",
    "EXPIRY_BUFFER_MS",
    # Errors
    "AuthError",
    "RefreshFailure",
    "ClaimExtractionFailure",
    "LoginFailure",
    # Models and storage
    "Credentials",
    "TokenSuccess",
    "current_time_ms",
    "has_valid_access",
    "CredentialStore",
    # JWT
    "decode_jwt",
    "extract_chatgpt_account_id",
    # Login flow
    "PKCEPair",
    "AuthorizationFlow",
    "generate_pkce",
    "create_state",
    "create_authorization_flow",
    "parse_authorization_input",
    "exchange_code_for_tokens",
    "refresh_access_token",
    "OAuthCallbackServer",
    "start_callback_server",
    "interactive_login",
    # State machine
    "AuthStateMachine",
    "AuthStatus",
]
