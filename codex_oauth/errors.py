"""Exceptions raised by the credential lifecycle"""


class AuthError(Exception):
    """Base class for credential acquisition failures"""


class RefreshFailure(AuthError):
    """The token endpoint rejected the refresh token or could not be reached"""


class ClaimExtractionFailure(AuthError):
    """The access token carries no ChatGPT account id claim"""


class LoginFailure(AuthError):
    """The interactive login did not produce usable tokens"""
