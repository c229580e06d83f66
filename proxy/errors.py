"""
Client-facing error taxonomy. Each error renders as ``{"error": message}``.
"""


class ProxyError(Exception):
    """Base class for errors answered directly by the proxy"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(ProxyError):
    status_code = 400
    default_message = "Bad request"


class AuthRequired(ProxyError):
    status_code = 401
    default_message = "Authentication required"


class NotFound(ProxyError):
    status_code = 404
    default_message = "Not found"


class MethodNotAllowed(ProxyError):
    status_code = 405
    default_message = "Method not allowed"


class UpstreamUnavailable(ProxyError):
    status_code = 502
    default_message = "Upstream request failed"


class UpstreamTimeout(ProxyError):
    status_code = 504
    default_message = "Upstream request timed out"
