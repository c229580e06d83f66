"""
Endpoint handlers for the proxy server.
"""
from .health import router as health_router
from .responses import router as responses_router

__all__ = [
    'health_router',
    'responses_router',
]
