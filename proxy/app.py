"""
FastAPI application initialization and configuration.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .context import ProxyContext, build_context
from .endpoints import health_router, responses_router
from .errors import MethodNotAllowed, NotFound, ProxyError
from .middleware import log_requests_middleware

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def proxy_error_handler(request: Request, exc: ProxyError):
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, NotFound.default_message)
    if exc.status_code == 405:
        return error_response(405, MethodNotAllowed.default_message)
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error handling {request.method} {request.url.path}: {exc}")
    return error_response(500, ProxyError.default_message)


def create_app(context: Optional[ProxyContext] = None) -> FastAPI:
    """
    Build the proxy application around one ProxyContext.

    Args:
        context: Per-instance state; built from settings when omitted
    """
    context = context or build_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context.bootstrap_on_startup:
            credentials = await context.auth.ensure_fresh()
            if credentials is None:
                logger.warning("No ChatGPT credentials yet; requests will answer 401 until login succeeds")
            else:
                logger.info(f"ChatGPT credentials ready (account {credentials.account_id})")
        try:
            yield
        finally:
            await context.aclose()

    app = FastAPI(
        title="Codex OAuth Proxy",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.context = context

    app.middleware("http")(log_requests_middleware)

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(responses_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
