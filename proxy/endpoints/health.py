"""
Health check endpoint.
"""
from fastapi import APIRouter, Request

from ..errors import NotFound

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/health", methods=ALL_METHODS)
@router.api_route("/v1/health", methods=ALL_METHODS)
async def health_check(request: Request):
    """Liveness only; does not touch credentials"""
    if request.method != "GET":
        raise NotFound()
    return {"ok": True}
