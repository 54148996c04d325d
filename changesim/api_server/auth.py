"""
API token check for external callers.

Same-origin requests (Referer host == Host, i.e. the bundled frontend) pass
without a token. Otherwise API_TOKEN must be sent as a Bearer token or in
X-API-Key. With no API_TOKEN configured every request is allowed.
"""

from __future__ import annotations

import hmac
from urllib.parse import urlparse

from fastapi import HTTPException, Request

from changesim.config import get_settings
from changesim.logging import get_logger

logger = get_logger(__name__)


class UnauthorizedError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=401,
            detail={"error": "Unauthorized", "message": "Valid API token required"},
            headers={"WWW-Authenticate": "Bearer"},
        )


def is_same_origin_request(request: Request) -> bool:
    referer = request.headers.get("referer")
    host = request.headers.get("host")
    if not referer or not host:
        return False
    try:
        return urlparse(referer).netloc == host
    except ValueError:
        return False


def validate_api_token(request: Request, api_token: str) -> bool:
    auth_header = request.headers.get("authorization") or ""
    if auth_header.startswith("Bearer "):
        return hmac.compare_digest(auth_header[7:], api_token)
    api_key = request.headers.get("x-api-key")
    if api_key:
        return hmac.compare_digest(api_key, api_token)
    return False


def require_api_token(request: Request) -> None:
    """FastAPI dependency: raise 401 unless the caller is allowed."""
    api_token = get_settings().api_token
    if not api_token:
        logger.warning("auth_no_api_token_configured")
        return
    if is_same_origin_request(request):
        return
    if not validate_api_token(request, api_token):
        logger.info("auth_rejected", path=request.url.path)
        raise UnauthorizedError()
