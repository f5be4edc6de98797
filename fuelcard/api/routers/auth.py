"""Bearer API key verification for protected endpoints."""

from __future__ import annotations

import secrets

from fastapi import status
from fastapi.responses import JSONResponse

_BEARER_PREFIX = "Bearer "


def api_check_bearer_key(authorization: str | None, expected_api_key: str) -> str | None:
    """Validate an `Authorization` header value against the internal API key.

    Args:
        authorization: Raw header value, or None when absent.
        expected_api_key: Configured internal API key.

    Returns:
        str | None: Rejection message, or None when the key is accepted.
    """

    if not authorization:
        return "Authentication required. Provide Authorization header."
    if not authorization.startswith(_BEARER_PREFIX):
        return "Invalid authorization format. Use: Bearer <api-key>"

    provided_api_key = authorization[len(_BEARER_PREFIX) :]
    if not secrets.compare_digest(provided_api_key.encode("utf-8"), expected_api_key.encode("utf-8")):
        return "Invalid API key"
    return None


def api_unauthorized_response(message: str) -> JSONResponse:
    """Build the 401 error payload for a rejected request."""

    return JSONResponse(
        content={"status": "error", "message": message},
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )
