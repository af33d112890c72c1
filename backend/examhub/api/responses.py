"""Response Writers — wrap envelope bodies in JSONResponses.

Invariants:
    - success() defaults to 200, error() to 400
    - Error detail reaches the client only outside production; stack traces
      only in development
    - Every envelope carries the security headers
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from examhub.config import get_settings
from examhub.core.envelope import build_failure, build_success

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "same-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self'; style-src 'self'; "
        "img-src 'self' data:; connect-src 'self'; frame-src 'none'; "
        "object-src 'none'"
    ),
}


def success(
    message: str = "Operation successful",
    data: Any = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(build_success(message, data)),
        headers=SECURITY_HEADERS,
    )


def error(
    message: str = "Operation failed",
    status_code: int = status.HTTP_400_BAD_REQUEST,
    error_detail: Any = None,
) -> JSONResponse:
    settings = get_settings()
    body = build_failure(
        message,
        error_detail,
        include_detail=not settings.is_production,
        include_stack=settings.is_development,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=SECURITY_HEADERS,
    )
