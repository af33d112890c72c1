"""Error Handlers — global exception handlers for the ExamHub API.

Invariants:
    - ExamHubError → Failure envelope with the error's own status
    - RequestValidationError → 400 envelope with field-level details
    - Starlette HTTPException (unknown route, bad method) → envelope, same status
    - Exception (catch-all) → 500 "Something went wrong!"; detail only outside production

Design Decisions:
    - Four-layer handler: domain, validation, framework, catch-all
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from examhub.api.responses import error
from examhub.core.errors import ExamHubError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_examhub_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_examhub_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ExamHubError)
    async def examhub_error_handler(request: Request, exc: ExamHubError):
        """Handle all ExamHub domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"ExamHubError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "method": request.method, "status_code": exc.http_status,
            },
        )
        return error(exc.message, exc.http_status, exc.detail)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path, "method": request.method},
        )
        return error(
            "Validation failed",
            status.HTTP_400_BAD_REQUEST,
            _validation_details(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Framework-raised HTTP errors (404 route, 405 method) in envelope form."""
        return error(str(exc.detail), exc.status_code)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — converts any uncaught failure into a 500 envelope."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return error(
            "Something went wrong!",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc,
        )


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
