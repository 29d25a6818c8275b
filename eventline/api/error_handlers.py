"""Error Handlers — global exception handlers for the Eventline API.

Invariants:
    - EventlineError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details (structural validation layer)
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain/infrastructure (EventlineError), validation (Pydantic),
      catch-all (Exception)
    - Coordinator rejections never reach these handlers: routes render them directly
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from eventline.core.errors import EventlineError, ErrorCategory, ErrorSeverity, build_error_envelope

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_eventline_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_eventline_error_handler(app: FastAPI) -> None:

    @app.exception_handler(EventlineError)
    async def eventline_error_handler(request: Request, exc: EventlineError):
        """Handle all Eventline domain/infrastructure errors."""
        logger.error(
            f"EventlineError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=build_error_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return build_error_envelope(
        "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
        details={
            "fields": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    )
