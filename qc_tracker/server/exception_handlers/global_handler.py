"""
Global Exception Handlers for the FastAPI Application.

Every error leaves the server in the same envelope the endpoints use
(``success``, ``error``, ``message``):

- request validation failures raised by FastAPI become ``VALIDATION_ERROR`` (400);
- any other unhandled exception is logged with an error ID, request context
  and full traceback, and answered with ``INFRASTRUCTURE_ERROR`` (500).
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qc_tracker.core.keyed import ErrorKind
from qc_tracker.core.logging_config import get_logger
from qc_tracker.server.api.responses import error_response, format_validation_errors

logger = get_logger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render FastAPI's request validation errors in the shared envelope.

    Args:
        request: The HTTP request that failed validation
        exc: The validation error raised by FastAPI

    Returns:
        JSONResponse with status 400 and the flattened error messages
    """
    errors = exc.errors()
    logger.debug(f"Request validation failed for {request.method} {request.url.path}: {errors}")
    return error_response(ErrorKind.VALIDATION_ERROR, format_validation_errors(errors))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    # Generate unique error ID for tracking
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return error_response(
        ErrorKind.INFRASTRUCTURE_ERROR,
        "Internal server error",
        status_code=500,
        error_id=error_id,
        error_type=type(exc).__name__,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
