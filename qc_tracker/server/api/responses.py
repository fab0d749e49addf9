"""
Uniform JSON envelope shared by every endpoint.

Successful responses carry ``success``, ``data`` and ``message`` (plus
``pagination`` for lists); failures carry ``success``, ``error`` and
``message``. The shape is identical across entities so clients can handle
errors generically.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from qc_tracker.core.keyed import ErrorKind, Pagination


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    pagination: Optional[Pagination] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": True}
    if data is not None:
        content["data"] = data
    if pagination is not None:
        content["pagination"] = pagination.model_dump(by_alias=True)
    content["message"] = message
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(
    error: Union[ErrorKind, str],
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    **extra: Any,
) -> JSONResponse:
    code = error.value if isinstance(error, ErrorKind) else error
    content: Dict[str, Any] = {"success": False, "error": code, "message": message, **extra}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def format_validation_errors(errors: Any) -> str:
    """Flatten pydantic error dicts into ``field: message`` pairs."""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def validation_error_response(exc: ValidationError) -> JSONResponse:
    errors = exc.errors(include_url=False, include_context=False)
    return error_response(ErrorKind.VALIDATION_ERROR, format_validation_errors(errors), details=errors)
