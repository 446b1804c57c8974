from __future__ import annotations

import logging
from typing import Any, Dict, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...engine.puzzle import PuzzleError


logger = logging.getLogger(__name__)


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: list[dict[str, str]] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    status_code = http_exc.status_code
    payload = error_envelope(
        code=_status_to_code(status_code),
        message=http_exc.detail if isinstance(http_exc.detail, str) else str(http_exc.detail),
        err_type="client_error" if 400 <= status_code < 500 else "server_error",
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=payload)


async def puzzle_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Malformed puzzles and illegal moves are the caller's fault
    payload = error_envelope(
        code="bad_request",
        message=str(exc),
        err_type="client_error",
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, StarletteHTTPException):
        return await http_exception_handler(request, exc)
    if isinstance(exc, PuzzleError):
        return await puzzle_error_handler(request, exc)
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(
        code="internal_error",
        message="Internal Server Error",
        err_type="server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    errors = []
    rve = cast(RequestValidationError, exc)
    for e in rve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=_request_id(request),
        field_errors=errors or None,
    )
    return JSONResponse(status_code=422, content=payload)


def _status_to_code(status_code: int) -> str:
    codes = {
        status.HTTP_400_BAD_REQUEST: "bad_request",
        status.HTTP_404_NOT_FOUND: "not_found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
        422: "unprocessable_entity",
    }
    if status_code in codes:
        return codes[status_code]
    if 500 <= status_code < 600:
        return "internal_error"
    return "error"
