"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every error body has the
shape {"error": <code>, "message": ..., "details"?: ...}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from firmspace.core.config import get_settings
from firmspace.domain.exceptions import FirmspaceException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "invalid-input": 400,
    "unauthenticated": 401,
    "forbidden": 403,
    "not-found": 404,
    "conflict": 409,
    "unknown": 500,
}

# Older clients only understand this single code for every rejected request.
LEGACY_ERROR_CODE = "missing-params"
_LEGACY_COLLAPSED = frozenset({"invalid-input", "forbidden", "not-found", "conflict"})


def wire_error_code(error_code: str) -> str:
    """Return the error code sent to clients (collapsed when LEGACY_ERROR_CODES is on)."""
    if get_settings().legacy_error_codes and error_code in _LEGACY_COLLAPSED:
        return LEGACY_ERROR_CODE
    return error_code


def _firmspace_exception_handler(
    request: Request, exc: FirmspaceException
) -> JSONResponse:
    """Return JSON from FirmspaceException.to_dict() with the mapped status code."""
    content = exc.to_dict()
    content["error"] = wire_error_code(exc.error_code)
    return JSONResponse(
        status_code=_ERROR_CODE_STATUS.get(exc.error_code, 400),
        content=content,
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 for request bodies or params of the wrong type."""
    return JSONResponse(
        status_code=422,
        content={
            "error": wire_error_code("invalid-input"),
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # Pydantic may put the offending exception object in ctx.
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (404 route, 405 method, ...)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http-error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 unknown; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Unknown error"
    return JSONResponse(
        status_code=500,
        content={"error": "unknown", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: FirmspaceException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(FirmspaceException, _firmspace_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
