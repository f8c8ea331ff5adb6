"""
Error types and FastAPI exception handlers.

Services raise the typed errors below at the point of detection; the
handlers registered by `register_exception_handlers` turn them (and any
other failure) into one JSON envelope:

    {"timestamp": "...", "status": 404, "error": "Not Found", "message": "..."}
"""

import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ConvergeError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ConvergeError):
    status_code = HTTPStatus.NOT_FOUND


class ForbiddenError(ConvergeError):
    status_code = HTTPStatus.FORBIDDEN


class ConflictError(ConvergeError):
    status_code = HTTPStatus.CONFLICT


class InvalidArgumentError(ConvergeError):
    status_code = HTTPStatus.BAD_REQUEST


class InvalidStateError(ConvergeError):
    status_code = HTTPStatus.CONFLICT


def parse_id(raw: str, label: str = "id") -> int:
    """Parse a path id, rejecting blanks and the "undefined"/"null" a browser client may send."""
    value = (raw or "").strip()
    if not value or value.lower() in ("undefined", "null"):
        raise InvalidArgumentError(f"Invalid {label}")
    try:
        return int(value)
    except ValueError:
        raise InvalidArgumentError(f"Invalid {label}")


def error_body(status: int, message: str) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": int(status),
        "error": HTTPStatus(status).phrase,
        "message": message,
    }


async def converge_error_handler(request: Request, exc: ConvergeError) -> JSONResponse:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.__class__.__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("%s %s -> HTTP %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request payload"
    logger.warning("%s %s -> invalid payload: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content=error_body(400, message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(500, "An unexpected error occurred"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConvergeError, converge_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
