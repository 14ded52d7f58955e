# app/core/errors.py
"""
Error kinds, the API error type raised by services, and the handlers that
turn errors into the uniform JSON envelope.
"""
import enum
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("uvicorn.error")


class ErrorKind(enum.Enum):
    """Tagged error kinds; the value is the HTTP status code they map to."""
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_ERROR = 500


class ApiError(Exception):
    """
    Error raised by services and dependencies.

    Carries a kind and a human-readable message; the transport layer maps the
    kind to a status code.
    """
    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str = "Something went wrong", errors: list | None = None, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.message = message
        self.errors = errors or []

    @property
    def status_code(self) -> int:
        return self.kind.value

    def to_envelope(self) -> dict:
        return error_envelope(self.status_code, self.message, self.errors)


class BadRequest(ApiError):
    kind = ErrorKind.BAD_REQUEST


class Unauthorized(ApiError):
    kind = ErrorKind.UNAUTHORIZED


class NotFound(ApiError):
    kind = ErrorKind.NOT_FOUND


class Conflict(ApiError):
    kind = ErrorKind.CONFLICT


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL_ERROR


def api_response(status_code: int, data, message: str = "Success") -> dict:
    """Success envelope returned by every route."""
    return {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }


def error_envelope(status_code: int, message: str, errors: list | None = None) -> dict:
    return {
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }


def register_error_handlers(app: FastAPI) -> None:
    """Map every error reaching the transport layer onto the error envelope."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, err: ApiError):
        if err.kind is ErrorKind.INTERNAL_ERROR:
            logger.error("[api] %s %s -> 500: %s", request.method, request.url.path, err.message)
        return JSONResponse(status_code=err.status_code, content=err.to_envelope())

    # Request validation errors are client errors, never 500
    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, err: RequestValidationError):
        details = [
            {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg", "")}
            for e in err.errors()
        ]
        return JSONResponse(status_code=400, content=error_envelope(400, "Invalid request", details))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, err: StarletteHTTPException):
        return JSONResponse(
            status_code=err.status_code,
            content=error_envelope(err.status_code, str(err.detail)),
            headers=getattr(err, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, err: Exception):
        logger.exception("[api] unhandled error on %s %s", request.method, request.url.path, exc_info=err)
        return JSONResponse(status_code=500, content=error_envelope(500, "An unexpected error occurred"))
