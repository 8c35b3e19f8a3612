"""Error taxonomy shared by the HTTP handlers."""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(Exception):
    """Base class for errors that end a request with a JSON error body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Raised when a request body is missing a field or is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ApiError):
    """Raised when the shared-secret bearer credential is missing or wrong."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class StorageError(ApiError):
    """Raised when the event store cannot complete a statement.

    The message is what the caller sees, so it never carries driver details.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
