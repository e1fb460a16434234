# review_portal/core/errors.py
"""
Application error taxonomy and JSON error handlers.

Every failure leaves the API as {"error": "<message>"} with the status code of
its kind. Handlers raise the AppError subclasses below; store, hashing and
signing failures are reported as a generic 500 without internal detail.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tortoise.exceptions import BaseORMException

logger = logging.getLogger("uvicorn.error")

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base exception for errors that map to an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when request input fails validation (message is safe to show)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(AppError):
    """Raised when a resource already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UnauthorizedError(AppError):
    """Raised when a credential is missing or does not match."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """Raised when a presented token is invalid, expired or revoked."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFoundError(AppError):
    """Raised for unknown API routes."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(AppError):
    """Raised for store, hashing or signing failures."""


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a short field-level message."""
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    # loc looks like ("body", "rating") or ("query", "page")
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "is invalid")
    return f"{field}: {msg}" if field else msg


def register_error_handlers(app: FastAPI) -> None:
    """Register JSON error handlers for the error taxonomy."""

    @app.exception_handler(AppError)
    async def _handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("[error] %s %s -> %s", request.method, request.url.path, exc.message)
            return _error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _error_response(exc.status_code, message)

    @app.exception_handler(BaseORMException)
    async def _handle_store_error(request: Request, exc: BaseORMException):
        logger.exception("[error] store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        logger.exception("[error] unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
