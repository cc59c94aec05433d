"""
Application Errors

Every failure a request handler can report is an ``AppError``. The handlers
registered by ``register_exception_handlers`` turn them into the JSON
envelope ``{"success": false, "error": ..., "message": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for errors surfaced to API clients."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when submitted input is malformed."""

    def __init__(self, message: str = "Invalid input.", errors: dict[str, str] | None = None):
        self.errors = errors
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class AuthenticationRequired(AppError):
    """Raised when a request has no valid session."""

    def __init__(self):
        super().__init__(
            message="Authentication required",
            error_code="AUTHENTICATION_REQUIRED",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class InvalidOrExpiredCode(AppError):
    """
    Raised when a one-time code does not verify.

    Wrong, expired and already-used codes all raise this same error.
    """

    def __init__(self):
        super().__init__(
            message="Invalid or expired OTP. Please request a new one.",
            error_code="INVALID_OR_EXPIRED_CODE",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class UpstreamDeliveryFailure(AppError):
    """Raised when the email or image storage provider fails."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="UPSTREAM_DELIVERY_FAILURE",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class PersistenceError(AppError):
    """Raised when the database is unreachable or rejects a write."""

    def __init__(self, message: str = "A database error occurred. Please try again."):
        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def error_envelope(error: AppError) -> dict:
    content = {
        "success": False,
        "error": error.error_code,
        "message": error.message,
    }
    errors = getattr(error, "errors", None)
    if errors:
        content["errors"] = errors
    return content


def register_exception_handlers(app: FastAPI, *, expose_internal_errors: bool = False) -> None:
    """Install the JSON error envelope for all failures."""

    @app.exception_handler(AppError)
    async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors: dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc", ())
            field = str(loc[-1]) if loc else "body"
            errors[field] = err.get("msg", "Invalid value")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_envelope(ValidationError("Invalid request body.", errors=errors)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {
            "success": False,
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again.",
        }
        if expose_internal_errors:
            content["detail"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
