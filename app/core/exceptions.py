"""
Global exception handling for the application.
Every domain failure is an AppError tagged with an ErrorKind; the handlers
below are the single place where kinds become HTTP status codes.
"""

import enum
from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNCLASSIFIED = "unclassified"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNCLASSIFIED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNCLASSIFIED,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.kind = kind
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class InvalidInputException(AppError):
    """Malformed or missing input."""
    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorKind.VALIDATION, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorKind.UNAUTHENTICATED, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorKind.AUTHORIZATION, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorKind.NOT_FOUND, details)


class ConflictException(AppError):
    """Duplicate entity or overlapping reservation."""
    def __init__(self, message: str = "Conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorKind.CONFLICT, details)


class IdentityProviderError(AppError):
    """Failure reported by the identity provider, reflected with its own status."""

    _KIND_BY_STATUS = {
        status.HTTP_400_BAD_REQUEST: ErrorKind.VALIDATION,
        status.HTTP_401_UNAUTHORIZED: ErrorKind.UNAUTHENTICATED,
        status.HTTP_403_FORBIDDEN: ErrorKind.AUTHORIZATION,
        status.HTTP_404_NOT_FOUND: ErrorKind.NOT_FOUND,
        status.HTTP_409_CONFLICT: ErrorKind.CONFLICT,
    }

    def __init__(self, message: str, provider_status: int, details: Optional[Dict[str, Any]] = None):
        self.provider_status = provider_status
        kind = self._KIND_BY_STATUS.get(provider_status, ErrorKind.UNCLASSIFIED)
        super().__init__(message, kind, details)

    @property
    def status_code(self) -> int:
        if 400 <= self.provider_status < 500:
            return self.provider_status
        return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(request: Request, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    body = {
        "error": {
            "code": code,
            "message": message,
            "path": request.url.path,
        }
    }
    if details is not None:
        body["error"]["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map a tagged application error to its HTTP status."""
    if exc.kind is ErrorKind.UNCLASSIFIED:
        logger.error("Unclassified application error", error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request, "InternalServerError", "An unexpected error occurred. Please try again later."
            ),
        )

    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.__class__.__name__, exc.message, exc.details),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are validation failures (400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            request,
            "InvalidInputException",
            "Request body is malformed",
            {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]},
        ),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.error("Unexpected error occurred", path=request.url.path, exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request, "InternalServerError", "An unexpected error occurred. Please try again later."
        ),
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
