"""
Application exception hierarchy and global exception handlers.
Every handler renders the same JSON shape: {"error": <message>, "path": <path>, ...extra}.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(AppException):
    status_code = status.HTTP_409_CONFLICT


class ValidationError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST


class NotConfiguredError(AppException):
    """A record is missing configuration needed for the requested operation."""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateTransitionError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST


class AlreadyApprovedError(InvalidStateTransitionError):
    def __init__(self, message: str = "Timesheet is already approved"):
        super().__init__(message)


class CannotApproveRejectedError(InvalidStateTransitionError):
    def __init__(self, message: str = "Cannot approve a rejected timesheet"):
        super().__init__(message)


class AlreadyRejectedError(InvalidStateTransitionError):
    def __init__(self, message: str = "Timesheet is already rejected"):
        super().__init__(message)


class CannotRejectApprovedError(InvalidStateTransitionError):
    def __init__(self, message: str = "Cannot reject an approved timesheet"):
        super().__init__(message)


class ConfigurationError(AppException):
    """Missing credentials or settings for an upstream integration."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamServiceError(AppException):
    """An external API answered with an error or could not be reached."""
    status_code = status.HTTP_502_BAD_GATEWAY


class InvoiceGenerationError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PortalTokenExpiredError(UnauthorizedError):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message, details={"expired": True})


class InvalidPortalTokenError(UnauthorizedError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application exception: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "path": request.url.path,
            **exc.details,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "path": request.url.path,
        },
        headers=getattr(exc, "headers", None),
    )


def _serialize_validation_errors(errors: list) -> list:
    """Convert validation errors to a JSON-serializable {field, message} list."""
    serialized = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        serialized.append(
            {
                "field": ".".join(loc),
                "message": str(error.get("msg", "")),
            }
        )
    return serialized


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "details": serialized_errors,
            "path": request.url.path,
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "path": request.url.path,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
