"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(AppException):
    """Raised when a request carries no valid credential."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class TokenRevokedError(AppException):
    """Raised when a session token has been revoked at logout."""

    def __init__(self):
        super().__init__(
            message="Session token has been revoked",
            error_code="ERR_AUTH_002",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class BadRequestError(AppException):
    """Raised when a required field is missing or a value is outside its allowed set."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None, message: str = None):
        if message is None:
            message = f"{resource} not found"
            if resource_id is not None:
                message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ConflictError(AppException):
    """Raised when an operation was already performed on the resource."""

    def __init__(self, message: str, error_code: str = "ERR_CONFLICT_001", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class AlreadyCashedOutError(ConflictError):
    """Raised when a rider cashes out the same parcel twice."""

    def __init__(self, parcel_id: Any):
        super().__init__(
            message="This parcel has already been cashed out",
            error_code="ERR_CASHOUT_001",
            details={"parcel_id": parcel_id}
        )


class NotYetDeliveredError(AppException):
    """Raised when cashout is attempted before the parcel is delivered."""

    def __init__(self, parcel_id: Any, delivery_status: Any = None):
        super().__init__(
            message="Parcel must be delivered before cashout",
            error_code="ERR_CASHOUT_002",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"parcel_id": parcel_id, "delivery_status": delivery_status}
        )


class InternalStoreError(AppException):
    """Raised when the database fails during an operation."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            error_code="ERR_INTERNAL_STORE",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class PaymentProviderError(AppException):
    """Raised when the payment provider rejects or fails a request."""

    def __init__(self, message: str = "Payment provider error"):
        super().__init__(
            message=message,
            error_code="ERR_PAYMENT_002",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class ServiceUnavailableError(AppException):
    """Raised when an external collaborator is short-circuited."""

    def __init__(self, service: str):
        super().__init__(
            message=f"{service} is temporarily unavailable",
            error_code="ERR_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"service": service}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": jsonable_encoder(exc.details)
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request validation errors: missing fields and bad enum values are 400s."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_encoder(exc.errors())
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
