# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the client HOW to fix it, not just WHAT failed.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from app.logging_utils import get_request_id

logger = logging.getLogger(__name__)


class ScholarStreamException(Exception):
    """
    Base exception for the ScholarStream API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SCHOLARSTREAM_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authentication / Authorization Exceptions
# =============================================================================

class UnauthenticatedError(ScholarStreamException):
    """Raised when the bearer token is missing, malformed, or expired."""

    def __init__(self, reason: str = "Missing bearer token"):
        super().__init__(
            message=f"Unauthorized access: {reason}",
            code="UNAUTHENTICATED",
            status_code=401,
            suggestion="Request a fresh token from POST /getToken and send it as 'Authorization: Bearer <token>'",
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(ScholarStreamException):
    """Raised when the caller's role or identity does not permit the action."""

    def __init__(self, reason: str = "Forbidden access", details: dict[str, Any] | None = None):
        super().__init__(
            message=reason,
            code="FORBIDDEN",
            status_code=403,
            suggestion="Sign in with an account that has the required role or owns this resource",
            details=details,
        )


# =============================================================================
# Lookup Exceptions
# =============================================================================

class NotFoundError(ScholarStreamException):
    """Raised when a record doesn't exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code=f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} identifier is correct",
            details={"id": identifier},
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, identifier: str):
        super().__init__("User", identifier)


class ScholarshipNotFoundError(NotFoundError):
    def __init__(self, identifier: str):
        super().__init__("Scholarship", identifier)


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, identifier: str):
        super().__init__("Application", identifier)


class ReviewNotFoundError(NotFoundError):
    def __init__(self, identifier: str):
        super().__init__("Review", identifier)


class InvalidIdentifierError(ScholarStreamException):
    """Raised when a path parameter is not a valid ObjectId."""

    def __init__(self, value: str):
        super().__init__(
            message=f"Invalid identifier: {value}",
            code="INVALID_ID",
            status_code=400,
            suggestion="Identifiers are 24-character hexadecimal strings",
            details={"id": value},
        )


# =============================================================================
# Payment / Upstream Exceptions
# =============================================================================

class PaymentNotConfirmedError(ScholarStreamException):
    """Raised when a checkout session has not been paid."""

    def __init__(self, session_id: str, payment_status: str | None):
        super().__init__(
            message=f"Payment not completed for checkout session: {session_id}",
            code="PAYMENT_NOT_CONFIRMED",
            status_code=402,
            suggestion="Complete the payment on the checkout page, then retry confirmation",
            details={"session_id": session_id, "payment_status": payment_status},
        )


class InvalidCheckoutAmountError(ScholarStreamException):
    """Raised when an application has nothing to charge."""

    def __init__(self, scholarship_id: str, amount: float):
        super().__init__(
            message=f"Checkout total must be greater than zero (got {amount})",
            code="INVALID_CHECKOUT_AMOUNT",
            status_code=400,
            suggestion="Check the scholarship's application fee and service charge",
            details={"scholarship_id": scholarship_id, "amount": amount},
        )


class ServiceUnavailableError(ScholarStreamException):
    """Raised when the document store or the payment processor fails."""

    def __init__(self, service: str, error: str):
        super().__init__(
            message=f"{service} is unavailable",
            code="SERVICE_UNAVAILABLE",
            status_code=503,
            suggestion="Try again later or contact support if the issue persists",
            details={"service": service, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def scholarstream_exception_handler(
    request: Request,
    exc: ScholarStreamException
) -> JSONResponse:
    """
    Convert ScholarStreamException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed [%s]: %s",
            request.method, request.url.path, exc.code, exc.details,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def store_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map driver-level MongoDB failures to a 503 without leaking internals."""
    logger.exception("Document store failure on %s %s", request.method, request.url.path)
    error = ServiceUnavailableError("Document store", type(exc).__name__)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def payment_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map Stripe API failures to a 503."""
    logger.exception("Payment processor failure on %s %s", request.method, request.url.path)
    error = ServiceUnavailableError("Payment processor", type(exc).__name__)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log with the request id and answer 500."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
            "request_id": get_request_id(),
        }
    )
