"""
Base exception classes for application-wide error handling.

Domain apps raise these (or subclasses) from the service layer. The DRF
exception handler in core.exception_handler renders them as JSON with an
HTTP status derived from the exception kind.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── NotFoundError - Resource not found (404)
    ├── PermissionDeniedError - Operation not allowed (403)
    ├── ConflictError - State conflicts (409)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import NotFoundError, ValidationError

    raise ValidationError("Amount must be positive", error_code="INVALID_AMOUNT")

    raise NotFoundError(
        f"Account {account_id} not found",
        error_code="ACCOUNT_NOT_FOUND",
        details={"account_id": str(account_id)},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, identifiers, etc.)

    Example:
        try:
            ReconciliationService.delete_entry(entry_id)
        except NotFoundError as e:
            logger.warning("Entry lookup failed", extra={"error_code": e.error_code})
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    Use for missing required fields, invalid enum values, non-positive
    amounts and unique identifier collisions. DRF serializers still handle
    request-shape validation; this covers rules the services enforce.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource does not exist.

    Use for single-resource lookups where existence is expected. List
    queries return empty results instead.
    """

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller may not perform an operation.

    DRF permission classes cover request-level checks; raise this from
    services for rules that depend on the loaded record.
    """

    default_error_code: str = "PERMISSION_DENIED"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Example:
        if account.status == AccountStatus.INACTIVE:
            raise ConflictError(
                "Account is inactive",
                error_code="INACTIVE_ACCOUNT",
                details={"account_id": str(account.id)},
            )
    """

    default_error_code: str = "CONFLICT"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging; clients only see the message
    and error code. Rendered as HTTP 502.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
