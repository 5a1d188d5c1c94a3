"""
Ledger-specific exceptions.

Every ledger exception inherits from one of the core exception kinds so the
DRF exception handler can map it to an HTTP status.

Exception Hierarchy:
    LedgerError (mixin base, never raised directly)
    ├── AccountNotFound (NotFoundError) - Account lookup failures
    ├── EntryNotFound (NotFoundError) - Entry lookup failures
    ├── TransactionNotFound (NotFoundError) - Transaction lookup failures
    ├── LedgerValidationError (ValidationError) - Invalid field values
    │   └── DuplicateIdentifier - Unique identifier collision
    ├── InactiveAccount (ConflictError) - New records on an inactive account
    └── BalanceDriftDetected (ConflictError) - Stored balance != recomputed balance

    GatewayError (ExternalServiceError) - Payment gateway failures
    ├── GatewayUnavailableError - Transient, safe to retry
    └── GatewayRequestError - Permanent (bad request, auth, signature)

Usage:
    from ledger.exceptions import AccountNotFound, DuplicateIdentifier

    raise AccountNotFound(
        f"Account {account_id} not found",
        details={"account_id": str(account_id)},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from decimal import Decimal
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base class for all ledger errors.

    Catch this to handle any ledger failure regardless of kind:

        try:
            ReconciliationService.create_entry(account_id, params)
        except LedgerError as e:
            logger.error(f"Ledger operation failed: {e}")
    """

    default_error_code: str = "LEDGER_ERROR"


class AccountNotFound(LedgerError, NotFoundError):
    """Raised when a ledger account id does not resolve."""

    default_error_code: str = "ACCOUNT_NOT_FOUND"


class EntryNotFound(LedgerError, NotFoundError):
    """Raised when a ledger entry id does not resolve."""

    default_error_code: str = "ENTRY_NOT_FOUND"


class TransactionNotFound(LedgerError, NotFoundError):
    """Raised when a transaction id does not resolve."""

    default_error_code: str = "TRANSACTION_NOT_FOUND"


class LedgerValidationError(LedgerError, ValidationError):
    """
    Raised for invalid ledger input.

    Covers missing required fields, unknown enum values, non-positive
    amounts and a missing adjustment direction.
    """

    default_error_code: str = "LEDGER_VALIDATION_ERROR"


class DuplicateIdentifier(LedgerValidationError):
    """
    Raised when a transaction_id or ledger_id is already taken.

    The unique constraint on the identifier column detects the collision;
    the surrounding database transaction is rolled back, so no balance
    change is applied.

    Attributes:
        field: Name of the colliding field
        value: The identifier that collided
    """

    default_error_code: str = "DUPLICATE_IDENTIFIER"

    def __init__(
        self,
        field: str,
        value: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.field = field
        self.value = value
        full_details = {"field": field, "value": value}
        if details:
            full_details.update(details)
        super().__init__(
            message=f"{field} {value!r} is already in use",
            error_code=error_code,
            details=full_details,
        )


class InactiveAccount(LedgerError, ConflictError):
    """
    Raised when creating an entry or transaction on an inactive account.

    Edits and deletes of existing records are still allowed so mistakes
    can be corrected after an account is disabled.
    """

    default_error_code: str = "INACTIVE_ACCOUNT"


class BalanceDriftDetected(LedgerError, ConflictError):
    """
    Raised when an account's stored balance differs from its recomputed balance.

    Attributes:
        account_id: Primary key of the drifting account
        stored: Balance currently stored on the account
        computed: Balance recomputed from live entries and transactions
    """

    default_error_code: str = "BALANCE_DRIFT_DETECTED"

    def __init__(
        self,
        account_id,
        stored: Decimal,
        computed: Decimal,
        error_code: str | None = None,
    ):
        self.account_id = account_id
        self.stored = stored
        self.computed = computed
        super().__init__(
            message=(
                f"Account {account_id} balance drift: "
                f"stored {stored}, computed {computed}"
            ),
            error_code=error_code,
            details={
                "account_id": str(account_id),
                "stored": str(stored),
                "computed": str(computed),
                "drift": str(stored - computed),
            },
        )


class GatewayError(ExternalServiceError):
    """
    Base for payment gateway failures.

    Attributes:
        gateway_code: Error code reported by the gateway SDK, if any
        is_retryable: Whether the same request may succeed on retry
    """

    default_error_code: str = "GATEWAY_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        gateway_code: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.gateway_code = gateway_code
        full_details = dict(details or {})
        if gateway_code:
            full_details["gateway_code"] = gateway_code
        super().__init__(message, error_code=error_code, details=full_details)


class GatewayUnavailableError(GatewayError):
    """Gateway unreachable, rate limited, or returned a server error."""

    default_error_code: str = "GATEWAY_UNAVAILABLE"
    is_retryable: bool = True


class GatewayRequestError(GatewayError):
    """Gateway rejected the request (bad parameters, auth, signature)."""

    default_error_code: str = "GATEWAY_REQUEST_ERROR"
    is_retryable: bool = False
