"""
Data types for ledger operations.

Dataclasses used to pass validated input into the service layer and to
return computed results out of it.

Types:
    CreateAccountParams / AccountUpdate: Account creation and edits
    EntryParams / EntryUpdate: Ledger entry creation and edits
    TransactionParams / TransactionUpdate: Transaction creation and edits
    BalanceCheck: Stored vs recomputed balance for one account
    DeletionSummary: What an account cascade delete removed
    DashboardSummary: Aggregates for one account

Usage:
    from ledger.types import EntryParams

    params = EntryParams(
        entry_type="debit",
        amount="100.00",
        description="Opening stock on credit",
        category="sales",
    )
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .exceptions import LedgerValidationError
from .models import (
    AccountStatus,
    AccountType,
    AdjustmentDirection,
    EntryCategory,
    EntryPaymentMethod,
    EntryType,
    TransactionPaymentMethod,
    TransactionType,
)

CENT = Decimal("0.01")


def to_amount(value: Any, field_name: str = "amount") -> Decimal:
    """
    Coerce a user-supplied amount to a positive two-place Decimal.

    Raises:
        LedgerValidationError: If the value is missing, not numeric, or not positive
    """
    if value is None or value == "":
        raise LedgerValidationError(
            f"{field_name} is required", details={"field": field_name}
        )
    try:
        amount = Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError):
        raise LedgerValidationError(
            f"{field_name} must be a number",
            details={"field": field_name, "value": str(value)},
        )
    if not amount.is_finite() or amount <= 0:
        raise LedgerValidationError(
            f"{field_name} must be positive",
            details={"field": field_name, "value": str(value)},
        )
    return amount


def require_choice(value: Any, choices: type, field_name: str) -> str:
    """Validate that value is one of a TextChoices enum's values."""
    if value not in choices.values:
        raise LedgerValidationError(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name, "allowed": list(choices.values)},
        )
    return value


def require_text(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise LedgerValidationError(
            f"{field_name} is required", details={"field": field_name}
        )
    return str(value)


def _changes(update: Any) -> dict[str, Any]:
    """Fields of an update dataclass that were explicitly provided."""
    return {
        f.name: getattr(update, f.name)
        for f in fields(update)
        if getattr(update, f.name) is not None
    }


# =============================================================================
# Accounts
# =============================================================================


@dataclass
class CreateAccountParams:
    """
    Parameters for creating a ledger account.

    ledger_id is normally generated; pass one only when importing accounts
    that already carry an identifier.
    """

    name: str
    account_type: str
    contact_phone: str = ""
    contact_email: str = ""
    contact_address: str = ""
    upi_id: str = ""
    status: str = AccountStatus.ACTIVE
    ledger_id: str | None = None

    def __post_init__(self) -> None:
        self.name = require_text(self.name, "name")
        require_choice(self.account_type, AccountType, "account_type")
        require_choice(self.status, AccountStatus, "status")


@dataclass
class AccountUpdate:
    """
    Editable account fields. None means "leave unchanged".

    Balance, type and ledger_id are deliberately absent: the balance only
    moves through entries and transactions.
    """

    name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    contact_address: str | None = None
    upi_id: str | None = None
    status: str | None = None

    def __post_init__(self) -> None:
        if self.name is not None:
            self.name = require_text(self.name, "name")
        if self.status is not None:
            require_choice(self.status, AccountStatus, "status")

    def changes(self) -> dict[str, Any]:
        return _changes(self)


# =============================================================================
# Entries
# =============================================================================


@dataclass
class EntryParams:
    """
    Parameters for recording a ledger entry.

    Required Attributes:
        entry_type: debit or credit
        amount: Positive amount (str, int or Decimal)
        description: Free text
        category: sales, purchase, expense, income, loan or investment

    Optional Attributes:
        payment_method: cash, bank_transfer, upi, credit_card, cheque or other
        date: Business date (defaults to now)
        notes: Free text
        transaction_id: Explicit identifier; generated when omitted
    """

    entry_type: str
    amount: Decimal
    description: str
    category: str
    payment_method: str = ""
    date: datetime | None = None
    notes: str = ""
    transaction_id: str | None = None

    def __post_init__(self) -> None:
        require_choice(self.entry_type, EntryType, "entry_type")
        self.amount = to_amount(self.amount)
        self.description = require_text(self.description, "description")
        require_choice(self.category, EntryCategory, "category")
        if self.payment_method:
            require_choice(self.payment_method, EntryPaymentMethod, "payment_method")


@dataclass
class EntryUpdate:
    """Editable entry fields. None means "leave unchanged"."""

    entry_type: str | None = None
    amount: Decimal | None = None
    description: str | None = None
    category: str | None = None
    payment_method: str | None = None
    date: datetime | None = None
    notes: str | None = None
    transaction_id: str | None = None

    def __post_init__(self) -> None:
        if self.entry_type is not None:
            require_choice(self.entry_type, EntryType, "entry_type")
        if self.amount is not None:
            self.amount = to_amount(self.amount)
        if self.description is not None:
            self.description = require_text(self.description, "description")
        if self.category is not None:
            require_choice(self.category, EntryCategory, "category")
        if self.payment_method:
            require_choice(self.payment_method, EntryPaymentMethod, "payment_method")
        if self.transaction_id is not None:
            self.transaction_id = require_text(self.transaction_id, "transaction_id")

    def changes(self) -> dict[str, Any]:
        return _changes(self)


# =============================================================================
# Transactions
# =============================================================================


@dataclass
class TransactionParams:
    """
    Parameters for recording a payment transaction.

    Required Attributes:
        transaction_type: payment_received, payment_made or adjustment
        amount: Positive amount
        payment_method: cash, upi or online

    Optional Attributes:
        adjustment_direction: increase or decrease (required for adjustments)
        description: Free text
        date: Business date (defaults to now)
        transaction_id: Explicit identifier; generated when omitted
        gateway_order_id: Existing gateway order; skips order creation
        gateway_payment_id: Gateway payment reference, when already known
    """

    transaction_type: str
    amount: Decimal
    payment_method: str
    adjustment_direction: str = ""
    description: str = ""
    date: datetime | None = None
    transaction_id: str | None = None
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None

    def __post_init__(self) -> None:
        require_choice(self.transaction_type, TransactionType, "transaction_type")
        self.amount = to_amount(self.amount)
        require_choice(self.payment_method, TransactionPaymentMethod, "payment_method")
        self.adjustment_direction = validate_adjustment_direction(
            self.transaction_type, self.adjustment_direction
        )

    @property
    def needs_gateway_order(self) -> bool:
        """Online payments without a gateway order get one created first."""
        return (
            self.payment_method == TransactionPaymentMethod.ONLINE
            and not self.gateway_order_id
        )


@dataclass
class TransactionUpdate:
    """Editable transaction fields. None means "leave unchanged"."""

    transaction_type: str | None = None
    amount: Decimal | None = None
    payment_method: str | None = None
    adjustment_direction: str | None = None
    description: str | None = None
    date: datetime | None = None
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None

    def __post_init__(self) -> None:
        if self.transaction_type is not None:
            require_choice(self.transaction_type, TransactionType, "transaction_type")
        if self.amount is not None:
            self.amount = to_amount(self.amount)
        if self.payment_method is not None:
            require_choice(
                self.payment_method, TransactionPaymentMethod, "payment_method"
            )

    def changes(self) -> dict[str, Any]:
        return _changes(self)


def validate_adjustment_direction(transaction_type: str, direction: str | None) -> str:
    """
    Check the adjustment direction against the transaction type.

    Returns:
        The direction for adjustments, "" for every other type

    Raises:
        LedgerValidationError: Adjustment without a valid direction
    """
    if transaction_type != TransactionType.ADJUSTMENT:
        return ""
    if direction not in AdjustmentDirection.values:
        raise LedgerValidationError(
            "Adjustment transactions require adjustment_direction",
            details={
                "field": "adjustment_direction",
                "allowed": list(AdjustmentDirection.values),
            },
        )
    return direction


# =============================================================================
# Results
# =============================================================================


@dataclass
class BalanceCheck:
    """
    Result of comparing an account's stored balance with its recomputed one.

    Attributes:
        account_id: Account primary key
        stored: Balance stored on the account before any repair
        computed: Sum of signed amounts of live entries and transactions
        repaired: Whether the stored balance was overwritten with computed
    """

    account_id: uuid.UUID
    stored: Decimal
    computed: Decimal
    repaired: bool = False

    @property
    def drift(self) -> Decimal:
        return self.stored - self.computed

    @property
    def is_balanced(self) -> bool:
        return self.drift == 0


@dataclass
class DeletionSummary:
    """Counts of rows removed by an account cascade delete."""

    account_id: uuid.UUID
    ledger_id: str
    entries_deleted: int
    transactions_deleted: int


@dataclass
class DashboardSummary:
    """
    Aggregate figures for one account.

    recent_entries / recent_transactions hold model instances, newest first.
    """

    account: Any
    balance: Decimal
    total_debits: Decimal
    total_credits: Decimal
    total_payments_received: Decimal
    total_payments_made: Decimal
    entry_count: int
    transaction_count: int
    recent_entries: list[Any] = field(default_factory=list)
    recent_transactions: list[Any] = field(default_factory=list)
