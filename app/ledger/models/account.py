"""
Ledger account model.

A LedgerAccount is a customer, supplier, expense or income party with a
running balance. The balance is denormalized: it is maintained
incrementally by ledger.services.reconciliation and can always be
recomputed from the account's live entries and transactions.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class AccountType(models.TextChoices):
    """
    Kinds of ledger accounts.

    Values:
        CUSTOMER: Party the business sells to
        SUPPLIER: Party the business buys from
        EXPENSE: Expense head (rent, utilities, ...)
        INCOME: Income head (interest, commissions, ...)
    """

    CUSTOMER = "customer", "Customer"
    SUPPLIER = "supplier", "Supplier"
    EXPENSE = "expense", "Expense"
    INCOME = "income", "Income"


class AccountStatus(models.TextChoices):
    """Inactive accounts keep their history but accept no new records."""

    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class LedgerAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    A customer/supplier/expense/income ledger with a running balance.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        ledger_id: Human-readable identifier, LDG-<year>-<3-digit sequence>
        name: Party name
        contact_phone / contact_email / contact_address: Optional contact info
        upi_id: Optional payment handle
        balance: Running total of signed entry and transaction amounts
        account_type: customer, supplier, expense or income
        status: active or inactive
        created_by: User who created the account (reference only)

    Invariant:
        balance == sum of signed_amount over live entries and transactions.
        Only ledger.services writes this field.
    """

    ledger_id = models.CharField(
        max_length=32,
        unique=True,
        help_text="Human-readable identifier (LDG-<year>-<sequence>)",
    )
    name = models.CharField(
        max_length=200,
        help_text="Name of the customer, supplier or ledger head",
    )
    contact_phone = models.CharField(
        max_length=32,
        blank=True,
        help_text="Contact phone number",
    )
    contact_email = models.EmailField(
        blank=True,
        help_text="Contact email address",
    )
    contact_address = models.TextField(
        blank=True,
        help_text="Postal address",
    )
    upi_id = models.CharField(
        max_length=100,
        blank=True,
        help_text="Payment handle (e.g. UPI VPA) for collecting payments",
    )
    balance = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Running balance; positive means the party owes the business",
    )
    account_type = models.CharField(
        max_length=20,
        choices=AccountType.choices,
        db_index=True,
        help_text="Kind of ledger",
    )
    status = models.CharField(
        max_length=20,
        choices=AccountStatus.choices,
        default=AccountStatus.ACTIVE,
        db_index=True,
        help_text="Inactive accounts accept no new entries or transactions",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_accounts",
        help_text="User who created this account",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["account_type", "status"],
                name="ledger_acct_type_status_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.ledger_id} {self.name}"

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE
