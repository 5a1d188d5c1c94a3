"""
Ledger entry model: manual debit/credit adjustments against an account.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from .account import LedgerAccount


class EntryType(models.TextChoices):
    """
    Direction of a ledger entry.

    Values:
        DEBIT: Increases the account balance (+amount)
        CREDIT: Decreases the account balance (-amount)
    """

    DEBIT = "debit", "Debit"
    CREDIT = "credit", "Credit"


class EntryCategory(models.TextChoices):
    SALES = "sales", "Sales"
    PURCHASE = "purchase", "Purchase"
    EXPENSE = "expense", "Expense"
    INCOME = "income", "Income"
    LOAN = "loan", "Loan"
    INVESTMENT = "investment", "Investment"


class EntryPaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    BANK_TRANSFER = "bank_transfer", "Bank Transfer"
    UPI = "upi", "UPI"
    CREDIT_CARD = "credit_card", "Credit Card"
    CHEQUE = "cheque", "Cheque"
    OTHER = "other", "Other"


def entry_delta(entry_type: str, amount: Decimal) -> Decimal:
    """Signed balance change for an entry of the given type and amount."""
    if entry_type == EntryType.DEBIT:
        return amount
    if entry_type == EntryType.CREDIT:
        return -amount
    raise ValueError(f"Unknown entry type: {entry_type!r}")


class LedgerEntry(UUIDPrimaryKeyMixin, BaseModel):
    """
    A manual debit or credit recorded against one account.

    Fields:
        account: Owning account (never changes after creation)
        entry_type: debit or credit
        amount: Positive amount
        description: Required free text
        category: sales, purchase, expense, income, loan or investment
        payment_method: Optional method used
        date: Business date of the entry (defaults to now)
        notes: Optional free text
        transaction_id: Unique identifier, TXN-<year>-<6-digit sequence> when generated
        created_by: User who recorded the entry

    Constraints:
        - amount must be positive
        - transaction_id must be unique
    """

    account = models.ForeignKey(
        LedgerAccount,
        on_delete=models.PROTECT,
        related_name="entries",
        help_text="Account this entry belongs to",
    )
    entry_type = models.CharField(
        max_length=10,
        choices=EntryType.choices,
        help_text="debit (+amount) or credit (-amount)",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Positive amount",
    )
    description = models.TextField(
        help_text="What this entry is for",
    )
    category = models.CharField(
        max_length=20,
        choices=EntryCategory.choices,
        help_text="Bookkeeping category",
    )
    payment_method = models.CharField(
        max_length=20,
        choices=EntryPaymentMethod.choices,
        blank=True,
        help_text="How the money moved, if applicable",
    )
    date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Business date of the entry",
    )
    notes = models.TextField(
        blank=True,
        help_text="Free-form notes",
    )
    transaction_id = models.CharField(
        max_length=64,
        unique=True,
        help_text="Unique reference (TXN-<year>-<sequence> when generated)",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_entries",
        help_text="User who recorded this entry",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "ledger entries"
        indexes = [
            models.Index(
                fields=["account", "entry_type"],
                name="ledger_entry_acct_type_idx",
            ),
            models.Index(
                fields=["account", "-date"],
                name="ledger_entry_acct_date_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="ledger_entry_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.transaction_id} {self.get_entry_type_display()} {self.amount}"

    @property
    def signed_amount(self) -> Decimal:
        """This entry's contribution to the account balance."""
        return entry_delta(self.entry_type, self.amount)
