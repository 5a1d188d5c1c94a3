"""
Payment transaction model: payments received/made and adjustments.
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


class TransactionType(models.TextChoices):
    """
    Kinds of payment transactions.

    Values:
        PAYMENT_RECEIVED: Party paid the business (-amount)
        PAYMENT_MADE: Business paid the party (+amount)
        ADJUSTMENT: Correction; sign given by adjustment_direction
    """

    PAYMENT_RECEIVED = "payment_received", "Payment Received"
    PAYMENT_MADE = "payment_made", "Payment Made"
    ADJUSTMENT = "adjustment", "Adjustment"


class TransactionPaymentMethod(models.TextChoices):
    """Each method has its own identifier prefix (CASH-, UPI-, ONLINE-)."""

    CASH = "cash", "Cash"
    UPI = "upi", "UPI"
    ONLINE = "online", "Online"


class AdjustmentDirection(models.TextChoices):
    """Direction of an adjustment transaction's effect on the balance."""

    INCREASE = "increase", "Increase"
    DECREASE = "decrease", "Decrease"


def transaction_delta(
    transaction_type: str,
    amount: Decimal,
    adjustment_direction: str = "",
) -> Decimal:
    """Signed balance change for a transaction."""
    if transaction_type == TransactionType.PAYMENT_RECEIVED:
        return -amount
    if transaction_type == TransactionType.PAYMENT_MADE:
        return amount
    if transaction_type == TransactionType.ADJUSTMENT:
        if adjustment_direction == AdjustmentDirection.INCREASE:
            return amount
        if adjustment_direction == AdjustmentDirection.DECREASE:
            return -amount
        raise ValueError("Adjustment transactions require an adjustment_direction")
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


class LedgerTransaction(UUIDPrimaryKeyMixin, BaseModel):
    """
    A payment received, payment made, or adjustment against one account.

    Fields:
        account: Owning account (never changes after creation)
        transaction_type: payment_received, payment_made or adjustment
        amount: Positive amount
        payment_method: cash, upi or online
        adjustment_direction: increase/decrease, required for adjustments only
        description: Optional free text
        date: Business date (defaults to now)
        transaction_id: Unique identifier; gateway order id for online payments
        gateway_order_id: Payment gateway order reference (online only)
        gateway_payment_id: Payment gateway payment reference, set by webhook
        created_by: User who recorded the transaction

    Constraints:
        - amount must be positive
        - adjustment_direction set if and only if transaction_type is adjustment
        - transaction_id must be unique
    """

    account = models.ForeignKey(
        LedgerAccount,
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Account this transaction belongs to",
    )
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        help_text="payment_received (-amount), payment_made (+amount) or adjustment",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Positive amount",
    )
    payment_method = models.CharField(
        max_length=10,
        choices=TransactionPaymentMethod.choices,
        help_text="cash, upi or online",
    )
    adjustment_direction = models.CharField(
        max_length=10,
        choices=AdjustmentDirection.choices,
        blank=True,
        help_text="Balance direction for adjustments; empty otherwise",
    )
    description = models.TextField(
        blank=True,
        help_text="Optional description",
    )
    date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Business date of the transaction",
    )
    transaction_id = models.CharField(
        max_length=64,
        unique=True,
        help_text="Unique reference (CASH-/UPI-/ONLINE-<year>-<sequence> or gateway order id)",
    )
    gateway_order_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="Payment gateway order reference",
    )
    gateway_payment_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Payment gateway payment reference (filled by webhook)",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_transactions",
        help_text="User who recorded this transaction",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["account", "transaction_type"],
                name="ledger_txn_acct_type_idx",
            ),
            models.Index(
                fields=["account", "-date"],
                name="ledger_txn_acct_date_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="ledger_transaction_amount_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(
                        transaction_type=TransactionType.ADJUSTMENT,
                        adjustment_direction__in=AdjustmentDirection.values,
                    )
                    | (
                        ~Q(transaction_type=TransactionType.ADJUSTMENT)
                        & Q(adjustment_direction="")
                    )
                ),
                name="ledger_transaction_adjustment_direction",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.transaction_id} {self.get_transaction_type_display()} {self.amount}"

    @property
    def signed_amount(self) -> Decimal:
        """This transaction's contribution to the account balance."""
        return transaction_delta(
            self.transaction_type, self.amount, self.adjustment_direction
        )
