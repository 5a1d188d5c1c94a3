"""
Read-only views over ledger data: dashboard figures, the combined entry
feed, entries matched to payments, and the received payments feed.

Nothing here writes to the database.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from core.services import BaseService
from ledger.models import (
    EntryCategory,
    EntryType,
    LedgerAccount,
    LedgerEntry,
    LedgerTransaction,
    TransactionType,
)
from ledger.types import DashboardSummary

from .accounts import AccountService

AMOUNT_FIELD = DecimalField(max_digits=18, decimal_places=2)
ZERO = Decimal("0.00")

DEFAULT_RECENT_LIMIT = 5
SALESPERSON_ROLE = "salesperson"


def _total(**filters) -> Coalesce:
    return Coalesce(
        Sum("amount", filter=Q(**filters)),
        Value(ZERO),
        output_field=AMOUNT_FIELD,
    )


def invoice_number(record_id: uuid.UUID, created_at: datetime, source_code: str) -> str:
    """
    Build a display invoice number for a received payment.

    Format: INV-<source_code>-<YYYYMMDD>-<last 6 hex digits of id, upper case>

    Example:
        >>> invoice_number(UUID("...c0ffee"), datetime(2026, 3, 9), "LED")
        'INV-LED-20260309-C0FFEE'
    """
    return f"INV-{source_code}-{created_at:%Y%m%d}-{record_id.hex[-6:].upper()}"


class ReportingService(BaseService):
    """
    Aggregates and feeds derived from entries and transactions.

    All methods are class-level - no instance state is maintained.
    """

    @classmethod
    def dashboard(cls, account_id: uuid.UUID) -> DashboardSummary:
        """
        Totals, counts and the most recent records for one account.

        Sums and counts are computed by the database; only the recent
        records are loaded.

        Raises:
            AccountNotFound: If the account doesn't exist
        """
        account = AccountService.get_account(account_id)
        limit = getattr(settings, "LEDGER_DASHBOARD_RECENT_LIMIT", DEFAULT_RECENT_LIMIT)

        entries = LedgerEntry.objects.filter(account_id=account.id)
        transactions = LedgerTransaction.objects.filter(account_id=account.id)

        entry_totals = entries.aggregate(
            total_debits=_total(entry_type=EntryType.DEBIT),
            total_credits=_total(entry_type=EntryType.CREDIT),
            entry_count=Count("id"),
        )
        transaction_totals = transactions.aggregate(
            total_payments_received=_total(
                transaction_type=TransactionType.PAYMENT_RECEIVED
            ),
            total_payments_made=_total(transaction_type=TransactionType.PAYMENT_MADE),
            transaction_count=Count("id"),
        )

        return DashboardSummary(
            account=account,
            balance=account.balance,
            total_debits=entry_totals["total_debits"],
            total_credits=entry_totals["total_credits"],
            total_payments_received=transaction_totals["total_payments_received"],
            total_payments_made=transaction_totals["total_payments_made"],
            entry_count=entry_totals["entry_count"],
            transaction_count=transaction_totals["transaction_count"],
            recent_entries=list(
                entries.select_related("created_by").order_by("-created_at")[:limit]
            ),
            recent_transactions=list(
                transactions.select_related("created_by").order_by("-created_at")[
                    :limit
                ]
            ),
        )

    @classmethod
    def combined_entries(cls, account_id: uuid.UUID) -> list[dict[str, Any]]:
        """
        Entries and transactions of one account as a single entry-shaped feed.

        Transactions are mapped to entries: payment_received becomes a
        credit in the income category, payment_made a debit in the expense
        category. Adjustments follow their direction (decrease as credit,
        increase as debit). Rows are newest first by created_at.

        Raises:
            AccountNotFound: If the account doesn't exist
        """
        account = AccountService.get_account(account_id)

        rows = [
            cls._entry_row(entry)
            for entry in LedgerEntry.objects.filter(account_id=account.id)
            .select_related("created_by")
        ]
        rows.extend(
            cls._transaction_as_entry_row(txn)
            for txn in LedgerTransaction.objects.filter(account_id=account.id)
            .select_related("created_by")
        )
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return rows

    @staticmethod
    def _entry_row(entry: LedgerEntry) -> dict[str, Any]:
        return {
            "id": entry.id,
            "account_id": entry.account_id,
            "entry_type": entry.entry_type,
            "amount": entry.amount,
            "description": entry.description,
            "category": entry.category,
            "payment_method": entry.payment_method,
            "date": entry.date,
            "notes": entry.notes,
            "transaction_id": entry.transaction_id,
            "created_by": entry.created_by,
            "created_at": entry.created_at,
            "is_payment_transaction": False,
            "original_transaction_type": None,
            "gateway_order_id": None,
            "gateway_payment_id": None,
        }

    @staticmethod
    def _transaction_as_entry_row(txn: LedgerTransaction) -> dict[str, Any]:
        if txn.signed_amount < 0:
            entry_type, category = EntryType.CREDIT, EntryCategory.INCOME
        else:
            entry_type, category = EntryType.DEBIT, EntryCategory.EXPENSE

        readable_type = txn.transaction_type.replace("_", " ")
        return {
            "id": txn.id,
            "account_id": txn.account_id,
            "entry_type": entry_type.value,
            "amount": txn.amount,
            "description": txn.description
            or f"{readable_type} via {txn.payment_method}",
            "category": category.value,
            "payment_method": txn.payment_method,
            "date": txn.date,
            "notes": f"Payment Transaction - {readable_type}",
            "transaction_id": txn.transaction_id,
            "created_by": txn.created_by,
            "created_at": txn.created_at,
            "is_payment_transaction": True,
            "original_transaction_type": txn.transaction_type,
            "gateway_order_id": txn.gateway_order_id,
            "gateway_payment_id": txn.gateway_payment_id,
        }

    @staticmethod
    def entries_from_payments(account_id: uuid.UUID):
        """
        Entries of an account whose transaction_id matches one of that
        account's transactions.

        Raises:
            AccountNotFound: If the account doesn't exist
        """
        account = AccountService.get_account(account_id)
        payment_ids = LedgerTransaction.objects.filter(
            account_id=account.id
        ).values("transaction_id")
        return (
            LedgerEntry.objects.filter(
                account_id=account.id,
                transaction_id__in=payment_ids,
            )
            .select_related("created_by")
            .order_by("-created_at")
        )

    @classmethod
    def received_payments(cls) -> list[dict[str, Any]]:
        """
        Every payment received, across all accounts, as payment rows.

        Credit entries and payment_received transactions are both included.
        Rows are newest first by created_at.
        """
        entries = (
            LedgerEntry.objects.filter(entry_type=EntryType.CREDIT)
            .select_related("account", "created_by")
        )
        transactions = (
            LedgerTransaction.objects.filter(
                transaction_type=TransactionType.PAYMENT_RECEIVED
            )
            .select_related("account", "created_by")
        )

        rows = [
            cls._payment_row(
                record=entry,
                row_type="ledger_entry",
                source_code="LED",
                description=entry.description,
                category=entry.category,
            )
            for entry in entries
        ]
        rows.extend(
            cls._payment_row(
                record=txn,
                row_type="transaction_history",
                source_code="TXN",
                description=txn.description
                or f"Payment received via {txn.payment_method}",
                category="payment",
            )
            for txn in transactions
        )
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return rows

    @staticmethod
    def _payment_row(
        record: LedgerEntry | LedgerTransaction,
        row_type: str,
        source_code: str,
        description: str,
        category: str,
    ) -> dict[str, Any]:
        account: LedgerAccount = record.account
        creator = record.created_by
        is_salesperson = creator is not None and creator.role == SALESPERSON_ROLE
        return {
            "id": record.id,
            "type": row_type,
            "amount": record.amount,
            "payment_method": record.payment_method or "cash",
            "transaction_id": record.transaction_id,
            "status": "completed",
            "date": record.date or record.created_at,
            "created_at": record.created_at,
            "description": description,
            "category": category,
            "customer_name": account.name or "N/A",
            "customer_phone": account.contact_phone or "N/A",
            "account_id": account.id,
            "ledger_id": account.ledger_id,
            "source": "salesperson" if is_salesperson else "admin",
            "created_by": creator,
            "invoice_number": invoice_number(record.id, record.created_at, source_code),
        }
