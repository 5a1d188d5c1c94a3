"""
Tests for ReportingService.

Tests cover:
- Dashboard totals, counts and recent records
- Combined entry feed (transactions shaped as entries)
- Entries matched to payments
- Received payments feed and invoice numbers
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from authentication.models import UserRole
from authentication.tests.factories import UserFactory
from ledger.exceptions import AccountNotFound
from ledger.services import ReconciliationService, ReportingService, invoice_number
from ledger.tests.factories import (
    LedgerAccountFactory,
    LedgerEntryFactory,
    LedgerTransactionFactory,
)
from ledger.types import EntryParams, TransactionParams

pytestmark = pytest.mark.django_db


def record_entry(account, entry_type: str, amount: str, **kwargs):
    return ReconciliationService.create_entry(
        account.id,
        EntryParams(
            entry_type=entry_type,
            amount=amount,
            description=kwargs.pop("description", "Counter sale"),
            category=kwargs.pop("category", "sales"),
            **kwargs,
        ),
    )


def record_transaction(account, transaction_type: str, amount: str, **kwargs):
    return ReconciliationService.create_transaction(
        account.id,
        TransactionParams(
            transaction_type=transaction_type,
            amount=amount,
            payment_method=kwargs.pop("payment_method", "cash"),
            **kwargs,
        ),
    )


class TestInvoiceNumber:
    def test_format(self):
        record_id = uuid.UUID("12345678-1234-5678-1234-567812c0ffee")

        number = invoice_number(record_id, datetime(2026, 3, 9, tzinfo=timezone.utc), "LED")

        assert number == "INV-LED-20260309-C0FFEE"


class TestDashboard:
    def test_totals_and_counts(self, account):
        record_entry(account, "debit", "100")
        record_entry(account, "debit", "20")
        record_entry(account, "credit", "40")
        record_transaction(account, "payment_received", "30")
        record_transaction(account, "payment_made", "5")

        summary = ReportingService.dashboard(account.id)

        assert summary.balance == Decimal("55.00")
        assert summary.total_debits == Decimal("120.00")
        assert summary.total_credits == Decimal("40.00")
        assert summary.total_payments_received == Decimal("30.00")
        assert summary.total_payments_made == Decimal("5.00")
        assert summary.entry_count == 3
        assert summary.transaction_count == 2

    def test_empty_account(self, account):
        summary = ReportingService.dashboard(account.id)

        assert summary.total_debits == Decimal("0.00")
        assert summary.entry_count == 0
        assert summary.recent_entries == []

    def test_recent_records_limited_newest_first(self, account, settings):
        settings.LEDGER_DASHBOARD_RECENT_LIMIT = 2
        entries = [record_entry(account, "debit", str(n)) for n in range(1, 4)]

        summary = ReportingService.dashboard(account.id)

        assert summary.recent_entries == [entries[2], entries[1]]

    def test_unknown_account(self, db):
        with pytest.raises(AccountNotFound):
            ReportingService.dashboard(uuid.uuid4())


class TestCombinedEntries:
    def test_merges_entries_and_transactions_newest_first(self, account):
        entry = record_entry(account, "debit", "100")
        txn = record_transaction(account, "payment_received", "30")

        rows = ReportingService.combined_entries(account.id)

        assert [row["id"] for row in rows] == [txn.id, entry.id]
        assert rows[1]["is_payment_transaction"] is False

    def test_payment_received_shaped_as_income_credit(self, account):
        txn = record_transaction(account, "payment_received", "30", payment_method="upi")

        row = ReportingService.combined_entries(account.id)[0]

        assert row["entry_type"] == "credit"
        assert row["category"] == "income"
        assert row["is_payment_transaction"] is True
        assert row["original_transaction_type"] == "payment_received"
        assert row["description"] == "payment received via upi"
        assert row["notes"] == "Payment Transaction - payment received"
        assert row["transaction_id"] == txn.transaction_id

    def test_payment_made_shaped_as_expense_debit(self, account):
        record_transaction(account, "payment_made", "5", description="Paid transporter")

        row = ReportingService.combined_entries(account.id)[0]

        assert row["entry_type"] == "debit"
        assert row["category"] == "expense"
        assert row["description"] == "Paid transporter"

    @pytest.mark.parametrize(
        "direction,entry_type", [("increase", "debit"), ("decrease", "credit")]
    )
    def test_adjustment_follows_direction(self, account, direction, entry_type):
        record_transaction(account, "adjustment", "3", adjustment_direction=direction)

        row = ReportingService.combined_entries(account.id)[0]

        assert row["entry_type"] == entry_type

    def test_excludes_other_accounts(self, account, other_account):
        record_entry(other_account, "debit", "1")

        assert ReportingService.combined_entries(account.id) == []


class TestEntriesFromPayments:
    def test_matches_on_transaction_id(self, account, other_account):
        txn = record_transaction(account, "payment_received", "30")
        matched = record_entry(account, "credit", "30", transaction_id="REF-1")
        record_entry(account, "debit", "10")
        # Same reference on another account's entry is not matched
        LedgerTransactionFactory(account=other_account, transaction_id="REF-1")
        LedgerEntryFactory(account=other_account, transaction_id=txn.transaction_id)

        assert list(ReportingService.entries_from_payments(account.id)) == []

        LedgerTransactionFactory(account=account, transaction_id="REF-X")
        matched.transaction_id = "REF-X"
        matched.save()

        assert list(ReportingService.entries_from_payments(account.id)) == [matched]


class TestReceivedPayments:
    def test_includes_credit_entries_and_payment_received(self, account, other_account):
        credit = record_entry(account, "credit", "40")
        record_entry(account, "debit", "100")
        received = record_transaction(other_account, "payment_received", "25")
        record_transaction(account, "payment_made", "5")

        rows = ReportingService.received_payments()

        assert [row["id"] for row in rows] == [received.id, credit.id]
        assert rows[0]["type"] == "transaction_history"
        assert rows[0]["category"] == "payment"
        assert rows[0]["description"] == "Payment received via cash"
        assert rows[0]["invoice_number"].startswith("INV-TXN-")
        assert rows[1]["type"] == "ledger_entry"
        assert rows[1]["invoice_number"].startswith("INV-LED-")
        assert all(row["status"] == "completed" for row in rows)

    def test_row_carries_account_details(self, account):
        record_transaction(account, "payment_received", "25")

        row = ReportingService.received_payments()[0]

        assert row["customer_name"] == account.name
        assert row["customer_phone"] == account.contact_phone
        assert row["ledger_id"] == account.ledger_id
        assert row["account_id"] == account.id

    def test_fallbacks(self, db):
        account = LedgerAccountFactory(contact_phone="", created_by=None)
        LedgerEntryFactory(
            account=account, entry_type="credit", payment_method="", created_by=None
        )

        row = ReportingService.received_payments()[0]

        assert row["customer_phone"] == "N/A"
        assert row["payment_method"] == "cash"
        assert row["source"] == "admin"
        assert row["created_by"] is None

    def test_source_reflects_creator_role(self, db):
        clerk = UserFactory(role=UserRole.SALESPERSON)
        account = LedgerAccountFactory()
        LedgerTransactionFactory(account=account, created_by=clerk)
        LedgerTransactionFactory(account=account)

        sources = sorted(row["source"] for row in ReportingService.received_payments())

        assert sources == ["admin", "salesperson"]
