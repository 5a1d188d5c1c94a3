"""
Tests for the ledger services.

Tests cover:
- Balance invariant across create/edit/delete of entries and transactions
- Recompute idempotence and drift repair
- Identifier generation and collisions
- Inactive accounts
- Online payments and gateway failures
- Account lifecycle and cascade delete
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from ledger.exceptions import (
    AccountNotFound,
    BalanceDriftDetected,
    DuplicateIdentifier,
    EntryNotFound,
    GatewayUnavailableError,
    InactiveAccount,
    LedgerValidationError,
    TransactionNotFound,
)
from ledger.models import (
    AccountStatus,
    LedgerAccount,
    LedgerEntry,
    LedgerTransaction,
)
from ledger.services import AccountService, ReconciliationService
from ledger.tests.factories import LedgerEntryFactory, LedgerTransactionFactory
from ledger.types import (
    AccountUpdate,
    CreateAccountParams,
    EntryParams,
    EntryUpdate,
    TransactionParams,
    TransactionUpdate,
)

pytestmark = pytest.mark.django_db


def debit(amount: str, **kwargs) -> EntryParams:
    return EntryParams(
        entry_type="debit",
        amount=amount,
        description=kwargs.pop("description", "Goods sold on credit"),
        category=kwargs.pop("category", "sales"),
        **kwargs,
    )


def credit(amount: str, **kwargs) -> EntryParams:
    return EntryParams(
        entry_type="credit",
        amount=amount,
        description=kwargs.pop("description", "Cash collected"),
        category=kwargs.pop("category", "income"),
        **kwargs,
    )


def payment_received(amount: str, method: str = "cash", **kwargs) -> TransactionParams:
    return TransactionParams(
        transaction_type="payment_received",
        amount=amount,
        payment_method=method,
        **kwargs,
    )


# =============================================================================
# Entries
# =============================================================================


class TestCreateEntry:
    def test_debit_increases_balance(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("100"))

        assert entry.amount == Decimal("100.00")
        assert entry.transaction_id.startswith("TXN-")
        assert_balanced(account, "100.00")

    def test_credit_decreases_balance(self, account, assert_balanced):
        ReconciliationService.create_entry(account.id, credit("40"))

        assert_balanced(account, "-40.00")

    def test_records_creator(self, account, admin_user):
        entry = ReconciliationService.create_entry(
            account.id, debit("5"), created_by=admin_user
        )

        assert entry.created_by == admin_user

    def test_uses_supplied_transaction_id(self, account):
        entry = ReconciliationService.create_entry(
            account.id, debit("5", transaction_id="INV-7781")
        )

        assert entry.transaction_id == "INV-7781"

    def test_unknown_account(self, db):
        with pytest.raises(AccountNotFound):
            ReconciliationService.create_entry(uuid.uuid4(), debit("5"))

    def test_duplicate_transaction_id_leaves_balance_untouched(
        self, account, assert_balanced
    ):
        ReconciliationService.create_entry(
            account.id, debit("100", transaction_id="TXN-DUP-1")
        )

        with pytest.raises(DuplicateIdentifier) as exc_info:
            ReconciliationService.create_entry(
                account.id, debit("999", transaction_id="TXN-DUP-1")
            )

        assert exc_info.value.field == "transaction_id"
        assert LedgerEntry.objects.filter(account=account).count() == 1
        assert_balanced(account, "100.00")

    def test_generated_id_collision_rolls_back(self, account, assert_balanced):
        ReconciliationService.create_entry(
            account.id, debit("10", transaction_id="TXN-2026-000001")
        )

        with patch(
            "ledger.services.reconciliation.next_entry_id",
            return_value="TXN-2026-000001",
        ):
            with pytest.raises(DuplicateIdentifier):
                ReconciliationService.create_entry(account.id, debit("50"))

        assert_balanced(account, "10.00")

    def test_inactive_account_rejects_entries(self, account, assert_balanced):
        AccountService.update_account(account.id, AccountUpdate(status="inactive"))

        with pytest.raises(InactiveAccount):
            ReconciliationService.create_entry(account.id, debit("5"))

        assert_balanced(account, "0.00")


class TestEntryParamsValidation:
    @pytest.mark.parametrize("amount", ["0", "-5", "abc", None, ""])
    def test_rejects_non_positive_or_invalid_amount(self, amount):
        with pytest.raises(LedgerValidationError):
            debit(amount)

    def test_rejects_unknown_category(self):
        with pytest.raises(LedgerValidationError):
            debit("5", category="gifts")

    def test_rejects_blank_description(self):
        with pytest.raises(LedgerValidationError):
            debit("5", description="   ")

    def test_amount_quantized_to_cents(self):
        assert debit("10.006").amount == Decimal("10.01")


class TestUpdateEntry:
    def test_amount_change_moves_balance_by_difference(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("100"))

        ReconciliationService.update_entry(entry.id, EntryUpdate(amount="160"))

        assert_balanced(account, "160.00")

    def test_type_flip_moves_balance_by_twice_amount(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("30"))

        ReconciliationService.update_entry(entry.id, EntryUpdate(entry_type="credit"))

        assert_balanced(account, "-30.00")

    def test_descriptive_edit_keeps_balance(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("30"))

        updated = ReconciliationService.update_entry(
            entry.id, EntryUpdate(notes="Checked against invoice")
        )

        assert updated.notes == "Checked against invoice"
        assert_balanced(account, "30.00")

    def test_edit_round_trip_restores_balance(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("75"))

        ReconciliationService.update_entry(
            entry.id, EntryUpdate(entry_type="credit", amount="20")
        )
        ReconciliationService.update_entry(
            entry.id, EntryUpdate(entry_type="debit", amount="75")
        )

        assert_balanced(account, "75.00")

    def test_transaction_id_collision(self, account, assert_balanced):
        ReconciliationService.create_entry(account.id, debit("1", transaction_id="A-1"))
        entry = ReconciliationService.create_entry(
            account.id, debit("2", transaction_id="A-2")
        )

        with pytest.raises(DuplicateIdentifier):
            ReconciliationService.update_entry(
                entry.id, EntryUpdate(transaction_id="A-1", amount="500")
            )

        entry.refresh_from_db()
        assert entry.transaction_id == "A-2"
        assert_balanced(account, "3.00")

    def test_edit_allowed_on_inactive_account(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("10"))
        AccountService.update_account(account.id, AccountUpdate(status="inactive"))

        ReconciliationService.update_entry(entry.id, EntryUpdate(amount="12"))

        assert_balanced(account, "12.00")

    def test_unknown_entry(self, db):
        with pytest.raises(EntryNotFound):
            ReconciliationService.update_entry(uuid.uuid4(), EntryUpdate(amount="1"))


class TestDeleteEntry:
    def test_reverts_delta(self, account, assert_balanced):
        keep = ReconciliationService.create_entry(account.id, debit("100"))
        gone = ReconciliationService.create_entry(account.id, credit("40"))

        ReconciliationService.delete_entry(gone.id)

        assert not LedgerEntry.objects.filter(id=gone.id).exists()
        assert LedgerEntry.objects.filter(id=keep.id).exists()
        assert_balanced(account, "100.00")

    def test_delete_then_recreate_is_neutral(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("55"))

        ReconciliationService.delete_entry(entry.id)
        ReconciliationService.create_entry(account.id, debit("55"))

        assert_balanced(account, "55.00")

    def test_delete_twice(self, account):
        entry = ReconciliationService.create_entry(account.id, debit("5"))
        ReconciliationService.delete_entry(entry.id)

        with pytest.raises(EntryNotFound):
            ReconciliationService.delete_entry(entry.id)


class TestListEntries:
    def test_only_account_entries_latest_date_first(self, account, other_account):

        older = ReconciliationService.create_entry(
            account.id, debit("1", date=datetime(2026, 1, 1, tzinfo=timezone.utc))
        )
        newer = ReconciliationService.create_entry(
            account.id, debit("2", date=datetime(2026, 2, 1, tzinfo=timezone.utc))
        )
        ReconciliationService.create_entry(other_account.id, debit("3"))

        entries = list(ReconciliationService.list_entries(account.id))

        assert entries == [newer, older]

    def test_unknown_account(self, db):
        with pytest.raises(AccountNotFound):
            ReconciliationService.list_entries(uuid.uuid4())


# =============================================================================
# Transactions
# =============================================================================


class TestCreateTransaction:
    def test_payment_received_decreases_balance(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(
            account.id, payment_received("40")
        )

        assert txn.transaction_id.startswith("CASH-")
        assert txn.gateway_order_id is None
        assert_balanced(account, "-40.00")

    def test_payment_made_increases_balance(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(
            account.id,
            TransactionParams(
                transaction_type="payment_made", amount="15", payment_method="upi"
            ),
        )

        assert txn.transaction_id.startswith("UPI-")
        assert_balanced(account, "15.00")

    @pytest.mark.parametrize(
        "direction,expected", [("increase", "8.00"), ("decrease", "-8.00")]
    )
    def test_adjustment_follows_direction(
        self, account, assert_balanced, direction, expected
    ):
        ReconciliationService.create_transaction(
            account.id,
            TransactionParams(
                transaction_type="adjustment",
                amount="8",
                payment_method="cash",
                adjustment_direction=direction,
            ),
        )

        assert_balanced(account, expected)

    def test_adjustment_without_direction_rejected(self):
        with pytest.raises(LedgerValidationError):
            TransactionParams(
                transaction_type="adjustment", amount="8", payment_method="cash"
            )

    def test_direction_dropped_for_non_adjustments(self):
        params = payment_received("5", adjustment_direction="increase")

        assert params.adjustment_direction == ""

    def test_inactive_account(self, account, assert_balanced):
        AccountService.update_account(account.id, AccountUpdate(status="inactive"))

        with pytest.raises(InactiveAccount):
            ReconciliationService.create_transaction(account.id, payment_received("5"))

        assert_balanced(account, "0.00")

    def test_duplicate_transaction_id(self, account, assert_balanced):
        ReconciliationService.create_transaction(
            account.id, payment_received("5", transaction_id="CASH-X")
        )

        with pytest.raises(DuplicateIdentifier):
            ReconciliationService.create_transaction(
                account.id, payment_received("9", transaction_id="CASH-X")
            )

        assert_balanced(account, "-5.00")


class TestOnlinePayments:
    def test_gateway_order_id_becomes_transaction_id(
        self, account, fake_gateway, assert_balanced
    ):
        txn = ReconciliationService.create_transaction(
            account.id, payment_received("250", method="online")
        )

        assert txn.gateway_order_id == "pi_test_order_1"
        assert txn.transaction_id == "pi_test_order_1"
        assert_balanced(account, "-250.00")

    def test_order_params(self, account, fake_gateway, settings):
        settings.LEDGER_CURRENCY = "inr"

        txn = ReconciliationService.create_transaction(
            account.id, payment_received("250.50", method="online")
        )

        params = fake_gateway.create_order.call_args.args[0]
        assert params.amount == Decimal("250.50")
        assert params.amount_minor == 25050
        assert params.currency == "inr"
        assert str(txn.id) in params.idempotency_key
        assert params.metadata["ledger_id"] == account.ledger_id

    def test_gateway_order_overrides_supplied_transaction_id(
        self, account, fake_gateway
    ):
        txn = ReconciliationService.create_transaction(
            account.id,
            payment_received("10", method="online", transaction_id="MY-REF"),
        )

        assert txn.transaction_id == "pi_test_order_1"

    def test_existing_gateway_order_skips_gateway(self, account, fake_gateway):
        txn = ReconciliationService.create_transaction(
            account.id,
            payment_received("10", method="online", gateway_order_id="pi_existing"),
        )

        fake_gateway.create_order.assert_not_called()
        assert txn.gateway_order_id == "pi_existing"
        assert txn.transaction_id.startswith("ONLINE-")

    def test_gateway_failure_writes_nothing(self, account, fake_gateway, assert_balanced):
        fake_gateway.create_order.side_effect = GatewayUnavailableError("down")

        with pytest.raises(GatewayUnavailableError):
            ReconciliationService.create_transaction(
                account.id, payment_received("10", method="online")
            )

        assert not LedgerTransaction.objects.filter(account=account).exists()
        assert_balanced(account, "0.00")

    def test_inactive_account_never_reaches_gateway(self, account, fake_gateway):
        AccountService.update_account(account.id, AccountUpdate(status="inactive"))

        with pytest.raises(InactiveAccount):
            ReconciliationService.create_transaction(
                account.id, payment_received("10", method="online")
            )

        fake_gateway.create_order.assert_not_called()


class TestUpdateTransaction:
    def test_amount_change(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        ReconciliationService.update_transaction(txn.id, TransactionUpdate(amount="50"))

        assert_balanced(account, "-50.00")

    @pytest.mark.pending_confirmation
    def test_type_change_reverts_and_reapplies(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        ReconciliationService.update_transaction(
            txn.id, TransactionUpdate(transaction_type="payment_made")
        )

        assert_balanced(account, "40.00")

    @pytest.mark.pending_confirmation
    def test_descriptive_edit_keeps_balance(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        ReconciliationService.update_transaction(
            txn.id, TransactionUpdate(description="Paid at counter")
        )

        assert_balanced(account, "-40.00")

    def test_change_to_adjustment_requires_direction(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        with pytest.raises(LedgerValidationError):
            ReconciliationService.update_transaction(
                txn.id, TransactionUpdate(transaction_type="adjustment")
            )

        assert_balanced(account, "-40.00")

    def test_change_away_from_adjustment_clears_direction(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(
            account.id,
            TransactionParams(
                transaction_type="adjustment",
                amount="12",
                payment_method="cash",
                adjustment_direction="increase",
            ),
        )

        updated = ReconciliationService.update_transaction(
            txn.id, TransactionUpdate(transaction_type="payment_received")
        )

        assert updated.adjustment_direction == ""
        assert_balanced(account, "-12.00")

    def test_leaving_online_drops_gateway_references(
        self, account, fake_gateway, assert_balanced
    ):
        txn = ReconciliationService.create_transaction(
            account.id, payment_received("75", method="online")
        )
        ReconciliationService.attach_gateway_payment("pi_test_order_1", "ch_test_1")

        updated = ReconciliationService.update_transaction(
            txn.id, TransactionUpdate(payment_method="cash")
        )

        updated.refresh_from_db()
        assert updated.payment_method == "cash"
        assert updated.transaction_id.startswith("CASH-")
        assert updated.gateway_order_id is None
        assert updated.gateway_payment_id is None
        assert_balanced(account, "-75.00")

    def test_leaving_online_keeps_custom_transaction_id(self, account):
        txn = ReconciliationService.create_transaction(
            account.id,
            payment_received(
                "75",
                method="online",
                gateway_order_id="order_ext_9",
                transaction_id="BANK-REF-9",
            ),
        )

        updated = ReconciliationService.update_transaction(
            txn.id, TransactionUpdate(payment_method="upi")
        )

        assert updated.transaction_id == "BANK-REF-9"
        assert updated.gateway_order_id is None

    def test_switch_to_online_requires_gateway_order(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        with pytest.raises(LedgerValidationError):
            ReconciliationService.update_transaction(
                txn.id, TransactionUpdate(payment_method="online")
            )

        txn.refresh_from_db()
        assert txn.payment_method == "cash"
        assert txn.gateway_order_id is None
        assert_balanced(account, "-40.00")

    def test_switch_to_online_with_gateway_order(self, account, assert_balanced):
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        updated = ReconciliationService.update_transaction(
            txn.id,
            TransactionUpdate(payment_method="online", gateway_order_id="pi_manual_1"),
        )

        assert updated.payment_method == "online"
        assert updated.gateway_order_id == "pi_manual_1"
        assert_balanced(account, "-40.00")

    def test_unknown_transaction(self, db):
        with pytest.raises(TransactionNotFound):
            ReconciliationService.update_transaction(
                uuid.uuid4(), TransactionUpdate(amount="1")
            )


class TestDeleteTransaction:
    def test_reverts_delta(self, account, assert_balanced):
        ReconciliationService.create_entry(account.id, debit("100"))
        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))

        ReconciliationService.delete_transaction(txn.id)

        assert not LedgerTransaction.objects.filter(id=txn.id).exists()
        assert_balanced(account, "100.00")

    def test_unknown_transaction(self, db):
        with pytest.raises(TransactionNotFound):
            ReconciliationService.delete_transaction(uuid.uuid4())


class TestAttachGatewayPayment:
    def test_sets_payment_id_without_touching_balance(
        self, account, fake_gateway, assert_balanced
    ):
        txn = ReconciliationService.create_transaction(
            account.id, payment_received("99", method="online")
        )

        updated = ReconciliationService.attach_gateway_payment(
            "pi_test_order_1", "ch_test_1"
        )

        assert updated.id == txn.id
        assert updated.gateway_payment_id == "ch_test_1"
        assert_balanced(account, "-99.00")

    def test_unknown_order_returns_none(self, db):
        assert ReconciliationService.attach_gateway_payment("pi_nope", "ch_1") is None


# =============================================================================
# Scenario
# =============================================================================


class TestRunningBalanceScenario:
    def test_debit_credit_payment_edit(self, account, assert_balanced):
        ReconciliationService.create_entry(account.id, debit("100"))
        assert_balanced(account, "100.00")

        ReconciliationService.create_entry(account.id, credit("40"))
        assert_balanced(account, "60.00")

        txn = ReconciliationService.create_transaction(
            account.id,
            TransactionParams(
                transaction_type="payment_made", amount="50", payment_method="cash"
            ),
        )
        assert_balanced(account, "110.00")

        ReconciliationService.update_transaction(txn.id, TransactionUpdate(amount="90"))
        assert_balanced(account, "150.00")

    def test_edit_entry_then_delete_payment(self, account, assert_balanced):
        entry = ReconciliationService.create_entry(account.id, debit("100"))
        assert_balanced(account, "100.00")

        txn = ReconciliationService.create_transaction(account.id, payment_received("40"))
        assert_balanced(account, "60.00")

        ReconciliationService.update_entry(entry.id, EntryUpdate(amount="150"))
        assert_balanced(account, "110.00")

        ReconciliationService.delete_transaction(txn.id)
        assert_balanced(account, "150.00")

    def test_balance_wider_than_single_amount(self, account, assert_balanced):
        ReconciliationService.create_entry(account.id, debit("999999999999.99"))
        ReconciliationService.create_entry(account.id, debit("999999999999.99"))

        assert_balanced(account, "1999999999999.98")
        check = ReconciliationService.reconcile_account(account.id)
        assert check.is_balanced


# =============================================================================
# Recompute
# =============================================================================


class TestReconcile:
    def test_balanced_account(self, account):
        ReconciliationService.create_entry(account.id, debit("100"))
        ReconciliationService.create_transaction(account.id, payment_received("30"))

        check = ReconciliationService.reconcile_account(account.id)

        assert check.is_balanced
        assert check.stored == check.computed == Decimal("70.00")
        assert check.repaired is False

    def test_empty_account_computes_zero(self, account):
        assert ReconciliationService.compute_balance(account.id) == Decimal("0.00")

    def test_detects_drift_without_repair(self, account):
        LedgerEntryFactory(account=account, amount=Decimal("25.00"))

        check = ReconciliationService.reconcile_account(account.id)

        assert not check.is_balanced
        assert check.drift == Decimal("-25.00")
        account.refresh_from_db()
        assert account.balance == Decimal("0.00")

    def test_repair_overwrites_stored_balance(self, account, assert_balanced):
        LedgerEntryFactory(account=account, amount=Decimal("25.00"))
        LedgerTransactionFactory(account=account, amount=Decimal("5.00"))

        check = ReconciliationService.reconcile_account(account.id, repair=True)

        assert check.repaired is True
        assert check.stored == Decimal("0.00")
        assert_balanced(account, "20.00")

    def test_repair_is_idempotent(self, account):
        LedgerEntryFactory(account=account, amount=Decimal("25.00"))

        ReconciliationService.reconcile_account(account.id, repair=True)
        second = ReconciliationService.reconcile_account(account.id, repair=True)

        assert second.is_balanced
        assert second.repaired is False

    def test_verify_balance_raises_on_drift(self, account):
        LedgerEntryFactory(account=account, amount=Decimal("1.00"))

        with pytest.raises(BalanceDriftDetected) as exc_info:
            ReconciliationService.verify_balance(account.id)

        assert exc_info.value.details["drift"] == "-1.00"

    def test_unknown_account(self, db):
        with pytest.raises(AccountNotFound):
            ReconciliationService.reconcile_account(uuid.uuid4())


# =============================================================================
# Accounts
# =============================================================================


class TestCreateAccount:
    def test_generates_ledger_id_and_zero_balance(self, db, admin_user):
        account = AccountService.create_account(
            CreateAccountParams(name="Rao Hardware", account_type="supplier"),
            created_by=admin_user,
        )

        assert account.ledger_id.startswith("LDG-")
        assert account.balance == Decimal("0.00")
        assert account.status == AccountStatus.ACTIVE
        assert account.created_by == admin_user

    def test_sequential_ledger_ids(self, db):
        first = AccountService.create_account(
            CreateAccountParams(name="A", account_type="customer")
        )
        second = AccountService.create_account(
            CreateAccountParams(name="B", account_type="customer")
        )

        assert int(second.ledger_id.rsplit("-", 1)[1]) == (
            int(first.ledger_id.rsplit("-", 1)[1]) + 1
        )

    def test_duplicate_ledger_id(self, db):
        AccountService.create_account(
            CreateAccountParams(name="A", account_type="customer", ledger_id="LDG-X")
        )

        with pytest.raises(DuplicateIdentifier) as exc_info:
            AccountService.create_account(
                CreateAccountParams(name="B", account_type="customer", ledger_id="LDG-X")
            )

        assert exc_info.value.field == "ledger_id"

    def test_rejects_unknown_type(self):
        with pytest.raises(LedgerValidationError):
            CreateAccountParams(name="A", account_type="partner")


class TestUpdateAccount:
    def test_updates_descriptive_fields_only(self, account):
        ReconciliationService.create_entry(account.id, debit("10"))

        updated = AccountService.update_account(
            account.id, AccountUpdate(name="Sharma Traders Pvt", upi_id="sharma@upi")
        )

        assert updated.name == "Sharma Traders Pvt"
        assert updated.upi_id == "sharma@upi"
        updated.refresh_from_db()
        assert updated.balance == Decimal("10.00")

    def test_unknown_account(self, db):
        with pytest.raises(AccountNotFound):
            AccountService.update_account(uuid.uuid4(), AccountUpdate(name="X"))


class TestListAccounts:
    def test_filters(self, account, other_account):
        assert list(AccountService.list_accounts(account_type="supplier")) == [
            other_account
        ]
        assert list(AccountService.list_accounts(search="sharma")) == [account]
        assert list(AccountService.list_accounts(search=account.ledger_id)) == [account]
        assert list(AccountService.list_accounts(status="inactive")) == []


class TestDeleteAccount:
    def test_cascades_to_entries_and_transactions(self, account, other_account):
        entry = ReconciliationService.create_entry(account.id, debit("10"))
        txn = ReconciliationService.create_transaction(account.id, payment_received("4"))
        kept = ReconciliationService.create_entry(other_account.id, debit("7"))

        summary = AccountService.delete_account(account.id)

        assert summary.entries_deleted == 1
        assert summary.transactions_deleted == 1
        assert summary.ledger_id == account.ledger_id
        assert not LedgerAccount.objects.filter(id=account.id).exists()

        with pytest.raises(EntryNotFound):
            ReconciliationService.get_entry(entry.id)
        with pytest.raises(TransactionNotFound):
            ReconciliationService.get_transaction(txn.id)
        assert LedgerEntry.objects.filter(id=kept.id).exists()

    def test_account_gone_afterwards(self, account):
        AccountService.delete_account(account.id)

        with pytest.raises(AccountNotFound):
            AccountService.get_account(account.id)
        with pytest.raises(AccountNotFound):
            AccountService.delete_account(account.id)
