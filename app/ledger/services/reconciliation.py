"""
Balance reconciliation engine.

Every mutation of a ledger entry or payment transaction goes through
ReconciliationService, which writes the record and moves the owning
account's balance in the same database transaction.

Sign convention (see ledger.models.entry_delta / transaction_delta):
    entry debit               +amount
    entry credit              -amount
    payment_received          -amount
    payment_made              +amount
    adjustment increase       +amount
    adjustment decrease       -amount

Concurrency:
    - The account row is locked (SELECT ... FOR UPDATE) before the child
      row, so concurrent mutations of one account are serialized and the
      lock order is the same everywhere.
    - Balance deltas are applied as `balance = balance + delta` in SQL,
      never as a Python read-modify-write.
    - Mutations of different accounts do not contend on balances. Creates
      that draw a generated identifier also lock the shared (kind, year)
      SequenceCounter row until commit; see ledger.services.identifiers.

Edits revert the record's old delta and apply the new one unconditionally,
even when only descriptive fields changed.

Usage:
    from ledger.services import ReconciliationService
    from ledger.types import EntryParams

    entry = ReconciliationService.create_entry(
        account.id,
        EntryParams(entry_type="debit", amount="100", description="Stock", category="sales"),
        created_by=request.user,
    )
    check = ReconciliationService.reconcile_account(account.id, repair=True)
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db import IntegrityError
from django.db.models import Case, DecimalField, F, Sum, Value, When
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.services import BaseService
from ledger.adapters import CreateOrderParams, IdempotencyKeyGenerator, StripeAdapter
from ledger.exceptions import (
    AccountNotFound,
    BalanceDriftDetected,
    DuplicateIdentifier,
    EntryNotFound,
    InactiveAccount,
    LedgerValidationError,
    TransactionNotFound,
)
from ledger.models import (
    AdjustmentDirection,
    EntryType,
    LedgerAccount,
    LedgerEntry,
    LedgerTransaction,
    TransactionPaymentMethod,
    TransactionType,
)
from ledger.types import (
    CENT,
    BalanceCheck,
    EntryParams,
    EntryUpdate,
    TransactionParams,
    TransactionUpdate,
    validate_adjustment_direction,
)

from .identifiers import next_entry_id, next_transaction_id

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from ledger.adapters import GatewayOrder


AMOUNT_FIELD = DecimalField(max_digits=18, decimal_places=2)
ZERO = Decimal("0.00")


def _signed_sum(cases: list[When]) -> Coalesce:
    return Coalesce(
        Sum(Case(*cases, default=Value(ZERO), output_field=AMOUNT_FIELD)),
        Value(ZERO),
        output_field=AMOUNT_FIELD,
    )


ENTRY_SIGNED_SUM = [
    When(entry_type=EntryType.DEBIT, then=F("amount")),
    When(entry_type=EntryType.CREDIT, then=-F("amount")),
]

TRANSACTION_SIGNED_SUM = [
    When(transaction_type=TransactionType.PAYMENT_RECEIVED, then=-F("amount")),
    When(transaction_type=TransactionType.PAYMENT_MADE, then=F("amount")),
    When(
        transaction_type=TransactionType.ADJUSTMENT,
        adjustment_direction=AdjustmentDirection.INCREASE,
        then=F("amount"),
    ),
    When(
        transaction_type=TransactionType.ADJUSTMENT,
        adjustment_direction=AdjustmentDirection.DECREASE,
        then=-F("amount"),
    ),
]


class ReconciliationService(BaseService):
    """
    Service for entries, transactions and the balances they drive.

    Invariant maintained by every mutating method:
        account.balance == sum(entry.signed_amount) + sum(transaction.signed_amount)

    The gateway adapter can be injected for testing.
    """

    _gateway_adapter: type | None = None

    @classmethod
    def get_gateway_adapter(cls) -> type:
        """Get the payment gateway adapter class."""
        return cls._gateway_adapter or StripeAdapter

    @classmethod
    def set_gateway_adapter(cls, adapter: type | None) -> None:
        """Set the payment gateway adapter class (for testing)."""
        cls._gateway_adapter = adapter

    # =========================================================================
    # Balance primitives
    # =========================================================================

    @staticmethod
    def _lock_account(account_id: uuid.UUID) -> LedgerAccount:
        """Lock and return the account row. Must run inside atomic()."""
        try:
            return LedgerAccount.objects.select_for_update().get(id=account_id)
        except LedgerAccount.DoesNotExist:
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )

    @staticmethod
    def _require_active(account: LedgerAccount) -> None:
        if not account.is_active:
            raise InactiveAccount(
                f"Account {account.ledger_id} is inactive",
                details={"account_id": str(account.id)},
            )

    @classmethod
    def _apply_delta(cls, account_id: uuid.UUID, delta: Decimal, reason: str) -> None:
        """Add delta to the stored balance as a single SQL update."""
        LedgerAccount.objects.filter(id=account_id).update(
            balance=F("balance") + delta,
            updated_at=timezone.now(),
        )
        cls.get_logger().info(
            "Balance delta applied",
            extra={
                "account_id": str(account_id),
                "delta": str(delta),
                "reason": reason,
            },
        )

    @staticmethod
    def _raise_if_duplicate(model, transaction_id: str | None) -> None:
        """
        After an IntegrityError, decide whether the transaction_id collided.

        The failed atomic block has already rolled back, so this query runs
        on a usable connection.
        """
        if transaction_id and model.objects.filter(transaction_id=transaction_id).exists():
            raise DuplicateIdentifier("transaction_id", transaction_id)

    # =========================================================================
    # Entries
    # =========================================================================

    @classmethod
    def create_entry(
        cls,
        account_id: uuid.UUID,
        params: EntryParams,
        created_by=None,
    ) -> LedgerEntry:
        """
        Record an entry and apply its delta to the account.

        Raises:
            AccountNotFound: If the account doesn't exist
            InactiveAccount: If the account is inactive
            DuplicateIdentifier: If transaction_id is already in use
        """
        transaction_id = params.transaction_id
        try:
            with cls.atomic():
                account = cls._lock_account(account_id)
                cls._require_active(account)

                transaction_id = transaction_id or next_entry_id()
                entry = LedgerEntry.objects.create(
                    account=account,
                    entry_type=params.entry_type,
                    amount=params.amount,
                    description=params.description,
                    category=params.category,
                    payment_method=params.payment_method,
                    date=params.date or timezone.now(),
                    notes=params.notes,
                    transaction_id=transaction_id,
                    created_by=created_by,
                )
                cls._apply_delta(account.id, entry.signed_amount, "entry_created")
        except IntegrityError:
            cls._raise_if_duplicate(LedgerEntry, transaction_id)
            raise

        cls.get_logger().info(
            "Ledger entry created",
            extra={
                "account_id": str(account.id),
                "entry_id": str(entry.id),
                "transaction_id": entry.transaction_id,
                "entry_type": entry.entry_type,
                "amount": str(entry.amount),
            },
        )
        return entry

    @staticmethod
    def get_entry(entry_id: uuid.UUID) -> LedgerEntry:
        """
        Raises:
            EntryNotFound: If the entry doesn't exist
        """
        try:
            return LedgerEntry.objects.select_related("account", "created_by").get(
                id=entry_id
            )
        except LedgerEntry.DoesNotExist:
            raise EntryNotFound(
                f"Entry {entry_id} not found",
                details={"entry_id": str(entry_id)},
            )

    @classmethod
    def list_entries(cls, account_id: uuid.UUID) -> QuerySet[LedgerEntry]:
        """Entries of one account, latest business date first."""
        if not LedgerAccount.objects.filter(id=account_id).exists():
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )
        return (
            LedgerEntry.objects.filter(account_id=account_id)
            .select_related("created_by")
            .order_by("-date", "-created_at")
        )

    @classmethod
    def _lock_entry(cls, entry_id: uuid.UUID) -> tuple[LedgerAccount, LedgerEntry]:
        """Lock the owning account, then the entry. Must run inside atomic()."""
        account_id = (
            LedgerEntry.objects.filter(id=entry_id)
            .values_list("account_id", flat=True)
            .first()
        )
        if account_id is None:
            raise EntryNotFound(
                f"Entry {entry_id} not found",
                details={"entry_id": str(entry_id)},
            )
        account = cls._lock_account(account_id)
        try:
            entry = LedgerEntry.objects.select_for_update().get(id=entry_id)
        except LedgerEntry.DoesNotExist:
            raise EntryNotFound(
                f"Entry {entry_id} not found",
                details={"entry_id": str(entry_id)},
            )
        return account, entry

    @classmethod
    def update_entry(cls, entry_id: uuid.UUID, update: EntryUpdate) -> LedgerEntry:
        """
        Edit an entry: revert its old delta, save, apply its new delta.

        The revert and re-apply happen even when only descriptive fields
        change.

        Raises:
            EntryNotFound: If the entry doesn't exist
            DuplicateIdentifier: If a new transaction_id is already in use
        """
        changes = update.changes()
        try:
            with cls.atomic():
                account, entry = cls._lock_entry(entry_id)
                old_delta = entry.signed_amount
                cls._apply_delta(account.id, -old_delta, "entry_reverted")

                for field_name, value in changes.items():
                    setattr(entry, field_name, value)
                entry.save()

                new_delta = entry.signed_amount
                cls._apply_delta(account.id, new_delta, "entry_reapplied")
        except IntegrityError:
            if "transaction_id" in changes:
                cls._raise_if_duplicate(LedgerEntry, changes["transaction_id"])
            raise

        cls.get_logger().info(
            "Ledger entry updated",
            extra={
                "account_id": str(account.id),
                "entry_id": str(entry.id),
                "old_delta": str(old_delta),
                "new_delta": str(new_delta),
                "fields": sorted(changes),
            },
        )
        return entry

    @classmethod
    def delete_entry(cls, entry_id: uuid.UUID) -> None:
        """
        Revert an entry's delta and remove it.

        Raises:
            EntryNotFound: If the entry doesn't exist
        """
        with cls.atomic():
            account, entry = cls._lock_entry(entry_id)
            delta = entry.signed_amount
            cls._apply_delta(account.id, -delta, "entry_deleted")
            entry.delete()

        cls.get_logger().info(
            "Ledger entry deleted",
            extra={
                "account_id": str(account.id),
                "entry_id": str(entry_id),
                "reverted_delta": str(delta),
            },
        )

    # =========================================================================
    # Transactions
    # =========================================================================

    @classmethod
    def create_transaction(
        cls,
        account_id: uuid.UUID,
        params: TransactionParams,
        created_by=None,
    ) -> LedgerTransaction:
        """
        Record a payment transaction and apply its delta to the account.

        Online payments without a gateway order get one created first; its id
        becomes both gateway_order_id and transaction_id. If the gateway call
        fails nothing is written.

        Raises:
            AccountNotFound: If the account doesn't exist
            InactiveAccount: If the account is inactive
            GatewayError: If gateway order creation fails
            DuplicateIdentifier: If transaction_id is already in use
        """
        # The pk is chosen up front so the gateway idempotency key is stable
        transaction_pk = uuid.uuid4()
        transaction_id = params.transaction_id
        gateway_order_id = params.gateway_order_id

        if params.needs_gateway_order:
            try:
                account = LedgerAccount.objects.get(id=account_id)
            except LedgerAccount.DoesNotExist:
                raise AccountNotFound(
                    f"Account {account_id} not found",
                    details={"account_id": str(account_id)},
                )
            cls._require_active(account)
            order = cls._create_gateway_order(account, params, transaction_pk)
            gateway_order_id = order.id
            transaction_id = order.id

        try:
            with cls.atomic():
                account = cls._lock_account(account_id)
                cls._require_active(account)

                transaction_id = transaction_id or next_transaction_id(
                    params.payment_method
                )
                txn = LedgerTransaction.objects.create(
                    id=transaction_pk,
                    account=account,
                    transaction_type=params.transaction_type,
                    amount=params.amount,
                    payment_method=params.payment_method,
                    adjustment_direction=params.adjustment_direction,
                    description=params.description,
                    date=params.date or timezone.now(),
                    transaction_id=transaction_id,
                    gateway_order_id=gateway_order_id,
                    gateway_payment_id=params.gateway_payment_id,
                    created_by=created_by,
                )
                cls._apply_delta(account.id, txn.signed_amount, "transaction_created")
        except IntegrityError:
            cls._raise_if_duplicate(LedgerTransaction, transaction_id)
            raise

        cls.get_logger().info(
            "Ledger transaction created",
            extra={
                "account_id": str(account.id),
                "transaction_pk": str(txn.id),
                "transaction_id": txn.transaction_id,
                "transaction_type": txn.transaction_type,
                "amount": str(txn.amount),
                "gateway_order_id": txn.gateway_order_id,
            },
        )
        return txn

    @classmethod
    def _create_gateway_order(
        cls,
        account: LedgerAccount,
        params: TransactionParams,
        transaction_pk: uuid.UUID,
    ) -> GatewayOrder:
        adapter = cls.get_gateway_adapter()
        return adapter.create_order(
            CreateOrderParams(
                amount=params.amount,
                currency=getattr(settings, "LEDGER_CURRENCY", "inr"),
                idempotency_key=IdempotencyKeyGenerator.generate(
                    "create_order", transaction_pk
                ),
                metadata={
                    "ledger_account_id": str(account.id),
                    "ledger_id": account.ledger_id,
                    "ledger_transaction_pk": str(transaction_pk),
                },
            )
        )

    @staticmethod
    def get_transaction(transaction_pk: uuid.UUID) -> LedgerTransaction:
        """
        Raises:
            TransactionNotFound: If the transaction doesn't exist
        """
        try:
            return LedgerTransaction.objects.select_related(
                "account", "created_by"
            ).get(id=transaction_pk)
        except LedgerTransaction.DoesNotExist:
            raise TransactionNotFound(
                f"Transaction {transaction_pk} not found",
                details={"transaction_pk": str(transaction_pk)},
            )

    @classmethod
    def list_transactions(cls, account_id: uuid.UUID) -> QuerySet[LedgerTransaction]:
        """Transactions of one account, latest business date first."""
        if not LedgerAccount.objects.filter(id=account_id).exists():
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )
        return (
            LedgerTransaction.objects.filter(account_id=account_id)
            .select_related("created_by")
            .order_by("-date", "-created_at")
        )

    @classmethod
    def _lock_transaction(
        cls, transaction_pk: uuid.UUID
    ) -> tuple[LedgerAccount, LedgerTransaction]:
        """Lock the owning account, then the transaction. Must run inside atomic()."""
        account_id = (
            LedgerTransaction.objects.filter(id=transaction_pk)
            .values_list("account_id", flat=True)
            .first()
        )
        if account_id is None:
            raise TransactionNotFound(
                f"Transaction {transaction_pk} not found",
                details={"transaction_pk": str(transaction_pk)},
            )
        account = cls._lock_account(account_id)
        try:
            txn = LedgerTransaction.objects.select_for_update().get(id=transaction_pk)
        except LedgerTransaction.DoesNotExist:
            raise TransactionNotFound(
                f"Transaction {transaction_pk} not found",
                details={"transaction_pk": str(transaction_pk)},
            )
        return account, txn

    @classmethod
    def update_transaction(
        cls,
        transaction_pk: uuid.UUID,
        update: TransactionUpdate,
    ) -> LedgerTransaction:
        """
        Edit a transaction: revert its old delta, save, apply its new delta.

        Changing the type away from adjustment clears adjustment_direction;
        changing it to adjustment requires one. Payment method changes
        involving online are handled by _reconcile_payment_method.

        Raises:
            TransactionNotFound: If the transaction doesn't exist
            LedgerValidationError: If an adjustment would lack a direction, or
                a switch to online lacks a gateway order id
        """
        changes = update.changes()
        with cls.atomic():
            account, txn = cls._lock_transaction(transaction_pk)

            new_type = changes.get("transaction_type", txn.transaction_type)
            changes["adjustment_direction"] = validate_adjustment_direction(
                new_type,
                changes.get("adjustment_direction", txn.adjustment_direction),
            )
            cls._reconcile_payment_method(txn, changes)

            old_delta = txn.signed_amount
            cls._apply_delta(account.id, -old_delta, "transaction_reverted")

            for field_name, value in changes.items():
                setattr(txn, field_name, value)
            txn.save()

            new_delta = txn.signed_amount
            cls._apply_delta(account.id, new_delta, "transaction_reapplied")

        cls.get_logger().info(
            "Ledger transaction updated",
            extra={
                "account_id": str(account.id),
                "transaction_pk": str(txn.id),
                "old_delta": str(old_delta),
                "new_delta": str(new_delta),
                "fields": sorted(changes),
            },
        )
        return txn

    @staticmethod
    def _reconcile_payment_method(
        txn: LedgerTransaction, changes: dict[str, Any]
    ) -> None:
        """
        Keep gateway references in step with a payment method change.

        Edits never create gateway orders, so switching to online needs a
        gateway_order_id in the same update. Switching away from online drops
        both gateway references and renumbers a transaction_id that was the
        gateway order id.
        """
        new_method = changes.get("payment_method", txn.payment_method)
        if new_method == txn.payment_method:
            return

        if new_method == TransactionPaymentMethod.ONLINE:
            if not changes.get("gateway_order_id"):
                raise LedgerValidationError(
                    "Switching to online payment requires gateway_order_id",
                    details={
                        "field": "gateway_order_id",
                        "transaction_pk": str(txn.id),
                    },
                )
            return

        if txn.payment_method == TransactionPaymentMethod.ONLINE:
            if txn.gateway_order_id and txn.transaction_id == txn.gateway_order_id:
                changes["transaction_id"] = next_transaction_id(new_method)
            changes["gateway_order_id"] = None
            changes["gateway_payment_id"] = None

    @classmethod
    def delete_transaction(cls, transaction_pk: uuid.UUID) -> None:
        """
        Revert a transaction's delta and remove it.

        Raises:
            TransactionNotFound: If the transaction doesn't exist
        """
        with cls.atomic():
            account, txn = cls._lock_transaction(transaction_pk)
            delta = txn.signed_amount
            cls._apply_delta(account.id, -delta, "transaction_deleted")
            txn.delete()

        cls.get_logger().info(
            "Ledger transaction deleted",
            extra={
                "account_id": str(account.id),
                "transaction_pk": str(transaction_pk),
                "reverted_delta": str(delta),
            },
        )

    @classmethod
    def attach_gateway_payment(
        cls,
        gateway_order_id: str,
        gateway_payment_id: str,
    ) -> LedgerTransaction | None:
        """
        Record the gateway payment id on the transaction for a gateway order.

        Called from the gateway webhook. The balance effect was applied when
        the transaction was created, so the balance is not touched here.

        Returns:
            The updated transaction, or None if no transaction has that order id
        """
        logger = cls.get_logger()
        with cls.atomic():
            txn = (
                LedgerTransaction.objects.select_for_update()
                .filter(gateway_order_id=gateway_order_id)
                .first()
            )
            if txn is None:
                logger.warning(
                    "No transaction for gateway order",
                    extra={
                        "gateway_order_id": gateway_order_id,
                        "gateway_payment_id": gateway_payment_id,
                    },
                )
                return None

            txn.gateway_payment_id = gateway_payment_id
            txn.save(update_fields=["gateway_payment_id", "updated_at"])

        logger.info(
            "Gateway payment attached",
            extra={
                "transaction_pk": str(txn.id),
                "gateway_order_id": gateway_order_id,
                "gateway_payment_id": gateway_payment_id,
            },
        )
        return txn

    # =========================================================================
    # Recompute
    # =========================================================================

    @staticmethod
    def compute_balance(account_id: uuid.UUID) -> Decimal:
        """
        Recompute an account's balance from its live entries and transactions.

        This is the ground truth the stored balance is checked against.
        """
        entry_total = LedgerEntry.objects.filter(account_id=account_id).aggregate(
            total=_signed_sum(ENTRY_SIGNED_SUM)
        )["total"]
        transaction_total = LedgerTransaction.objects.filter(
            account_id=account_id
        ).aggregate(total=_signed_sum(TRANSACTION_SIGNED_SUM))["total"]
        return (Decimal(entry_total) + Decimal(transaction_total)).quantize(CENT)

    @classmethod
    def reconcile_account(
        cls,
        account_id: uuid.UUID,
        repair: bool = False,
    ) -> BalanceCheck:
        """
        Compare the stored balance with the recomputed one.

        Args:
            account_id: Account to check
            repair: Overwrite the stored balance with the recomputed one on drift

        Returns:
            BalanceCheck with the stored (pre-repair) and computed balances

        Raises:
            AccountNotFound: If the account doesn't exist
        """
        logger = cls.get_logger()
        with cls.atomic():
            account = cls._lock_account(account_id)
            computed = cls.compute_balance(account.id)
            check = BalanceCheck(
                account_id=account.id,
                stored=account.balance.quantize(CENT),
                computed=computed,
            )
            if not check.is_balanced:
                logger.warning(
                    "Balance drift detected",
                    extra={
                        "account_id": str(account.id),
                        "stored": str(check.stored),
                        "computed": str(check.computed),
                        "drift": str(check.drift),
                        "repair": repair,
                    },
                )
                if repair:
                    LedgerAccount.objects.filter(id=account.id).update(
                        balance=computed,
                        updated_at=timezone.now(),
                    )
                    check.repaired = True
        return check

    @classmethod
    def verify_balance(cls, account_id: uuid.UUID) -> BalanceCheck:
        """
        Check an account without repairing it.

        Raises:
            AccountNotFound: If the account doesn't exist
            BalanceDriftDetected: If stored and computed balances differ
        """
        check = cls.reconcile_account(account_id, repair=False)
        if not check.is_balanced:
            raise BalanceDriftDetected(
                account_id=check.account_id,
                stored=check.stored,
                computed=check.computed,
            )
        return check
