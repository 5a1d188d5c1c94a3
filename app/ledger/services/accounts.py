"""
Account lifecycle: create, look up, edit and cascade-delete ledger accounts.

Balances are never written here except by the cascade delete, which removes
the account outright. Entry and transaction effects go through
ledger.services.reconciliation.

Usage:
    from ledger.services import AccountService
    from ledger.types import CreateAccountParams

    account = AccountService.create_account(
        CreateAccountParams(name="Sharma Traders", account_type="supplier"),
        created_by=request.user,
    )
    summary = AccountService.delete_account(account.id)
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q

from core.services import BaseService
from ledger.exceptions import AccountNotFound, DuplicateIdentifier
from ledger.models import LedgerAccount, LedgerEntry, LedgerTransaction
from ledger.types import AccountUpdate, CreateAccountParams, DeletionSummary

from .identifiers import next_account_id

if TYPE_CHECKING:
    from django.db.models import QuerySet


class AccountService(BaseService):
    """
    Service for ledger account records.

    All methods are class-level - no instance state is maintained.
    """

    @classmethod
    def create_account(
        cls,
        params: CreateAccountParams,
        created_by=None,
    ) -> LedgerAccount:
        """
        Create an account with a zero balance.

        A ledger_id (LDG-<year>-<seq>) is generated unless params carries one.

        Raises:
            DuplicateIdentifier: If the ledger_id is already in use
        """
        ledger_id = params.ledger_id
        try:
            with cls.atomic():
                ledger_id = ledger_id or next_account_id()
                account = LedgerAccount.objects.create(
                    ledger_id=ledger_id,
                    name=params.name,
                    account_type=params.account_type,
                    status=params.status,
                    contact_phone=params.contact_phone,
                    contact_email=params.contact_email,
                    contact_address=params.contact_address,
                    upi_id=params.upi_id,
                    created_by=created_by,
                )
        except IntegrityError:
            if ledger_id and LedgerAccount.objects.filter(ledger_id=ledger_id).exists():
                raise DuplicateIdentifier("ledger_id", ledger_id)
            raise

        cls.get_logger().info(
            "Ledger account created",
            extra={
                "account_id": str(account.id),
                "ledger_id": account.ledger_id,
                "account_type": account.account_type,
            },
        )
        return account

    @staticmethod
    def get_account(account_id: uuid.UUID) -> LedgerAccount:
        """
        Get account by ID.

        Raises:
            AccountNotFound: If account doesn't exist
        """
        try:
            return LedgerAccount.objects.get(id=account_id)
        except LedgerAccount.DoesNotExist:
            raise AccountNotFound(
                f"Account {account_id} not found",
                details={"account_id": str(account_id)},
            )

    @staticmethod
    def list_accounts(
        account_type: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> QuerySet[LedgerAccount]:
        """
        Accounts newest first, optionally filtered.

        Args:
            account_type: Only accounts of this type
            status: Only accounts with this status
            search: Case-insensitive match on name or ledger_id
        """
        queryset = LedgerAccount.objects.select_related("created_by").order_by(
            "-created_at"
        )
        if account_type:
            queryset = queryset.filter(account_type=account_type)
        if status:
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(ledger_id__icontains=search)
            )
        return queryset

    @classmethod
    def update_account(
        cls,
        account_id: uuid.UUID,
        update: AccountUpdate,
    ) -> LedgerAccount:
        """
        Apply descriptive field changes to an account.

        The balance is not editable; it only moves through entries and
        transactions.

        Raises:
            AccountNotFound: If account doesn't exist
        """
        changes = update.changes()
        with cls.atomic():
            try:
                account = LedgerAccount.objects.select_for_update().get(id=account_id)
            except LedgerAccount.DoesNotExist:
                raise AccountNotFound(
                    f"Account {account_id} not found",
                    details={"account_id": str(account_id)},
                )
            for field_name, value in changes.items():
                setattr(account, field_name, value)
            account.save(update_fields=[*changes, "updated_at"])

        cls.get_logger().info(
            "Ledger account updated",
            extra={"account_id": str(account.id), "fields": sorted(changes)},
        )
        return account

    @classmethod
    def delete_account(cls, account_id: uuid.UUID) -> DeletionSummary:
        """
        Delete an account together with all of its entries and transactions.

        Runs children first (transactions, entries, then the account) in one
        database transaction with the account row locked, so no entry or
        transaction can be added to the account mid-delete. A failure at any
        step rolls back the whole workflow; the nightly consistency sweep
        reports any orphans a non-transactional backend might leave.

        Raises:
            AccountNotFound: If account doesn't exist
        """
        logger = cls.get_logger()

        with cls.atomic():
            try:
                account = LedgerAccount.objects.select_for_update().get(id=account_id)
            except LedgerAccount.DoesNotExist:
                raise AccountNotFound(
                    f"Account {account_id} not found",
                    details={"account_id": str(account_id)},
                )

            transactions_deleted, _ = LedgerTransaction.objects.filter(
                account_id=account.id
            ).delete()
            entries_deleted, _ = LedgerEntry.objects.filter(
                account_id=account.id
            ).delete()
            summary = DeletionSummary(
                account_id=account.id,
                ledger_id=account.ledger_id,
                entries_deleted=entries_deleted,
                transactions_deleted=transactions_deleted,
            )
            account.delete()

        logger.info(
            "Ledger account deleted",
            extra={
                "account_id": str(summary.account_id),
                "ledger_id": summary.ledger_id,
                "entries_deleted": summary.entries_deleted,
                "transactions_deleted": summary.transactions_deleted,
            },
        )
        return summary
