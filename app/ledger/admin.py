"""
Django admin configuration for ledger models.

Entries and transactions are read-only here: editing them outside
ReconciliationService would move records without moving the balance.
Accounts allow edits of descriptive fields only.
"""

from django.contrib import admin

from .models import LedgerAccount, LedgerEntry, LedgerTransaction, SequenceCounter


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    """Records whose writes must go through the ledger services."""

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(LedgerAccount)
class LedgerAccountAdmin(admin.ModelAdmin):
    """
    Admin configuration for LedgerAccount.

    The balance is displayed but never editable. Accounts are created and
    deleted through the API so identifiers and cascades are handled.
    """

    list_display = [
        "ledger_id",
        "name",
        "account_type",
        "status",
        "balance",
        "created_at",
    ]
    list_filter = ["account_type", "status"]
    search_fields = ["ledger_id", "name", "contact_phone", "contact_email"]
    readonly_fields = ["id", "ledger_id", "balance", "created_by", "created_at", "updated_at"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "ledger_id", "name", "account_type", "status"),
            },
        ),
        (
            "Contact",
            {
                "fields": ("contact_phone", "contact_email", "contact_address", "upi_id"),
            },
        ),
        (
            "Balance",
            {
                "fields": ("balance",),
            },
        ),
        (
            "Audit",
            {
                "fields": ("created_by", "created_at", "updated_at"),
            },
        ),
    )

    def has_add_permission(self, request) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        "transaction_id",
        "account",
        "entry_type",
        "amount",
        "category",
        "date",
        "created_by",
    ]
    list_filter = ["entry_type", "category", "payment_method"]
    search_fields = ["transaction_id", "description", "account__ledger_id", "account__name"]
    list_select_related = ["account", "created_by"]
    date_hierarchy = "date"
    ordering = ["-created_at"]


@admin.register(LedgerTransaction)
class LedgerTransactionAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        "transaction_id",
        "account",
        "transaction_type",
        "amount",
        "payment_method",
        "gateway_order_id",
        "gateway_payment_id",
        "date",
    ]
    list_filter = ["transaction_type", "payment_method"]
    search_fields = [
        "transaction_id",
        "gateway_order_id",
        "gateway_payment_id",
        "account__ledger_id",
        "account__name",
    ]
    list_select_related = ["account", "created_by"]
    date_hierarchy = "date"
    ordering = ["-created_at"]


@admin.register(SequenceCounter)
class SequenceCounterAdmin(ReadOnlyLedgerAdmin):
    list_display = ["kind", "year", "value"]
    list_filter = ["kind", "year"]
