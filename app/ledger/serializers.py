"""
Serializers for the ledger API.

Read serializers render models and report rows. Write serializers validate
request shape and convert into the service-layer dataclasses in
ledger.types; all business rules are enforced by the services.

Related files:
    - types.py: Dataclasses the write serializers produce
    - views.py: ViewSets that use these serializers
"""

from decimal import Decimal

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from ledger.models import (
    AccountStatus,
    AccountType,
    AdjustmentDirection,
    EntryCategory,
    EntryPaymentMethod,
    EntryType,
    LedgerAccount,
    LedgerEntry,
    LedgerTransaction,
    TransactionPaymentMethod,
    TransactionType,
)
from ledger.types import (
    AccountUpdate,
    CreateAccountParams,
    EntryParams,
    EntryUpdate,
    TransactionParams,
    TransactionUpdate,
)

MIN_AMOUNT = Decimal("0.01")


def _amount_field(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=MIN_AMOUNT,
        **kwargs,
    )


# =============================================================================
# Accounts
# =============================================================================


class LedgerAccountSerializer(serializers.ModelSerializer):
    """Account as returned by the API. The balance is always read-only."""

    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = LedgerAccount
        fields = [
            "id",
            "ledger_id",
            "name",
            "contact_phone",
            "contact_email",
            "contact_address",
            "upi_id",
            "balance",
            "account_type",
            "status",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    account_type = serializers.ChoiceField(choices=AccountType.choices)
    contact_phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    contact_address = serializers.CharField(required=False, allow_blank=True)
    upi_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    status = serializers.ChoiceField(
        choices=AccountStatus.choices,
        required=False,
        default=AccountStatus.ACTIVE,
    )
    ledger_id = serializers.CharField(max_length=32, required=False)

    def to_params(self) -> CreateAccountParams:
        return CreateAccountParams(**self.validated_data)


class AccountUpdateSerializer(serializers.Serializer):
    """
    Editable account fields.

    Unknown fields such as balance or account_type are ignored.
    """

    name = serializers.CharField(max_length=200)
    contact_phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    contact_address = serializers.CharField(required=False, allow_blank=True)
    upi_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=AccountStatus.choices, required=False)

    def to_update(self) -> AccountUpdate:
        return AccountUpdate(**self.validated_data)


class DeletionSummarySerializer(serializers.Serializer):
    account_id = serializers.UUIDField()
    ledger_id = serializers.CharField()
    entries_deleted = serializers.IntegerField()
    transactions_deleted = serializers.IntegerField()


# =============================================================================
# Entries
# =============================================================================


class LedgerEntrySerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    account = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "account",
            "entry_type",
            "amount",
            "description",
            "category",
            "payment_method",
            "date",
            "notes",
            "transaction_id",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class EntryCreateSerializer(serializers.Serializer):
    entry_type = serializers.ChoiceField(choices=EntryType.choices)
    amount = _amount_field()
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=EntryCategory.choices)
    payment_method = serializers.ChoiceField(
        choices=EntryPaymentMethod.choices,
        required=False,
        allow_blank=True,
    )
    date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    transaction_id = serializers.CharField(max_length=64, required=False)

    def to_params(self) -> EntryParams:
        return EntryParams(**self.validated_data)


class EntryUpdateSerializer(serializers.Serializer):
    """
    Entry edit payload.

    PUT requires the same fields as creation; PATCH (partial=True) accepts
    any subset.
    """

    entry_type = serializers.ChoiceField(choices=EntryType.choices)
    amount = _amount_field()
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=EntryCategory.choices)
    payment_method = serializers.ChoiceField(
        choices=EntryPaymentMethod.choices,
        required=False,
        allow_blank=True,
    )
    date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    transaction_id = serializers.CharField(max_length=64, required=False)

    def to_update(self) -> EntryUpdate:
        return EntryUpdate(**self.validated_data)


# =============================================================================
# Transactions
# =============================================================================


class LedgerTransactionSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    account = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = LedgerTransaction
        fields = [
            "id",
            "account",
            "transaction_type",
            "amount",
            "payment_method",
            "adjustment_direction",
            "description",
            "date",
            "transaction_id",
            "gateway_order_id",
            "gateway_payment_id",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TransactionCreateSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices)
    amount = _amount_field()
    payment_method = serializers.ChoiceField(choices=TransactionPaymentMethod.choices)
    adjustment_direction = serializers.ChoiceField(
        choices=AdjustmentDirection.choices,
        required=False,
        allow_blank=True,
    )
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)
    transaction_id = serializers.CharField(max_length=64, required=False)
    gateway_order_id = serializers.CharField(max_length=255, required=False)
    gateway_payment_id = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        if attrs["transaction_type"] == TransactionType.ADJUSTMENT and not attrs.get(
            "adjustment_direction"
        ):
            raise serializers.ValidationError(
                {"adjustment_direction": "Required for adjustment transactions."}
            )
        return attrs

    def to_params(self) -> TransactionParams:
        return TransactionParams(**self.validated_data)


class TransactionUpdateSerializer(serializers.Serializer):
    """
    Transaction edit payload. The transaction_id is not editable.

    PUT requires type, amount and payment method; PATCH accepts any subset.
    """

    transaction_type = serializers.ChoiceField(choices=TransactionType.choices)
    amount = _amount_field()
    payment_method = serializers.ChoiceField(choices=TransactionPaymentMethod.choices)
    adjustment_direction = serializers.ChoiceField(
        choices=AdjustmentDirection.choices,
        required=False,
        allow_blank=True,
    )
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)
    gateway_order_id = serializers.CharField(max_length=255, required=False)
    gateway_payment_id = serializers.CharField(max_length=255, required=False)

    def to_update(self) -> TransactionUpdate:
        return TransactionUpdate(**self.validated_data)


# =============================================================================
# Reports
# =============================================================================


class DashboardSerializer(serializers.Serializer):
    account = LedgerAccountSerializer()
    balance = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_debits = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_credits = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_payments_received = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_payments_made = serializers.DecimalField(max_digits=18, decimal_places=2)
    entry_count = serializers.IntegerField()
    transaction_count = serializers.IntegerField()
    recent_entries = LedgerEntrySerializer(many=True)
    recent_transactions = LedgerTransactionSerializer(many=True)


class CombinedEntrySerializer(serializers.Serializer):
    """An entry, or a transaction shaped as an entry (is_payment_transaction)."""

    id = serializers.UUIDField()
    account_id = serializers.UUIDField()
    entry_type = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField()
    category = serializers.CharField()
    payment_method = serializers.CharField(allow_blank=True)
    date = serializers.DateTimeField()
    notes = serializers.CharField(allow_blank=True)
    transaction_id = serializers.CharField()
    created_by = UserSummarySerializer(allow_null=True)
    created_at = serializers.DateTimeField()
    is_payment_transaction = serializers.BooleanField()
    original_transaction_type = serializers.CharField(allow_null=True)
    gateway_order_id = serializers.CharField(allow_null=True)
    gateway_payment_id = serializers.CharField(allow_null=True)


class ReceivedPaymentSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    type = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_method = serializers.CharField()
    transaction_id = serializers.CharField()
    status = serializers.CharField()
    date = serializers.DateTimeField()
    created_at = serializers.DateTimeField()
    description = serializers.CharField()
    category = serializers.CharField()
    customer_name = serializers.CharField()
    customer_phone = serializers.CharField()
    account_id = serializers.UUIDField()
    ledger_id = serializers.CharField()
    source = serializers.CharField()
    created_by = UserSummarySerializer(allow_null=True)
    invoice_number = serializers.CharField()


class ReconcileRequestSerializer(serializers.Serializer):
    repair = serializers.BooleanField(required=False, default=False)


class BalanceCheckSerializer(serializers.Serializer):
    account_id = serializers.UUIDField()
    stored = serializers.DecimalField(max_digits=18, decimal_places=2)
    computed = serializers.DecimalField(max_digits=18, decimal_places=2)
    drift = serializers.DecimalField(max_digits=18, decimal_places=2)
    is_balanced = serializers.BooleanField()
    repaired = serializers.BooleanField()
