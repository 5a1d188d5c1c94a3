import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SequenceCounter",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "kind",
                    models.CharField(help_text="Identifier family", max_length=16),
                ),
                (
                    "year",
                    models.PositiveIntegerField(help_text="Calendar year of the sequence"),
                ),
                (
                    "value",
                    models.PositiveIntegerField(
                        default=0, help_text="Last value handed out"
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("kind", "year"), name="unique_sequence_per_kind_year"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerAccount",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "ledger_id",
                    models.CharField(
                        help_text="Human-readable identifier (LDG-<year>-<sequence>)",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Name of the customer, supplier or ledger head",
                        max_length=200,
                    ),
                ),
                (
                    "contact_phone",
                    models.CharField(
                        blank=True, help_text="Contact phone number", max_length=32
                    ),
                ),
                (
                    "contact_email",
                    models.EmailField(
                        blank=True, help_text="Contact email address", max_length=254
                    ),
                ),
                (
                    "contact_address",
                    models.TextField(blank=True, help_text="Postal address"),
                ),
                (
                    "upi_id",
                    models.CharField(
                        blank=True,
                        help_text="Payment handle (e.g. UPI VPA) for collecting payments",
                        max_length=100,
                    ),
                ),
                (
                    "balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Running balance; positive means the party owes the business",
                        max_digits=14,
                    ),
                ),
                (
                    "account_type",
                    models.CharField(
                        choices=[
                            ("customer", "Customer"),
                            ("supplier", "Supplier"),
                            ("expense", "Expense"),
                            ("income", "Income"),
                        ],
                        db_index=True,
                        help_text="Kind of ledger",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        help_text="Inactive accounts accept no new entries or transactions",
                        max_length=20,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who created this account",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_accounts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["account_type", "status"],
                        name="ledger_acct_type_status_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "entry_type",
                    models.CharField(
                        choices=[("debit", "Debit"), ("credit", "Credit")],
                        help_text="debit (+amount) or credit (-amount)",
                        max_length=10,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Positive amount", max_digits=14
                    ),
                ),
                (
                    "description",
                    models.TextField(help_text="What this entry is for"),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("sales", "Sales"),
                            ("purchase", "Purchase"),
                            ("expense", "Expense"),
                            ("income", "Income"),
                            ("loan", "Loan"),
                            ("investment", "Investment"),
                        ],
                        help_text="Bookkeeping category",
                        max_length=20,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("cash", "Cash"),
                            ("bank_transfer", "Bank Transfer"),
                            ("upi", "UPI"),
                            ("credit_card", "Credit Card"),
                            ("cheque", "Cheque"),
                            ("other", "Other"),
                        ],
                        help_text="How the money moved, if applicable",
                        max_length=20,
                    ),
                ),
                (
                    "date",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="Business date of the entry",
                    ),
                ),
                (
                    "notes",
                    models.TextField(blank=True, help_text="Free-form notes"),
                ),
                (
                    "transaction_id",
                    models.CharField(
                        help_text="Unique reference (TXN-<year>-<sequence> when generated)",
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Account this entry belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="ledger.ledgeraccount",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who recorded this entry",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "ledger entries",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["account", "entry_type"],
                        name="ledger_entry_acct_type_idx",
                    ),
                    models.Index(
                        fields=["account", "-date"],
                        name="ledger_entry_acct_date_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_entry_amount_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerTransaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("payment_received", "Payment Received"),
                            ("payment_made", "Payment Made"),
                            ("adjustment", "Adjustment"),
                        ],
                        help_text="payment_received (-amount), payment_made (+amount) or adjustment",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Positive amount", max_digits=14
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("upi", "UPI"), ("online", "Online")],
                        help_text="cash, upi or online",
                        max_length=10,
                    ),
                ),
                (
                    "adjustment_direction",
                    models.CharField(
                        blank=True,
                        choices=[("increase", "Increase"), ("decrease", "Decrease")],
                        help_text="Balance direction for adjustments; empty otherwise",
                        max_length=10,
                    ),
                ),
                (
                    "description",
                    models.TextField(blank=True, help_text="Optional description"),
                ),
                (
                    "date",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="Business date of the transaction",
                    ),
                ),
                (
                    "transaction_id",
                    models.CharField(
                        help_text="Unique reference (CASH-/UPI-/ONLINE-<year>-<sequence> or gateway order id)",
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "gateway_order_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Payment gateway order reference",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "gateway_payment_id",
                    models.CharField(
                        blank=True,
                        help_text="Payment gateway payment reference (filled by webhook)",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Account this transaction belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="ledger.ledgeraccount",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who recorded this transaction",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="ledger_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["account", "transaction_type"],
                        name="ledger_txn_acct_type_idx",
                    ),
                    models.Index(
                        fields=["account", "-date"],
                        name="ledger_txn_acct_date_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_transaction_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("transaction_type", "adjustment"),
                                ("adjustment_direction__in", ["increase", "decrease"]),
                            ),
                            models.Q(
                                models.Q(("transaction_type", "adjustment"), _negated=True),
                                ("adjustment_direction", ""),
                            ),
                            _connector="OR",
                        ),
                        name="ledger_transaction_adjustment_direction",
                    ),
                ],
            },
        ),
    ]
