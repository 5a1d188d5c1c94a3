"""
Views for the ledger API.

ViewSets:
    LedgerAccountViewSet: Accounts plus their nested entries, transactions and reports
    LedgerEntryViewSet: Single-entry retrieve/edit/delete
    LedgerTransactionViewSet: Single-transaction retrieve/edit/delete and the
        received payments feed

Endpoints (under /api/v1/ledger/):
    Accounts:
        GET    accounts/                          - List accounts
        POST   accounts/                          - Create account
        GET    accounts/{id}/                     - Get account
        PUT    accounts/{id}/                     - Update account
        PATCH  accounts/{id}/                     - Partially update account
        DELETE accounts/{id}/                     - Delete account with its records
        GET    accounts/{id}/entries/             - List entries
        POST   accounts/{id}/entries/             - Create entry
        GET    accounts/{id}/transactions/        - List transactions
        POST   accounts/{id}/transactions/        - Create transaction
        GET    accounts/{id}/dashboard/           - Dashboard figures
        GET    accounts/{id}/combined-entries/    - Entries and transactions merged
        GET    accounts/{id}/entries-from-payments/ - Entries matched to payments
        POST   accounts/{id}/reconcile/           - Recompute (and repair) balance

    Entries:
        GET/PUT/PATCH/DELETE entries/{id}/

    Transactions:
        GET/PUT/PATCH/DELETE transactions/{id}/
        GET    transactions/received/             - All received payments

Permissions:
    Everything requires the admin role except transactions/received/, which
    any authenticated user may read.

Service exceptions propagate to core.exception_handler, which renders them.
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import IsAdminRole
from ledger.serializers import (
    AccountCreateSerializer,
    AccountUpdateSerializer,
    BalanceCheckSerializer,
    CombinedEntrySerializer,
    DashboardSerializer,
    DeletionSummarySerializer,
    EntryCreateSerializer,
    EntryUpdateSerializer,
    LedgerAccountSerializer,
    LedgerEntrySerializer,
    LedgerTransactionSerializer,
    ReceivedPaymentSerializer,
    ReconcileRequestSerializer,
    TransactionCreateSerializer,
    TransactionUpdateSerializer,
)
from ledger.services import AccountService, ReconciliationService, ReportingService

UUID_REGEX = r"[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"


class LedgerViewSetMixin:
    """Shared configuration: admin-only, UUID lookups, paginated lists."""

    permission_classes = [IsAdminRole]
    lookup_value_regex = UUID_REGEX

    def paginated(self, queryset, serializer_class):
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = serializer_class(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(serializer_class(queryset, many=True).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_ledger_accounts",
        summary="List accounts",
        description="Accounts newest first, optionally filtered by type, status or search text.",
        parameters=[
            OpenApiParameter(
                name="account_type",
                type=str,
                location=OpenApiParameter.QUERY,
                description="customer, supplier, expense or income",
                required=False,
            ),
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                description="active or inactive",
                required=False,
            ),
            OpenApiParameter(
                name="search",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Match on name or ledger id",
                required=False,
            ),
        ],
        responses={200: LedgerAccountSerializer(many=True)},
        tags=["Ledger - Accounts"],
    ),
    create=extend_schema(
        operation_id="create_ledger_account",
        summary="Create account",
        request=AccountCreateSerializer,
        responses={
            201: LedgerAccountSerializer,
            400: OpenApiResponse(description="Invalid input or duplicate ledger id"),
        },
        tags=["Ledger - Accounts"],
    ),
    retrieve=extend_schema(
        operation_id="get_ledger_account",
        summary="Get account",
        responses={200: LedgerAccountSerializer},
        tags=["Ledger - Accounts"],
    ),
    update=extend_schema(
        operation_id="update_ledger_account",
        summary="Update account",
        description="Name, contact details, payment handle and status. The balance is never editable.",
        request=AccountUpdateSerializer,
        responses={200: LedgerAccountSerializer},
        tags=["Ledger - Accounts"],
    ),
    partial_update=extend_schema(
        operation_id="partial_update_ledger_account",
        summary="Partially update account",
        request=AccountUpdateSerializer,
        responses={200: LedgerAccountSerializer},
        tags=["Ledger - Accounts"],
    ),
    destroy=extend_schema(
        operation_id="delete_ledger_account",
        summary="Delete account",
        description="Deletes the account together with all of its entries and transactions.",
        responses={200: DeletionSummarySerializer},
        tags=["Ledger - Accounts"],
    ),
)
class LedgerAccountViewSet(LedgerViewSetMixin, viewsets.GenericViewSet):
    """
    ViewSet for ledger accounts and their nested records.

    Provides:
    - list / create / retrieve / update / partial_update / destroy
    - entries: GET, POST /{id}/entries/
    - transactions: GET, POST /{id}/transactions/
    - dashboard: GET /{id}/dashboard/
    - combined_entries: GET /{id}/combined-entries/
    - entries_from_payments: GET /{id}/entries-from-payments/
    - reconcile: POST /{id}/reconcile/
    """

    serializer_class = LedgerAccountSerializer

    def get_queryset(self):
        params = self.request.query_params
        return AccountService.list_accounts(
            account_type=params.get("account_type"),
            status=params.get("status"),
            search=params.get("search"),
        )

    def list(self, request):
        return self.paginated(self.get_queryset(), LedgerAccountSerializer)

    def create(self, request):
        serializer = AccountCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account = AccountService.create_account(
            serializer.to_params(), created_by=request.user
        )
        return Response(
            LedgerAccountSerializer(account).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        account = AccountService.get_account(pk)
        return Response(LedgerAccountSerializer(account).data)

    def update(self, request, pk=None, partial=False):
        serializer = AccountUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        account = AccountService.update_account(pk, serializer.to_update())
        return Response(LedgerAccountSerializer(account).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        summary = AccountService.delete_account(pk)
        return Response(DeletionSummarySerializer(summary).data)

    @extend_schema(
        methods=["GET"],
        operation_id="list_ledger_entries",
        summary="List entries of an account",
        responses={200: LedgerEntrySerializer(many=True)},
        tags=["Ledger - Entries"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="create_ledger_entry",
        summary="Create entry",
        description="Records the entry and applies its delta to the account balance.",
        request=EntryCreateSerializer,
        responses={
            201: LedgerEntrySerializer,
            400: OpenApiResponse(description="Invalid input or duplicate transaction id"),
            404: OpenApiResponse(description="Account not found"),
            409: OpenApiResponse(description="Account is inactive"),
        },
        tags=["Ledger - Entries"],
    )
    @action(detail=True, methods=["get", "post"])
    def entries(self, request, pk=None):
        if request.method == "GET":
            return self.paginated(
                ReconciliationService.list_entries(pk), LedgerEntrySerializer
            )

        serializer = EntryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = ReconciliationService.create_entry(
            pk, serializer.to_params(), created_by=request.user
        )
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=["GET"],
        operation_id="list_ledger_transactions",
        summary="List transactions of an account",
        responses={200: LedgerTransactionSerializer(many=True)},
        tags=["Ledger - Transactions"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="create_ledger_transaction",
        summary="Create transaction",
        description=(
            "Records the transaction and applies its delta to the account balance. "
            "Online payments without a gateway order id get a gateway order created first."
        ),
        request=TransactionCreateSerializer,
        responses={
            201: LedgerTransactionSerializer,
            400: OpenApiResponse(description="Invalid input or duplicate transaction id"),
            404: OpenApiResponse(description="Account not found"),
            409: OpenApiResponse(description="Account is inactive"),
            502: OpenApiResponse(description="Payment gateway error"),
        },
        tags=["Ledger - Transactions"],
    )
    @action(detail=True, methods=["get", "post"])
    def transactions(self, request, pk=None):
        if request.method == "GET":
            return self.paginated(
                ReconciliationService.list_transactions(pk),
                LedgerTransactionSerializer,
            )

        serializer = TransactionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        txn = ReconciliationService.create_transaction(
            pk, serializer.to_params(), created_by=request.user
        )
        return Response(
            LedgerTransactionSerializer(txn).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="get_ledger_dashboard",
        summary="Account dashboard",
        responses={200: DashboardSerializer},
        tags=["Ledger - Reports"],
    )
    @action(detail=True, methods=["get"])
    def dashboard(self, request, pk=None):
        summary = ReportingService.dashboard(pk)
        return Response(DashboardSerializer(summary).data)

    @extend_schema(
        operation_id="get_ledger_combined_entries",
        summary="Entries and transactions merged",
        description="Transactions shaped as entries, merged with entries, newest first.",
        responses={200: CombinedEntrySerializer(many=True)},
        tags=["Ledger - Reports"],
    )
    @action(detail=True, methods=["get"], url_path="combined-entries")
    def combined_entries(self, request, pk=None):
        rows = ReportingService.combined_entries(pk)
        return Response(CombinedEntrySerializer(rows, many=True).data)

    @extend_schema(
        operation_id="get_ledger_entries_from_payments",
        summary="Entries matched to payments",
        description="Entries whose transaction id matches one of the account's transactions.",
        responses={200: LedgerEntrySerializer(many=True)},
        tags=["Ledger - Reports"],
    )
    @action(detail=True, methods=["get"], url_path="entries-from-payments")
    def entries_from_payments(self, request, pk=None):
        entries = ReportingService.entries_from_payments(pk)
        return Response(LedgerEntrySerializer(entries, many=True).data)

    @extend_schema(
        operation_id="reconcile_ledger_account",
        summary="Reconcile balance",
        description=(
            "Recompute the balance from live entries and transactions. "
            "With repair=true the stored balance is overwritten on drift."
        ),
        request=ReconcileRequestSerializer,
        responses={200: BalanceCheckSerializer},
        tags=["Ledger - Reports"],
    )
    @action(detail=True, methods=["post"])
    def reconcile(self, request, pk=None):
        serializer = ReconcileRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check = ReconciliationService.reconcile_account(
            pk, repair=serializer.validated_data["repair"]
        )
        return Response(BalanceCheckSerializer(check).data)


@extend_schema_view(
    retrieve=extend_schema(
        operation_id="get_ledger_entry",
        summary="Get entry",
        responses={200: LedgerEntrySerializer},
        tags=["Ledger - Entries"],
    ),
    update=extend_schema(
        operation_id="update_ledger_entry",
        summary="Edit entry",
        description="Reverts the entry's old delta and applies the new one.",
        request=EntryUpdateSerializer,
        responses={200: LedgerEntrySerializer},
        tags=["Ledger - Entries"],
    ),
    partial_update=extend_schema(
        operation_id="partial_update_ledger_entry",
        summary="Partially edit entry",
        request=EntryUpdateSerializer,
        responses={200: LedgerEntrySerializer},
        tags=["Ledger - Entries"],
    ),
    destroy=extend_schema(
        operation_id="delete_ledger_entry",
        summary="Delete entry",
        description="Reverts the entry's delta and removes it.",
        responses={204: None},
        tags=["Ledger - Entries"],
    ),
)
class LedgerEntryViewSet(LedgerViewSetMixin, viewsets.GenericViewSet):
    """Retrieve, edit and delete single ledger entries."""

    serializer_class = LedgerEntrySerializer

    def retrieve(self, request, pk=None):
        entry = ReconciliationService.get_entry(pk)
        return Response(LedgerEntrySerializer(entry).data)

    def update(self, request, pk=None, partial=False):
        serializer = EntryUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        entry = ReconciliationService.update_entry(pk, serializer.to_update())
        return Response(LedgerEntrySerializer(entry).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        ReconciliationService.delete_entry(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    retrieve=extend_schema(
        operation_id="get_ledger_transaction",
        summary="Get transaction",
        responses={200: LedgerTransactionSerializer},
        tags=["Ledger - Transactions"],
    ),
    update=extend_schema(
        operation_id="update_ledger_transaction",
        summary="Edit transaction",
        description="Reverts the transaction's old delta and applies the new one.",
        request=TransactionUpdateSerializer,
        responses={200: LedgerTransactionSerializer},
        tags=["Ledger - Transactions"],
    ),
    partial_update=extend_schema(
        operation_id="partial_update_ledger_transaction",
        summary="Partially edit transaction",
        request=TransactionUpdateSerializer,
        responses={200: LedgerTransactionSerializer},
        tags=["Ledger - Transactions"],
    ),
    destroy=extend_schema(
        operation_id="delete_ledger_transaction",
        summary="Delete transaction",
        description="Reverts the transaction's delta and removes it.",
        responses={204: None},
        tags=["Ledger - Transactions"],
    ),
)
class LedgerTransactionViewSet(LedgerViewSetMixin, viewsets.GenericViewSet):
    """Retrieve, edit and delete single transactions; received payments feed."""

    serializer_class = LedgerTransactionSerializer

    def get_permissions(self):
        if self.action == "received":
            return [IsAuthenticated()]
        return super().get_permissions()

    def retrieve(self, request, pk=None):
        txn = ReconciliationService.get_transaction(pk)
        return Response(LedgerTransactionSerializer(txn).data)

    def update(self, request, pk=None, partial=False):
        serializer = TransactionUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        txn = ReconciliationService.update_transaction(pk, serializer.to_update())
        return Response(LedgerTransactionSerializer(txn).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        ReconciliationService.delete_transaction(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="list_received_payments",
        summary="All received payments",
        description=(
            "Credit entries and payment_received transactions across all accounts, "
            "shaped as payment rows with invoice numbers. Available to any "
            "authenticated user."
        ),
        responses={200: ReceivedPaymentSerializer(many=True)},
        tags=["Ledger - Reports"],
    )
    @action(detail=False, methods=["get"])
    def received(self, request):
        rows = ReportingService.received_payments()
        return Response(ReceivedPaymentSerializer(rows, many=True).data)
