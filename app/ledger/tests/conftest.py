"""
Pytest fixtures for ledger tests.

Usage:
    def test_create_entry(account, admin_client):
        response = admin_client.post(...)

    def test_online_payment(account, fake_gateway):
        fake_gateway.next_order_id = "pi_test_123"
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminUserFactory, UserFactory
from ledger.adapters import GatewayOrder
from ledger.services import AccountService, ReconciliationService
from ledger.types import CreateAccountParams


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# User and Client Fixtures
# =============================================================================


@pytest.fixture
def admin_user(db):
    """User holding the admin role."""
    return AdminUserFactory()


@pytest.fixture
def salesperson(db):
    return UserFactory()


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def salesperson_client(salesperson):
    return _client_for(salesperson)


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


# =============================================================================
# Account Fixtures
# =============================================================================


@pytest.fixture
def account(db, admin_user):
    """Active customer account created through the service (balance 0)."""
    return AccountService.create_account(
        CreateAccountParams(
            name="Sharma Traders",
            account_type="customer",
            contact_phone="+91 9800000001",
        ),
        created_by=admin_user,
    )


@pytest.fixture
def other_account(db, admin_user):
    return AccountService.create_account(
        CreateAccountParams(name="Gupta Supplies", account_type="supplier"),
        created_by=admin_user,
    )


# =============================================================================
# Gateway Fixtures
# =============================================================================


@pytest.fixture
def fake_gateway():
    """
    Inject a mock gateway adapter into ReconciliationService.

    create_order returns a GatewayOrder with id "pi_test_order_1" unless the
    test reconfigures return_value or side_effect.
    """
    adapter = MagicMock()
    adapter.create_order.return_value = GatewayOrder(
        id="pi_test_order_1",
        status="requires_payment_method",
        amount_minor=25000,
        currency="inr",
    )
    ReconciliationService.set_gateway_adapter(adapter)
    yield adapter
    ReconciliationService.set_gateway_adapter(None)


@pytest.fixture(autouse=True)
def reset_gateway_adapter():
    """Never let an injected adapter leak between tests."""
    yield
    ReconciliationService.set_gateway_adapter(None)


# =============================================================================
# Helpers
# =============================================================================


@pytest.fixture
def assert_balanced():
    """Assert the stored balance equals the recomputed one (and optionally a value)."""

    def _check(account, expected: str | None = None):
        account.refresh_from_db()
        computed = ReconciliationService.compute_balance(account.id)
        assert account.balance == computed
        if expected is not None:
            assert account.balance == Decimal(expected)

    return _check
