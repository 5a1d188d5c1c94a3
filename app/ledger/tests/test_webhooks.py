"""
Tests for the gateway webhook endpoint and handlers.

Tests cover:
- Signature checks at the endpoint
- Dispatch to registered handlers
- payment_intent.succeeded attaching the payment reference
"""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.urls import reverse

from ledger.exceptions import GatewayRequestError
from ledger.models import LedgerTransaction
from ledger.tests.factories import LedgerTransactionFactory
from ledger.webhooks.handlers import (
    WEBHOOK_HANDLERS,
    dispatch_webhook,
    handle_payment_intent_succeeded,
)

VERIFY = "ledger.webhooks.views.StripeAdapter.verify_webhook_signature"


def succeeded_event(intent_id: str = "pi_order_1", latest_charge: str | None = "ch_1"):
    intent = {"id": intent_id, "object": "payment_intent"}
    if latest_charge:
        intent["latest_charge"] = latest_charge
    return {
        "id": "evt_1",
        "type": "payment_intent.succeeded",
        "data": {"object": intent},
    }


@pytest.fixture
def online_transaction(db):
    return LedgerTransactionFactory(
        payment_method="online",
        transaction_id="pi_order_1",
        gateway_order_id="pi_order_1",
        amount=Decimal("250.00"),
    )


# =============================================================================
# Handlers
# =============================================================================


class TestDispatch:
    def test_succeeded_handler_registered(self):
        assert WEBHOOK_HANDLERS["payment_intent.succeeded"] is (
            handle_payment_intent_succeeded
        )

    def test_unhandled_event_type(self):
        assert dispatch_webhook({"id": "evt_2", "type": "charge.refunded"}) is False


@pytest.mark.django_db
class TestPaymentIntentSucceeded:
    def test_attaches_latest_charge(self, online_transaction):
        assert dispatch_webhook(succeeded_event()) is True

        online_transaction.refresh_from_db()
        assert online_transaction.gateway_payment_id == "ch_1"

    def test_falls_back_to_intent_id(self, online_transaction):
        handle_payment_intent_succeeded(succeeded_event(latest_charge=None))

        online_transaction.refresh_from_db()
        assert online_transaction.gateway_payment_id == "pi_order_1"

    def test_balance_untouched(self, online_transaction):
        account = online_transaction.account
        balance_before = account.balance

        handle_payment_intent_succeeded(succeeded_event())

        account.refresh_from_db()
        assert account.balance == balance_before

    def test_unknown_order_is_ignored(self, online_transaction):
        handle_payment_intent_succeeded(succeeded_event(intent_id="pi_other"))

        online_transaction.refresh_from_db()
        assert online_transaction.gateway_payment_id is None

    def test_event_without_intent(self, db):
        handle_payment_intent_succeeded({"id": "evt_3", "data": {}})

        assert not LedgerTransaction.objects.exclude(gateway_payment_id=None).exists()


# =============================================================================
# Endpoint
# =============================================================================


@pytest.mark.django_db
class TestStripeWebhookView:
    def post(self, client, signature="t=1,v1=abc"):
        headers = {"HTTP_STRIPE_SIGNATURE": signature} if signature else {}
        return client.post(
            reverse("ledger:stripe-webhook"),
            data=b"{}",
            content_type="application/json",
            **headers,
        )

    def test_missing_signature(self, client):
        response = self.post(client, signature=None)

        assert response.status_code == 400

    def test_invalid_signature(self, client):
        with patch(VERIFY, side_effect=GatewayRequestError("Invalid webhook signature")):
            response = self.post(client)

        assert response.status_code == 400

    def test_event_missing_fields(self, client):
        with patch(VERIFY, return_value={"data": {}}):
            response = self.post(client)

        assert response.status_code == 400

    def test_dispatches_verified_event(self, client, online_transaction):
        with patch(VERIFY, return_value=succeeded_event()):
            response = self.post(client)

        assert response.status_code == 200
        online_transaction.refresh_from_db()
        assert online_transaction.gateway_payment_id == "ch_1"

    def test_unknown_order_acknowledged(self, client):
        with patch(VERIFY, return_value=succeeded_event(intent_id="pi_missing")):
            response = self.post(client)

        assert response.status_code == 200

    def test_get_not_allowed(self, client):
        response = client.get(reverse("ledger:stripe-webhook"))

        assert response.status_code == 405
