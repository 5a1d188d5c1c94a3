"""
URL configuration for the ledger app.

Mounted at /api/v1/ledger/ (see config/urls.py). See ledger.views for the
endpoint list.
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from ledger.views import (
    LedgerAccountViewSet,
    LedgerEntryViewSet,
    LedgerTransactionViewSet,
)
from ledger.webhooks.views import stripe_webhook

app_name = "ledger"

router = DefaultRouter()
router.register(r"accounts", LedgerAccountViewSet, basename="account")
router.register(r"entries", LedgerEntryViewSet, basename="entry")
router.register(r"transactions", LedgerTransactionViewSet, basename="transaction")

urlpatterns = [
    path("webhooks/stripe/", stripe_webhook, name="stripe-webhook"),
    *router.urls,
]
