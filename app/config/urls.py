"""
URL configuration for the ledger backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        token/                     - Obtain JWT pair
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/ledger/                - Ledger endpoints
        accounts/                  - Account list/create
        accounts/{id}/             - Account detail/update/delete
        accounts/{id}/entries/     - Entries of an account (list/create)
        accounts/{id}/transactions/ - Transactions of an account (list/create)
        accounts/{id}/dashboard/   - Balance and totals
        accounts/{id}/combined-entries/ - Entries and transactions as one feed
        accounts/{id}/entries-from-payments/ - Entries sharing a transaction reference
        accounts/{id}/reconcile/   - Compare stored and recomputed balance (POST)
        entries/{id}/              - Entry detail/update/delete
        transactions/{id}/         - Transaction detail/update/delete
        transactions/received/     - Received payments across accounts
        webhooks/stripe/           - Stripe webhook endpoint (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("ledger/", include("ledger.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Ledger Admin"
admin.site.site_title = "Ledger Admin Portal"
admin.site.index_title = "Bookkeeping"
