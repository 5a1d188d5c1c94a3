"""
Webhook endpoint for the payment gateway.

The view verifies the signature and dispatches the event synchronously:
the only work a handler does is a single-row update, so there is nothing
to queue.

Usage:
    # In urls.py
    from ledger.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe-webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from ledger.adapters import StripeAdapter
from ledger.exceptions import GatewayRequestError

from .handlers import dispatch_webhook

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive a Stripe webhook event.

    Events for unknown gateway orders, and event types without a handler,
    are acknowledged with 200 so Stripe does not retry them.

    Returns:
        HttpResponse with status:
        - 200: Event accepted
        - 400: Missing or invalid signature, or malformed event
    """
    payload = request.body
    signature = request.headers.get("Stripe-Signature", "")

    if not signature:
        logger.warning("Webhook received without Stripe-Signature header")
        return HttpResponse("Missing signature", status=400)

    try:
        event_data = StripeAdapter.verify_webhook_signature(payload, signature)
    except GatewayRequestError as e:
        logger.warning(
            "Webhook signature verification failed",
            extra={"error": str(e)},
        )
        return HttpResponse("Invalid signature", status=400)

    event_id = event_data.get("id")
    event_type = event_data.get("type")
    if not event_id or not event_type:
        logger.warning("Webhook missing required fields")
        return HttpResponse("Invalid event", status=400)

    logger.info(
        f"Received Stripe webhook: {event_type}",
        extra={"event_id": event_id, "event_type": event_type},
    )

    dispatch_webhook(event_data)
    return HttpResponse("OK", status=200)
