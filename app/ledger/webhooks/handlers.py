"""
Gateway webhook event handlers.

Handlers are registered per event type and receive the verified event
payload. They may only attach gateway references to existing
transactions; balances are never changed from a webhook.

Usage:
    from ledger.webhooks.handlers import dispatch_webhook, register_handler

    @register_handler("payment_intent.succeeded")
    def handle_payment_intent_succeeded(event_data: dict) -> None:
        ...

    dispatch_webhook(event_data)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ledger.services import ReconciliationService

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict[str, Any]], None]

# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, EventHandler] = {}


def register_handler(event_type: str) -> Callable[[EventHandler], EventHandler]:
    """Decorator registering a handler for one gateway event type."""

    def decorator(func: EventHandler) -> EventHandler:
        WEBHOOK_HANDLERS[event_type] = func
        return func

    return decorator


def dispatch_webhook(event_data: dict[str, Any]) -> bool:
    """
    Route a verified event to its handler.

    Returns:
        True if a handler ran, False if the event type has no handler
    """
    event_type = event_data.get("type")
    handler = WEBHOOK_HANDLERS.get(event_type)
    if handler is None:
        logger.info(
            f"No handler registered for event type: {event_type}",
            extra={"event_id": event_data.get("id")},
        )
        return False

    handler(event_data)
    return True


@register_handler("payment_intent.succeeded")
def handle_payment_intent_succeeded(event_data: dict[str, Any]) -> None:
    """
    Attach the payment reference to the transaction created for the order.

    The payment id is the intent's latest charge when present, otherwise the
    intent id itself.
    """
    intent = event_data.get("data", {}).get("object", {})
    order_id = intent.get("id")
    if not order_id:
        logger.warning(
            "payment_intent.succeeded without an intent id",
            extra={"event_id": event_data.get("id")},
        )
        return

    payment_id = intent.get("latest_charge") or order_id
    ReconciliationService.attach_gateway_payment(order_id, payment_id)
