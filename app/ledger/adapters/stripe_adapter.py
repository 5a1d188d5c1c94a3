"""
Stripe adapter for the ledger's payment gateway needs.

The ledger only needs two things from the gateway:
- create an order (a PaymentIntent) for an online payment transaction
- verify incoming webhook signatures

All Stripe calls go through this adapter to get consistent timeouts,
idempotency keys, structured logging, and translation of Stripe SDK
errors into ledger GatewayError subclasses.

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_WEBHOOK_SECRET: Webhook signing secret
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- LEDGER_CURRENCY: Currency for gateway orders (default: 'inr')

Usage:
    from ledger.adapters import CreateOrderParams, StripeAdapter

    order = StripeAdapter.create_order(
        CreateOrderParams(
            amount=Decimal("250.00"),
            currency="inr",
            idempotency_key=IdempotencyKeyGenerator.generate("create_order", txn_pk),
        )
    )
    order.id  # "pi_..."
"""

from __future__ import annotations

import hashlib
import logging
import time
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import stripe
from django.conf import settings

from ledger.exceptions import GatewayRequestError, GatewayUnavailableError


# =============================================================================
# Data Types
# =============================================================================


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount (rupees, dollars) to minor units (paise, cents)."""
    return int((amount * 100).to_integral_value())


@dataclass
class CreateOrderParams:
    """
    Parameters for creating a gateway order.

    Attributes:
        amount: Amount in major currency units (converted to minor units on send)
        currency: ISO 4217 currency code
        idempotency_key: Unique key for idempotent creation
        metadata: Key-value pairs attached to the order
    """

    amount: Decimal
    currency: str
    idempotency_key: str
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if not self.idempotency_key:
            raise ValueError("idempotency_key is required")
        if not self.currency:
            raise ValueError("currency is required")

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.amount)


@dataclass
class GatewayOrder:
    """
    Result of creating a gateway order.

    Attributes:
        id: Gateway order identifier (PaymentIntent id, pi_xxx)
        status: Gateway status string
        amount_minor: Amount in minor units as accepted by the gateway
        currency: Currency code
        raw_response: Full gateway response (for debugging)
    """

    id: str
    status: str
    amount_minor: int
    currency: str
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Idempotency Key Generator
# =============================================================================


class IdempotencyKeyGenerator:
    """
    Generate idempotency keys for Stripe API calls.

    Format: "{operation}:{entity_id}:{attempt}:{hash}"

    Example:
        key = IdempotencyKeyGenerator.generate("create_order", transaction_pk)
        # "create_order:550e8400-e29b-41d4-a716-446655440000:1:a1b2c3d4"
    """

    @staticmethod
    def generate(
        operation: str,
        entity_id: uuid.UUID | str,
        attempt: int = 1,
    ) -> str:
        entity_str = str(entity_id)
        hash_input = f"{operation}:{entity_str}:{attempt}:{settings.SECRET_KEY}"
        short_hash = hashlib.sha256(hash_input.encode()).hexdigest()[:8]
        return f"{operation}:{entity_str}:{attempt}:{short_hash}"


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for the Stripe operations the ledger uses.

    All methods are class-level - no instance state is maintained.
    """

    @staticmethod
    def _configure_stripe() -> None:
        """Configure Stripe client with API key and timeout."""
        stripe.api_key = settings.STRIPE_SECRET_KEY
        timeout = getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def create_order(cls, params: CreateOrderParams) -> GatewayOrder:
        """
        Create a gateway order for an online payment.

        Args:
            params: Order amount, currency and idempotency key

        Returns:
            GatewayOrder whose id becomes the transaction's gateway_order_id

        Raises:
            GatewayUnavailableError: Stripe unreachable, rate limited or erroring
            GatewayRequestError: Stripe rejected the request
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "create_order",
            "amount_minor": params.amount_minor,
            "currency": params.currency,
            "idempotency_key": params.idempotency_key,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            intent = stripe.PaymentIntent.create(
                amount=params.amount_minor,
                currency=params.currency,
                metadata=params.metadata,
                idempotency_key=params.idempotency_key,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Stripe operation completed",
            extra={
                **log_context,
                "gateway_order_id": intent.id,
                "status": intent.status,
                "duration_ms": duration_ms,
            },
        )

        return GatewayOrder(
            id=intent.id,
            status=intent.status,
            amount_minor=intent.amount,
            currency=intent.currency,
            raw_response=intent.to_dict(),
        )

    @classmethod
    def verify_webhook_signature(cls, payload: bytes, signature: str) -> dict[str, Any]:
        """
        Verify and parse a Stripe webhook event.

        Args:
            payload: Raw webhook payload bytes
            signature: Stripe-Signature header value

        Returns:
            Parsed event data dict

        Raises:
            GatewayRequestError: Invalid signature or malformed payload
        """
        try:
            event = stripe.Webhook.construct_event(
                payload,
                signature,
                settings.STRIPE_WEBHOOK_SECRET,
            )
        except stripe.SignatureVerificationError as e:
            raise GatewayRequestError(
                "Invalid webhook signature",
                gateway_code="signature_verification_failed",
                details={"error": str(e)},
            )
        except ValueError as e:
            raise GatewayRequestError(
                "Malformed webhook payload",
                gateway_code="invalid_payload",
                details={"error": str(e)},
            )
        return event.to_dict()

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to ledger gateway exceptions.

        Raises:
            GatewayRequestError: Invalid request or authentication failure
            GatewayUnavailableError: Rate limit, connection or server error
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.InvalidRequestError):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise GatewayRequestError(str(error), gateway_code=error.code)

        if isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise GatewayRequestError(
                "Payment gateway authentication failed",
                gateway_code="authentication_error",
            )

        if isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise GatewayUnavailableError(
                "Payment gateway rate limit exceeded. Please retry.",
                gateway_code="rate_limit",
            )

        if isinstance(error, stripe.APIConnectionError):
            logger.error("Connection error to Stripe", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Could not connect to the payment gateway. Please retry.",
                gateway_code="api_connection_error",
            )

        if isinstance(error, stripe.StripeError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Payment gateway error",
                gateway_code="api_error",
            )

        logger.error(
            f"Unexpected error from Stripe: {type(error).__name__}",
            extra=log_context,
            exc_info=True,
        )
        raise GatewayUnavailableError(
            "Payment gateway error",
            gateway_code="unknown_error",
        )
