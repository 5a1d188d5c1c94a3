"""
External service adapters for the ledger.

Usage:
    from ledger.adapters import StripeAdapter, CreateOrderParams
"""

from .stripe_adapter import (
    CreateOrderParams,
    GatewayOrder,
    IdempotencyKeyGenerator,
    StripeAdapter,
    to_minor_units,
)

__all__ = [
    "CreateOrderParams",
    "GatewayOrder",
    "IdempotencyKeyGenerator",
    "StripeAdapter",
    "to_minor_units",
]
