"""
Ledger models.

Usage:
    from ledger.models import LedgerAccount, LedgerEntry, LedgerTransaction, EntryType
"""

from .account import AccountStatus, AccountType, LedgerAccount
from .entry import (
    EntryCategory,
    EntryPaymentMethod,
    EntryType,
    LedgerEntry,
    entry_delta,
)
from .sequence import SequenceCounter
from .transaction import (
    AdjustmentDirection,
    LedgerTransaction,
    TransactionPaymentMethod,
    TransactionType,
    transaction_delta,
)

__all__ = [
    "AccountStatus",
    "AccountType",
    "AdjustmentDirection",
    "EntryCategory",
    "EntryPaymentMethod",
    "EntryType",
    "LedgerAccount",
    "LedgerEntry",
    "LedgerTransaction",
    "SequenceCounter",
    "TransactionPaymentMethod",
    "TransactionType",
    "entry_delta",
    "transaction_delta",
]
