"""
Human-readable identifier generation.

Identifiers are numbered per kind and per calendar year from a
SequenceCounter row that is locked and incremented inside a database
transaction, so two concurrent creates never receive the same number.

Formats:
    account      LDG-<year>-<3-digit sequence>      LDG-2026-001
    entry        TXN-<year>-<6-digit sequence>      TXN-2026-000001
    cash         CASH-<year>-<6-digit sequence>     CASH-2026-000001
    upi          UPI-<year>-<6-digit sequence>      UPI-2026-000001
    online       ONLINE-<year>-<6-digit sequence>   ONLINE-2026-000001

Caller-supplied identifiers bypass the counter; the unique constraint on
the identifier column remains the authoritative collision check.

The counter row stays locked until the caller's outer transaction commits,
so gap-free numbering serializes generated-id creates of one kind across
all accounts, not just within one. Those transactions are short (one
insert and one balance update), and callers that need full parallelism
can supply their own identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ledger.models import SequenceCounter, TransactionPaymentMethod


@dataclass(frozen=True)
class IdentifierFormat:
    kind: str
    prefix: str
    width: int

    def render(self, year: int, value: int) -> str:
        return f"{self.prefix}-{year}-{value:0{self.width}d}"


ACCOUNT_FORMAT = IdentifierFormat(kind="account", prefix="LDG", width=3)
ENTRY_FORMAT = IdentifierFormat(kind="entry", prefix="TXN", width=6)
TRANSACTION_FORMATS = {
    TransactionPaymentMethod.CASH.value: IdentifierFormat("cash", "CASH", 6),
    TransactionPaymentMethod.UPI.value: IdentifierFormat("upi", "UPI", 6),
    TransactionPaymentMethod.ONLINE.value: IdentifierFormat("online", "ONLINE", 6),
}


def next_sequence_value(kind: str, year: int) -> int:
    """
    Atomically reserve the next value of a (kind, year) sequence.

    The counter row is locked with SELECT ... FOR UPDATE and incremented
    with an F() expression. When the caller's surrounding transaction rolls
    back, the increment rolls back with it.
    """
    with transaction.atomic():
        counter, _ = SequenceCounter.objects.select_for_update().get_or_create(
            kind=kind, year=year
        )
        SequenceCounter.objects.filter(pk=counter.pk).update(value=F("value") + 1)
        counter.refresh_from_db(fields=["value"])
        return counter.value


def _next(fmt: IdentifierFormat) -> str:
    year = timezone.now().year
    return fmt.render(year, next_sequence_value(fmt.kind, year))


def next_account_id() -> str:
    """Next LDG-<year>-<seq> identifier."""
    return _next(ACCOUNT_FORMAT)


def next_entry_id() -> str:
    """Next TXN-<year>-<seq> identifier."""
    return _next(ENTRY_FORMAT)


def next_transaction_id(payment_method: str) -> str:
    """Next CASH-/UPI-/ONLINE-<year>-<seq> identifier for the payment method."""
    return _next(TRANSACTION_FORMATS[str(payment_method)])
