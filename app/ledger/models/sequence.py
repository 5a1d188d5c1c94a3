"""
Identifier sequence counters.

One row per (kind, year). ledger.services.identifiers increments rows
under a row lock, so concurrent creates never observe the same value.
"""

from __future__ import annotations

from django.db import models


class SequenceCounter(models.Model):
    """
    Monotonic counter backing human-readable identifiers.

    Fields:
        kind: Identifier family (account, entry, cash, upi, online)
        year: Calendar year the numbering restarts on
        value: Last value handed out (0 before first use)
    """

    kind = models.CharField(
        max_length=16,
        help_text="Identifier family",
    )
    year = models.PositiveIntegerField(
        help_text="Calendar year of the sequence",
    )
    value = models.PositiveIntegerField(
        default=0,
        help_text="Last value handed out",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["kind", "year"],
                name="unique_sequence_per_kind_year",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.kind}/{self.year}={self.value}"
