"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.
Expected failures are raised as core.exceptions subclasses and rendered
by the DRF exception handler.

Usage:
    from core.services import BaseService

    class AccountService(BaseService):
        @classmethod
        def delete_account(cls, account_id):
            with cls.atomic():
                ...
            cls.get_logger().info("Account deleted", extra={"account_id": str(account_id)})
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Raise core.exceptions subclasses for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back. Nested use creates a savepoint.

        Example:
            with cls.atomic():
                entry = LedgerEntry.objects.create(...)
                cls._apply_delta(account.pk, entry.signed_amount)
                # If the balance update fails, the entry is rolled back too
        """
        with transaction.atomic():
            yield
