"""
Ledger service layer.

Services:
    AccountService: Account create/read/update/cascade delete
    ReconciliationService: Entries, transactions and balance maintenance
    ReportingService: Dashboard, combined feed and payment reports

Usage:
    from ledger.services import AccountService, ReconciliationService
"""

from .accounts import AccountService
from .identifiers import next_account_id, next_entry_id, next_transaction_id
from .reconciliation import ReconciliationService
from .reporting import ReportingService, invoice_number

__all__ = [
    "AccountService",
    "ReconciliationService",
    "ReportingService",
    "invoice_number",
    "next_account_id",
    "next_entry_id",
    "next_transaction_id",
]
