"""
Celery tasks for ledger consistency.

Tasks:
- sweep_ledger_balances: Periodic task comparing every account's stored
  balance with the balance recomputed from its live records
- reconcile_single_account: On-demand check of one account

Usage:
    # Typically called via celery-beat (schedule created by migration 0002)
    from ledger.tasks import sweep_ledger_balances

    sweep_ledger_balances.delay()

    # Check one account, repairing drift
    reconcile_single_account.delay(str(account_id), repair=True)
"""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task
from django.conf import settings

from ledger.exceptions import AccountNotFound
from ledger.models import LedgerAccount

logger = logging.getLogger(__name__)


# =============================================================================
# Periodic Task: Balance Consistency Sweep
# =============================================================================


@shared_task(bind=True)
def sweep_ledger_balances(self, auto_repair: bool | None = None) -> dict:
    """
    Check every account's stored balance against its recomputed balance.

    Args:
        auto_repair: Overwrite drifting balances with the recomputed value.
            Defaults to the LEDGER_SWEEP_AUTO_REPAIR setting.

    Returns:
        Dict with:
        - status: "completed"
        - accounts_checked: Number of accounts checked
        - drifted: Number of accounts whose balance had drifted
        - repaired: Number of balances overwritten
        - drifts: One item per drifting account (account_id, stored, computed)
    """
    from ledger.services import ReconciliationService

    if auto_repair is None:
        auto_repair = getattr(settings, "LEDGER_SWEEP_AUTO_REPAIR", True)

    logger.info(
        "Starting ledger balance sweep",
        extra={"task_id": self.request.id, "auto_repair": auto_repair},
    )

    accounts_checked = 0
    drifts = []
    repaired = 0

    account_ids = list(
        LedgerAccount.objects.order_by("created_at").values_list("id", flat=True)
    )
    for account_id in account_ids:
        try:
            check = ReconciliationService.reconcile_account(
                account_id, repair=auto_repair
            )
        except AccountNotFound:
            # Deleted since the id list was read
            continue

        accounts_checked += 1
        if not check.is_balanced:
            drifts.append(
                {
                    "account_id": str(check.account_id),
                    "stored": str(check.stored),
                    "computed": str(check.computed),
                }
            )
        if check.repaired:
            repaired += 1

    result = {
        "status": "completed",
        "accounts_checked": accounts_checked,
        "drifted": len(drifts),
        "repaired": repaired,
        "drifts": drifts,
    }

    if drifts:
        logger.warning(
            "Ledger balance sweep found drift",
            extra={
                "task_id": self.request.id,
                "accounts_checked": accounts_checked,
                "drifted": len(drifts),
                "repaired": repaired,
            },
        )
    else:
        logger.info(
            "Ledger balance sweep completed",
            extra={"task_id": self.request.id, "accounts_checked": accounts_checked},
        )

    return result


# =============================================================================
# On-Demand Task: Single Account
# =============================================================================


@shared_task(bind=True)
def reconcile_single_account(self, account_id: str, repair: bool = False) -> dict:
    """
    Reconcile one account.

    Args:
        account_id: UUID of the LedgerAccount
        repair: Overwrite the stored balance on drift

    Returns:
        Dict with:
        - status: "ok", "drift", "repaired", "not_found" or "failed"
        - account_id: The ID processed
        - stored / computed: Balances as strings (when found)
    """
    from ledger.services import ReconciliationService

    logger.info(
        "Reconciling single ledger account",
        extra={"account_id": account_id, "repair": repair},
    )

    try:
        account_uuid = UUID(account_id)
    except ValueError:
        logger.error(
            "Invalid account ID format",
            extra={"account_id": account_id},
        )
        return {
            "status": "failed",
            "account_id": account_id,
            "error": "Invalid UUID format",
        }

    try:
        check = ReconciliationService.reconcile_account(account_uuid, repair=repair)
    except AccountNotFound:
        return {"status": "not_found", "account_id": account_id}

    if check.repaired:
        status = "repaired"
    elif check.is_balanced:
        status = "ok"
    else:
        status = "drift"

    return {
        "status": status,
        "account_id": account_id,
        "stored": str(check.stored),
        "computed": str(check.computed),
    }
