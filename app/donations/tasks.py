"""
Celery tasks that execute transfer intents.

Tasks:
- execute_transfer_intent: Hand one pending intent to the transfer backend
- retry_pending_transfers: Periodic sweep re-queuing intents left pending

Usage:
    from donations.tasks import execute_transfer_intent

    execute_transfer_intent.delay(str(intent.id))

Note:
    The donation behind an intent is already recorded when these tasks
    run. A transfer that keeps failing is marked FAILED; the donation is
    never reverted.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from celery import shared_task
from django.db import transaction
from django.utils import timezone

from .conf import get_ledger_settings
from .exceptions import TransferFailed
from .models import TransferIntent, TransferStatus
from .transfers import get_transfer_backend

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Maximum intents re-queued per sweep
BATCH_SIZE = 100

# Pending intents younger than this are assumed to still be in flight
STALE_AFTER = timedelta(minutes=10)


# =============================================================================
# Task: Execute One Transfer Intent
# =============================================================================


@shared_task(
    bind=True,
    autoretry_for=(TransferFailed,),
    retry_backoff=True,
    retry_backoff_max=300,
    max_retries=None,
    acks_late=True,
)
def execute_transfer_intent(self, intent_id: str) -> dict:
    """
    Send the funds of one pending transfer intent.

    The intent is moved to PROCESSING under a row lock before the send, so
    a second delivery of the same intent (acks_late redelivery, the stale
    sweep or a duplicate delay) finds it claimed and skips it. A retryable
    failure returns it to PENDING for the next Celery retry.

    The retry cap is read from DONATIONS_TRANSFER_MAX_RETRIES on every
    run; Celery itself is left uncapped.

    Args:
        intent_id: UUID of the TransferIntent

    Returns:
        Dict with:
        - status: One of "sent", "failed", "already_processed", "not_found"
        - intent_id: The intent processed
        - backend_reference: Backend identifier if sent
        - error: Error message if failed

    Raises:
        TransferFailed: Re-raised to trigger Celery retry while retries remain
    """
    try:
        intent_uuid = UUID(str(intent_id))
    except ValueError:
        logger.error(f"Invalid intent_id format: {intent_id}")
        return {"status": "not_found", "intent_id": intent_id}

    with transaction.atomic():
        intent = (
            TransferIntent.objects.select_for_update().filter(id=intent_uuid).first()
        )
        if intent is None:
            logger.warning("Transfer intent not found", extra={"intent_id": intent_id})
            return {"status": "not_found", "intent_id": intent_id}

        # PROCESSING means another worker holds the send
        if intent.status != TransferStatus.PENDING:
            logger.info(
                "Transfer intent already processed, skipping",
                extra={"intent_id": intent_id, "current_status": intent.status},
            )
            return {
                "status": "already_processed",
                "intent_id": intent_id,
                "current_status": intent.status,
            }

        intent.mark_processing()

    backend = get_transfer_backend()
    try:
        reference = backend.send(
            intent.receiver_account_id,
            intent.amount,
            reference=str(intent.id),
        )
    except TransferFailed as e:
        if self.request.retries < get_ledger_settings().transfer_max_retries:
            intent.release_for_retry(str(e))
            logger.warning(
                "Transfer failed, will retry",
                extra={
                    "intent_id": intent_id,
                    "attempts": intent.attempts,
                    "celery_retries": self.request.retries,
                },
            )
            raise

        intent.mark_failed(str(e))
        logger.error(
            f"Transfer abandoned after {intent.attempts} attempts: {e}",
            extra={
                "intent_id": intent_id,
                "receiver_account_id": intent.receiver_account_id,
                "amount": str(intent.amount),
            },
        )
        return {"status": "failed", "intent_id": intent_id, "error": str(e)}

    intent.mark_sent(reference)
    logger.info(
        "Transfer sent",
        extra={
            "intent_id": intent_id,
            "receiver_account_id": intent.receiver_account_id,
            "amount": str(intent.amount),
            "backend_reference": reference,
        },
    )
    return {"status": "sent", "intent_id": intent_id, "backend_reference": reference}


# =============================================================================
# Periodic Task: Re-queue Stale Pending Intents
# =============================================================================


@shared_task
def retry_pending_transfers() -> dict:
    """
    Re-queue pending intents whose execution task never completed.

    Covers intents whose on_commit hook never reached the broker (process
    crash, broker outage). execute_transfer_intent skips intents that are
    no longer pending, so re-queuing one twice is harmless.

    Returns:
        Dict with queued_count
    """
    cutoff = timezone.now() - STALE_AFTER
    stale_ids = list(
        TransferIntent.objects.filter(
            status=TransferStatus.PENDING,
            updated_at__lte=cutoff,
        )
        .order_by("created_at")
        .values_list("id", flat=True)[:BATCH_SIZE]
    )

    for intent_id in stale_ids:
        execute_transfer_intent.delay(str(intent_id))

    logger.info(
        f"Pending transfer sweep complete: queued {len(stale_ids)} intents",
        extra={"queued_count": len(stale_ids)},
    )
    return {"queued_count": len(stale_ids)}
