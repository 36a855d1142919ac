"""
Transfer sinks and backends.

The ledger pays every net donation out to its beneficiary, but it does not
move funds itself. It hands a Transfer to a TransferSink and moves on; the
sink decides when and how the transfer actually happens.

Sinks (called by the ledger, synchronously, inside its atomic section):
    RecordingTransferSink - keeps issued transfers in a list (tests)
    DatabaseTransferSink - writes a TransferIntent row and queues
        donations.tasks.execute_transfer_intent after commit

Backends (called by the Celery task, asynchronously):
    LoggingTransferBackend - logs the transfer and reports success
    get_transfer_backend() - instantiates DONATIONS_TRANSFER_BACKEND

The ledger never waits for settlement. A transfer that fails after its
donation was recorded is not rolled back; the intent ends up FAILED and
stays queryable for reconciliation.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from django.db import transaction
from django.utils.module_loading import import_string

from .conf import get_ledger_settings
from .models import LedgerState, TransferIntent
from .types import Transfer

logger = logging.getLogger(__name__)


@runtime_checkable
class TransferSink(Protocol):
    """Accepts transfer instructions from the ledger."""

    def issue(self, transfer: Transfer) -> Transfer:
        """
        Accept a transfer for later execution.

        Returns:
            The transfer, with intent_id filled in if the sink assigns one
        """
        ...


@runtime_checkable
class TransferBackend(Protocol):
    """Moves funds to a receiver account."""

    def send(self, receiver_id: str, amount: int, *, reference: str) -> str:
        """
        Send amount to receiver_id.

        Args:
            receiver_id: Destination account
            amount: Amount in minor units
            reference: Idempotency reference (the intent id)

        Returns:
            Backend-side identifier of the transfer

        Raises:
            TransferFailed: If the funds could not be sent
        """
        ...


class RecordingTransferSink:
    """Sink that only remembers what it was given."""

    def __init__(self) -> None:
        self.issued: list[Transfer] = []

    def issue(self, transfer: Transfer) -> Transfer:
        self.issued.append(transfer)
        return transfer


class DatabaseTransferSink:
    """
    Sink that persists each transfer as a TransferIntent.

    The intent is written in the caller's transaction, so it commits or
    rolls back together with the donation it pays out. Execution is queued
    with transaction.on_commit, so a worker never sees an intent whose
    donation was rolled back.

    Args:
        contract_account_id: Ledger the intents belong to
    """

    def __init__(self, contract_account_id: str) -> None:
        self.contract_account_id = contract_account_id

    def issue(self, transfer: Transfer) -> Transfer:
        # Import here to avoid circular imports
        from .tasks import execute_transfer_intent

        intent = TransferIntent.objects.create(
            ledger=LedgerState.objects.get(
                contract_account_id=self.contract_account_id
            ),
            donor_account_id=transfer.donor_id,
            receiver_account_id=transfer.receiver_id,
            amount=transfer.amount,
        )
        intent_id = str(intent.id)
        transaction.on_commit(lambda: execute_transfer_intent.delay(intent_id))

        logger.info(
            "Transfer intent recorded",
            extra={
                "intent_id": intent_id,
                "receiver_account_id": transfer.receiver_id,
                "amount": str(transfer.amount),
            },
        )
        return Transfer(
            receiver_id=transfer.receiver_id,
            amount=transfer.amount,
            donor_id=transfer.donor_id,
            intent_id=intent_id,
        )


class LoggingTransferBackend:
    """
    Backend that logs transfers instead of sending them.

    Default for development; production deployments point
    DONATIONS_TRANSFER_BACKEND at a backend for their payout rail.
    """

    def send(self, receiver_id: str, amount: int, *, reference: str) -> str:
        logger.info(
            f"Transfer of {amount} to {receiver_id}",
            extra={
                "receiver_account_id": receiver_id,
                "amount": str(amount),
                "reference": reference,
            },
        )
        return f"log:{reference}"


def get_transfer_backend() -> TransferBackend:
    """Instantiate the backend named by DONATIONS_TRANSFER_BACKEND."""
    backend_class = import_string(get_ledger_settings().transfer_backend)
    return backend_class()
