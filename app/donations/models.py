"""
Persistent state of the donation ledger.

Models:
    LedgerState: One row per ledger instance (its own account + beneficiary)
    Donation: Accumulated net donations of one account to one ledger
    TransferIntent: Pay-out of one net donation, awaiting or past execution

Donation rows keep an auto-increment primary key. Enumeration orders by
it, so accounts come back in the order they first donated and later
top-ups never move an entry.

Usage:
    from donations.models import Donation, LedgerState

    state = LedgerState.objects.get(contract_account_id="donations.testnet")
    state.donations.order_by("id")[0:50]
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from .constants import ACCOUNT_ID_MAX_LENGTH
from .fields import U128Field
from .validators import validate_account_id


class LedgerState(BaseModel):
    """
    Root record of a ledger instance.

    Exists from initialize() onward; its absence means the ledger is
    still uninitialized.

    Fields:
        contract_account_id: The ledger's own account (unique)
        beneficiary: Account that receives every net donation
    """

    contract_account_id = models.CharField(
        max_length=ACCOUNT_ID_MAX_LENGTH,
        unique=True,
        validators=[validate_account_id],
        help_text="Account that owns this ledger",
    )
    beneficiary = models.CharField(
        max_length=ACCOUNT_ID_MAX_LENGTH,
        validators=[validate_account_id],
        help_text="Account that receives net donations",
    )

    class Meta:
        ordering = ["contract_account_id"]
        verbose_name = "ledger state"

    def __str__(self) -> str:
        return f"{self.contract_account_id} -> {self.beneficiary}"


class Donation(BaseModel):
    """
    Running total of one account's net donations to a ledger.

    Totals only grow; there is no refund or withdrawal path.

    Constraints:
        - Unique (ledger, account_id)
    """

    ledger = models.ForeignKey(
        LedgerState,
        on_delete=models.PROTECT,
        related_name="donations",
        help_text="Ledger this donation total belongs to",
    )
    account_id = models.CharField(
        max_length=ACCOUNT_ID_MAX_LENGTH,
        validators=[validate_account_id],
        help_text="Donor account",
    )
    total_amount = U128Field(
        default=0,
        help_text="Accumulated net donations in minor units",
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["ledger", "account_id"],
                name="unique_donation_per_account",
            )
        ]

    def __str__(self) -> str:
        return f"{self.account_id}: {self.total_amount}"


class TransferStatus(models.TextChoices):
    """
    Lifecycle of a transfer intent.

    Values:
        PENDING: Recorded with its donation, not yet executed
        PROCESSING: Claimed by a worker, send in progress. An intent left
            here by a crashed worker may or may not have been sent and is
            not re-queued; it needs reconciliation
        SENT: Accepted by the transfer backend
        FAILED: Gave up after retries; needs reconciliation
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"


class TransferIntent(UUIDPrimaryKeyMixin, BaseModel):
    """
    Instruction to pay one net donation out to the beneficiary.

    Written in the same transaction as the donation it belongs to, then
    executed asynchronously by donations.tasks.execute_transfer_intent.
    A failed intent never reverts the donation.

    Fields:
        ledger: Ledger that issued the transfer
        donor_account_id: Account whose donation produced it
        receiver_account_id: Beneficiary at donation time
        amount: Net amount to send
        status: pending / processing / sent / failed
        attempts: Number of execution attempts so far
        backend_reference: Identifier returned by the transfer backend
        last_error: Error from the latest failed attempt
        sent_at: When the backend accepted the transfer
    """

    ledger = models.ForeignKey(
        LedgerState,
        on_delete=models.PROTECT,
        related_name="transfer_intents",
        help_text="Ledger that issued this transfer",
    )
    donor_account_id = models.CharField(
        max_length=ACCOUNT_ID_MAX_LENGTH,
        help_text="Donor whose donation produced this transfer",
    )
    receiver_account_id = models.CharField(
        max_length=ACCOUNT_ID_MAX_LENGTH,
        help_text="Beneficiary at the time of the donation",
    )
    amount = U128Field(help_text="Net amount to send in minor units")
    status = models.CharField(
        max_length=20,
        choices=TransferStatus.choices,
        default=TransferStatus.PENDING,
        db_index=True,
        help_text="Execution status",
    )
    attempts = models.PositiveIntegerField(
        default=0,
        help_text="Number of execution attempts",
    )
    backend_reference = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Identifier returned by the transfer backend",
    )
    last_error = models.TextField(
        null=True,
        blank=True,
        help_text="Error from the most recent failed attempt",
    )
    sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the transfer backend accepted the transfer",
    )

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["status", "created_at"],
                name="transfer_intent_status_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.amount} -> {self.receiver_account_id} ({self.status})"

    def mark_processing(self) -> None:
        """Claim the intent for one send attempt. Call with the row locked."""
        self.status = TransferStatus.PROCESSING
        self.attempts += 1
        self.save(update_fields=["status", "attempts", "updated_at"])

    def release_for_retry(self, error: str) -> None:
        """Return a failed attempt to PENDING so a retry can claim it."""
        self.status = TransferStatus.PENDING
        self.last_error = error
        self.save(update_fields=["status", "last_error", "updated_at"])

    def mark_sent(self, reference: str) -> None:
        """Record that the backend accepted the transfer."""
        self.status = TransferStatus.SENT
        self.backend_reference = reference
        self.last_error = None
        self.sent_at = timezone.now()
        self.save(
            update_fields=[
                "status",
                "backend_reference",
                "last_error",
                "sent_at",
                "updated_at",
            ]
        )

    def mark_failed(self, error: str) -> None:
        """Record that the transfer was abandoned."""
        self.status = TransferStatus.FAILED
        self.last_error = error
        self.save(update_fields=["status", "last_error", "updated_at"])
