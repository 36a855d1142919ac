"""
Donation ledger service.

DonationLedger holds the accounting rules: it accepts deposits, keeps the
storage cost, adds the rest to the donor's running total and instructs a
transfer of that net amount to the beneficiary. Storage, caller identity
and the transfer itself are supplied by the host (see donations.store,
donations.types.CallContext and donations.transfers).

Operations:
    initialize(context, beneficiary)         - privileged, once
    donate(context)                          - any caller, value attached
    get_donation_for_account(account_id)     - total for one account, 0 if none
    total_donations()                        - number of donor accounts
    get_donations(from_index, limit)         - page of DonationRecords
    beneficiary()                            - current beneficiary
    change_beneficiary(context, beneficiary) - privileged

Every check runs before the first write, so a rejected call changes
nothing and issues no transfer.

Usage:
    from donations.services import get_ledger
    from donations.types import CallContext

    ledger = get_ledger()
    receipt = ledger.donate(
        CallContext(
            predecessor_account_id="donor_a",
            current_account_id="donations.testnet",
            attached_deposit=10**24,
        )
    )
    receipt.total  # 999000000000000000000000

    for record in ledger.get_donations(from_index=0, limit=10):
        print(record.account_id, record.total_amount)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .conf import get_ledger_settings
from .constants import DEFAULT_PAGE_LIMIT, MAX_AMOUNT, STORAGE_COST
from .exceptions import (
    AlreadyInitialized,
    InsufficientAttachment,
    InvalidAccountId,
    NotInitialized,
    Overflow,
    Unauthorized,
)
from .store import DatabaseLedgerStore
from .transfers import DatabaseTransferSink
from .types import DonationReceipt, Transfer
from .validators import is_valid_account_id

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .store import LedgerStore
    from .transfers import TransferSink
    from .types import CallContext, DonationRecord

logger = logging.getLogger(__name__)


class DonationPage:
    """
    Lazy, restartable page of donation records.

    Nothing is read until iteration starts, and every iteration reads
    the store again, so iterating twice over unchanged state yields the
    same records twice.
    """

    def __init__(self, store: LedgerStore, from_index: int, limit: int) -> None:
        self._store = store
        self.from_index = from_index
        self.limit = limit

    def __iter__(self) -> Iterator[DonationRecord]:
        return iter(self._store.iter_donations(self.from_index, self.limit))

    def __repr__(self) -> str:
        return f"DonationPage(from_index={self.from_index}, limit={self.limit})"


class DonationLedger:
    """
    Accounting core of the donation ledger.

    Args:
        store: State storage supplied by the host
        transfers: Sink that receives one Transfer per successful donation
        storage_cost: Fixed fee kept back from each deposit
        default_page_limit: Page size of get_donations() without a limit
    """

    def __init__(
        self,
        store: LedgerStore,
        transfers: TransferSink,
        storage_cost: int = STORAGE_COST,
        default_page_limit: int = DEFAULT_PAGE_LIMIT,
    ) -> None:
        self._store = store
        self._transfers = transfers
        self.storage_cost = storage_cost
        self.default_page_limit = default_page_limit

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    @staticmethod
    def _require_self(context: CallContext, operation: str) -> None:
        if not context.is_self():
            logger.warning(
                f"Rejected private call to {operation}",
                extra={
                    "caller": context.predecessor_account_id,
                    "operation": operation,
                },
            )
            raise Unauthorized(context.predecessor_account_id, operation)

    @staticmethod
    def _require_account_id(account_id: str) -> None:
        if not is_valid_account_id(account_id):
            raise InvalidAccountId(account_id)

    def _require_beneficiary(self) -> str:
        beneficiary = self._store.get_beneficiary()
        if beneficiary is None:
            raise NotInitialized("The ledger is not initialized")
        return beneficiary

    # ------------------------------------------------------------------
    # Construction and administration
    # ------------------------------------------------------------------

    def initialize(self, context: CallContext, beneficiary: str) -> None:
        """
        Create the ledger's state with an empty donation map.

        Private: only the ledger's own account may call it.

        Raises:
            Unauthorized: Caller is not the ledger itself
            InvalidAccountId: beneficiary is malformed
            AlreadyInitialized: State already exists
        """
        self._require_self(context, "initialize")
        self._require_account_id(beneficiary)

        if self._store.state_exists() or not self._store.create_state(beneficiary):
            raise AlreadyInitialized(
                "Already initialized",
                details={"contract_account_id": context.current_account_id},
            )

        logger.info(
            f"Ledger initialized with beneficiary {beneficiary}",
            extra={
                "contract_account_id": context.current_account_id,
                "beneficiary": beneficiary,
            },
        )

    def change_beneficiary(self, context: CallContext, beneficiary: str) -> None:
        """
        Replace the beneficiary.

        Private: only the ledger's own account may call it, since it
        redirects where every future donation is paid. The new account's
        reachability is not checked; the transfer backend finds out.

        Raises:
            Unauthorized: Caller is not the ledger itself
            InvalidAccountId: beneficiary is malformed
            NotInitialized: The ledger has no state yet
        """
        self._require_self(context, "change_beneficiary")
        self._require_account_id(beneficiary)

        with self._store.atomic():
            previous = self._require_beneficiary()
            self._store.set_beneficiary(beneficiary)

        logger.info(
            f"Beneficiary changed from {previous} to {beneficiary}",
            extra={"previous": previous, "beneficiary": beneficiary},
        )

    # ------------------------------------------------------------------
    # Accounting
    # ------------------------------------------------------------------

    def donate(self, context: CallContext) -> DonationReceipt:
        """
        Record one donation and pay its net amount to the beneficiary.

        The storage cost is kept back from the attached deposit; the rest
        is added to the caller's total and handed to the transfer sink
        after the total is written.

        Returns:
            DonationReceipt with the net amount, new total and transfer

        Raises:
            InvalidAccountId: Caller is not a valid account identity
            NotInitialized: The ledger has no state yet
            InsufficientAttachment: Deposit below the storage cost
            Overflow: New total would exceed 2**128 - 1
        """
        donor = context.predecessor_account_id
        attached = context.attached_deposit
        self._require_account_id(donor)

        with self._store.atomic():
            beneficiary = self._require_beneficiary()

            if attached < self.storage_cost:
                logger.warning(
                    f"Donation from {donor} below storage cost",
                    extra={
                        "donor": donor,
                        "attached": str(attached),
                        "required": str(self.storage_cost),
                    },
                )
                raise InsufficientAttachment(
                    required=self.storage_cost, attached=attached
                )

            amount = attached - self.storage_cost
            current = self._store.get_donation(donor) or 0
            total = current + amount
            if total > MAX_AMOUNT:
                raise Overflow(donor, current=current, amount=amount)

            self._store.set_donation(donor, total)

            logger.info(
                f"Thank you {donor} for donating {amount}! "
                f"Your total donations are now {total}",
                extra={
                    "donor": donor,
                    "amount": str(amount),
                    "total": str(total),
                },
            )

            transfer = self._transfers.issue(
                Transfer(receiver_id=beneficiary, amount=amount, donor_id=donor)
            )

        return DonationReceipt(
            donor=donor, amount=amount, total=total, transfer=transfer
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_donation_for_account(self, account_id: str) -> int:
        """Return the total donated by account_id, 0 if it never donated."""
        self._require_beneficiary()
        return self._store.get_donation(account_id) or 0

    def total_donations(self) -> int:
        """Return the number of distinct donor accounts."""
        self._require_beneficiary()
        return self._store.count()

    def get_donations(
        self,
        from_index: int | None = None,
        limit: int | None = None,
    ) -> DonationPage:
        """
        Return a page of donation records in first-donation order.

        Args:
            from_index: 0-based index of the first record (default 0)
            limit: Maximum records in the page (default 50)

        Returns:
            DonationPage; empty when from_index is past the end or
            limit is 0

        Raises:
            ValueError: from_index or limit is negative
        """
        start = 0 if from_index is None else from_index
        size = self.default_page_limit if limit is None else limit
        if start < 0 or size < 0:
            raise ValueError("from_index and limit must not be negative")

        self._require_beneficiary()
        return DonationPage(self._store, start, size)

    def beneficiary(self) -> str:
        """Return the current beneficiary."""
        return self._require_beneficiary()


def get_ledger(contract_account_id: str | None = None) -> DonationLedger:
    """
    Build a database-backed DonationLedger from settings.

    Args:
        contract_account_id: Ledger to open (default DONATIONS_CONTRACT_ACCOUNT_ID)
    """
    conf = get_ledger_settings()
    account_id = contract_account_id or conf.contract_account_id
    return DonationLedger(
        store=DatabaseLedgerStore(account_id),
        transfers=DatabaseTransferSink(account_id),
        storage_cost=conf.storage_cost,
        default_page_limit=conf.default_page_limit,
    )
