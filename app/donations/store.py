"""
State stores for the donation ledger.

The ledger never talks to a storage engine directly. It reads and writes
its two fields (beneficiary and the donation totals) through a LedgerStore,
which the host provides:

    InMemoryLedgerStore - dict-backed, for tests and scripts
    DatabaseLedgerStore - Django ORM, one LedgerState row per ledger

Enumeration order is first-insertion order in both stores and is never
changed by later writes to an existing key.

Usage:
    from donations.store import DatabaseLedgerStore

    store = DatabaseLedgerStore("donations.testnet")
    with store.atomic():
        total = store.get_donation("donor_a") or 0
        store.set_donation("donor_a", total + 1000)
"""

from __future__ import annotations

import contextlib
from itertools import islice
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import Donation, LedgerState
from .types import DonationRecord

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import ContextManager

# Largest OFFSET/LIMIT a SQL backend accepts (signed 64-bit)
MAX_ROW_INDEX = 2**63 - 1


@runtime_checkable
class LedgerStore(Protocol):
    """
    Protocol for ledger state storage.

    Implementations must keep a stable enumeration order: entries come
    back in the order their keys were first written.
    """

    def atomic(self) -> ContextManager[None]:
        """
        Open a section with exclusive access to the ledger's state.

        Writes made inside the section become visible together, and no
        other section on the same ledger interleaves with it.
        """
        ...

    def state_exists(self) -> bool:
        """Return True once the ledger has been initialized."""
        ...

    def create_state(self, beneficiary: str) -> bool:
        """
        Create the ledger's state with an empty donation map.

        Returns:
            False if state already existed (nothing is changed)
        """
        ...

    def get_beneficiary(self) -> str | None:
        """Return the beneficiary, or None before initialization."""
        ...

    def set_beneficiary(self, beneficiary: str) -> None:
        """Replace the beneficiary."""
        ...

    def get_donation(self, account_id: str) -> int | None:
        """Return the recorded total for account_id, or None if absent."""
        ...

    def set_donation(self, account_id: str, total: int) -> None:
        """Insert or overwrite the total for account_id."""
        ...

    def count(self) -> int:
        """Return the number of distinct donor accounts."""
        ...

    def iter_donations(self, offset: int, limit: int) -> Iterator[DonationRecord]:
        """Yield at most limit records starting at the offset-th entry."""
        ...


class InMemoryLedgerStore:
    """
    LedgerStore kept in process memory.

    Relies on dict insertion order for enumeration. Offers no locking of
    its own: callers serialize access, as the ledger's host does.
    """

    def __init__(self) -> None:
        self._beneficiary: str | None = None
        self._donations: dict[str, int] = {}

    def atomic(self) -> ContextManager[None]:
        return contextlib.nullcontext()

    def state_exists(self) -> bool:
        return self._beneficiary is not None

    def create_state(self, beneficiary: str) -> bool:
        if self._beneficiary is not None:
            return False
        self._beneficiary = beneficiary
        self._donations = {}
        return True

    def get_beneficiary(self) -> str | None:
        return self._beneficiary

    def set_beneficiary(self, beneficiary: str) -> None:
        self._beneficiary = beneficiary

    def get_donation(self, account_id: str) -> int | None:
        return self._donations.get(account_id)

    def set_donation(self, account_id: str, total: int) -> None:
        self._donations[account_id] = total

    def count(self) -> int:
        return len(self._donations)

    def iter_donations(self, offset: int, limit: int) -> Iterator[DonationRecord]:
        size = len(self._donations)
        if offset >= size:
            return
        for account_id, total in islice(
            self._donations.items(), offset, min(offset + limit, size)
        ):
            yield DonationRecord(account_id=account_id, total_amount=total)


class DatabaseLedgerStore:
    """
    LedgerStore backed by the LedgerState and Donation models.

    atomic() opens a database transaction and locks the ledger's state
    row with SELECT ... FOR UPDATE, so concurrent requests against the
    same ledger run one after another. Backends without row locks
    (SQLite) serialize writers on their own.

    Args:
        contract_account_id: The ledger's own account, which keys its
            LedgerState row
    """

    def __init__(self, contract_account_id: str) -> None:
        self.contract_account_id = contract_account_id

    def _states(self):
        return LedgerState.objects.filter(contract_account_id=self.contract_account_id)

    def _donations(self):
        return Donation.objects.filter(
            ledger__contract_account_id=self.contract_account_id
        )

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction.atomic():
            # Lock the root row; absent before initialization
            list(self._states().select_for_update().values_list("id", flat=True))
            yield

    def state_exists(self) -> bool:
        return self._states().exists()

    def create_state(self, beneficiary: str) -> bool:
        try:
            with transaction.atomic():
                _, created = LedgerState.objects.get_or_create(
                    contract_account_id=self.contract_account_id,
                    defaults={"beneficiary": beneficiary},
                )
        except IntegrityError:
            # Another process created it between our lookup and insert
            return False
        return created

    def get_beneficiary(self) -> str | None:
        return self._states().values_list("beneficiary", flat=True).first()

    def set_beneficiary(self, beneficiary: str) -> None:
        state = self._states().get()
        state.beneficiary = beneficiary
        state.save(update_fields=["beneficiary", "updated_at"])

    def get_donation(self, account_id: str) -> int | None:
        return (
            self._donations()
            .filter(account_id=account_id)
            .values_list("total_amount", flat=True)
            .first()
        )

    def set_donation(self, account_id: str, total: int) -> None:
        updated = (
            self._donations()
            .filter(account_id=account_id)
            .update(total_amount=total, updated_at=timezone.now())
        )
        if not updated:
            Donation.objects.create(
                ledger=self._states().get(),
                account_id=account_id,
                total_amount=total,
            )

    def count(self) -> int:
        return self._donations().count()

    def iter_donations(self, offset: int, limit: int) -> Iterator[DonationRecord]:
        if limit <= 0 or offset >= MAX_ROW_INDEX:
            return
        stop = min(offset + limit, MAX_ROW_INDEX)
        rows = (
            self._donations()
            .order_by("id")
            .values_list("account_id", "total_amount")[offset:stop]
        )
        for account_id, total in rows:
            yield DonationRecord(account_id=account_id, total_amount=total)
