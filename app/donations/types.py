"""
Data types passed between the donation ledger and its host.

Types:
    CallContext: What the host knows about the current call
    DonationRecord: One (account, total) pair read back from the ledger
    Transfer: Instruction to pay a net donation out to the beneficiary
    DonationReceipt: Outcome of a successful donate()

Usage:
    from donations.types import CallContext

    context = CallContext(
        predecessor_account_id="donor_a",
        current_account_id="donations.testnet",
        attached_deposit=10**24,
    )
    context.is_self()  # False
"""

from __future__ import annotations

from dataclasses import dataclass


def is_self(caller: str, current_account_id: str) -> bool:
    """Return True when the caller is the ledger's own account."""
    return caller == current_account_id


@dataclass(frozen=True)
class CallContext:
    """
    Host-supplied facts about one call into the ledger.

    The ledger never takes caller identity or attached value as ordinary
    parameters; both come from the host through this object.

    Attributes:
        predecessor_account_id: Account that made the call
        current_account_id: The ledger's own account
        attached_deposit: Value attached to the call, in minor units
    """

    predecessor_account_id: str
    current_account_id: str
    attached_deposit: int = 0

    def __post_init__(self) -> None:
        if self.attached_deposit < 0:
            raise ValueError("attached_deposit must not be negative")

    def is_self(self) -> bool:
        """Return True when the ledger is calling itself."""
        return is_self(self.predecessor_account_id, self.current_account_id)


@dataclass(frozen=True)
class DonationRecord:
    """Accumulated net donations of one account."""

    account_id: str
    total_amount: int


@dataclass(frozen=True)
class Transfer:
    """
    One-way instruction to send a net donation to the beneficiary.

    Attributes:
        receiver_id: Beneficiary at the time of the donation
        amount: Net amount to send, in minor units
        donor_id: Account whose donation produced the transfer
        intent_id: Identifier assigned by the sink that issued it, if any
    """

    receiver_id: str
    amount: int
    donor_id: str
    intent_id: str | None = None


@dataclass(frozen=True)
class DonationReceipt:
    """
    Result of a successful donation.

    Attributes:
        donor: Account that donated
        amount: Net amount recorded (deposit minus storage cost)
        total: Donor's accumulated total after this donation
        transfer: Transfer issued to the beneficiary
    """

    donor: str
    amount: int
    total: int
    transfer: Transfer
