"""
Donation ledger.

Accepts donations from any account, keeps a fixed storage cost from each
deposit, records per-account running totals and pays every net amount out
to a configurable beneficiary.

Public API:
    from donations.services import DonationLedger, get_ledger
    from donations.store import InMemoryLedgerStore, DatabaseLedgerStore
    from donations.transfers import RecordingTransferSink, DatabaseTransferSink
    from donations.types import CallContext, DonationRecord, DonationReceipt
    from donations.exceptions import (
        AlreadyInitialized,
        InsufficientAttachment,
        Overflow,
        Unauthorized,
    )
"""
