"""
Pytest fixtures for donation ledger tests.

Sections:
    - Ledger Fixtures: In-memory ledgers for service tests
    - Database Fixtures: Persisted ledger state
    - API Fixtures: Users and authenticated clients
"""

import pytest
from rest_framework.test import APIClient

from donations.constants import STORAGE_COST
from donations.services import DonationLedger
from donations.store import InMemoryLedgerStore
from donations.tests.factories import (
    BENEFICIARY,
    CONTRACT_ACCOUNT_ID,
    LedgerStateFactory,
    UserFactory,
)
from donations.transfers import RecordingTransferSink
from donations.types import CallContext


# ==========================================================================
# Ledger Fixtures
# ==========================================================================


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def sink():
    return RecordingTransferSink()


@pytest.fixture
def ledger(store, sink):
    """Uninitialized ledger over an in-memory store."""
    return DonationLedger(store=store, transfers=sink)


@pytest.fixture
def self_context():
    """Call made by the ledger's own account."""
    return CallContext(
        predecessor_account_id=CONTRACT_ACCOUNT_ID,
        current_account_id=CONTRACT_ACCOUNT_ID,
    )


@pytest.fixture
def initialized_ledger(ledger, self_context):
    """Ledger initialized with BENEFICIARY."""
    ledger.initialize(self_context, BENEFICIARY)
    return ledger


@pytest.fixture
def donate_as():
    """
    Build a donation CallContext for a caller.

    Usage:
        initialized_ledger.donate(donate_as("donor_a", STORAGE_COST + 1000))
    """

    def _context(account_id, attached_deposit):
        return CallContext(
            predecessor_account_id=account_id,
            current_account_id=CONTRACT_ACCOUNT_ID,
            attached_deposit=attached_deposit,
        )

    return _context


@pytest.fixture
def fee():
    return STORAGE_COST


# ==========================================================================
# Database Fixtures
# ==========================================================================


@pytest.fixture
def ledger_state(db):
    """Persisted ledger state for the configured ledger account."""
    return LedgerStateFactory()


# ==========================================================================
# API Fixtures
# ==========================================================================


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def donor(db):
    return UserFactory(username="alice.testnet")


@pytest.fixture
def owner(db):
    """User whose username is the ledger's own account."""
    return UserFactory(username=CONTRACT_ACCOUNT_ID)


@pytest.fixture
def donor_client(api_client, donor):
    api_client.force_authenticate(user=donor)
    return api_client


@pytest.fixture
def owner_client(api_client, owner):
    api_client.force_authenticate(user=owner)
    return api_client
