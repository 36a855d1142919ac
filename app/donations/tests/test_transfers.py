"""
Tests for transfer sinks and backends.
"""

from unittest.mock import patch

import pytest

from donations.exceptions import TransferFailed
from donations.models import TransferIntent, TransferStatus
from donations.tasks import execute_transfer_intent
from donations.tests.factories import BENEFICIARY, CONTRACT_ACCOUNT_ID
from donations.transfers import (
    DatabaseTransferSink,
    LoggingTransferBackend,
    RecordingTransferSink,
    TransferBackend,
    TransferSink,
    get_transfer_backend,
)
from donations.types import Transfer


class FailingBackend:
    """Backend whose payout rail is always down."""

    def send(self, receiver_id, amount, *, reference):
        raise TransferFailed("Payout rail unavailable", details={"reference": reference})


def make_transfer(**overrides):
    values = {
        "receiver_id": BENEFICIARY,
        "amount": 1000,
        "donor_id": "alice.testnet",
    }
    values.update(overrides)
    return Transfer(**values)


class TestRecordingTransferSink:
    def test_keeps_issued_transfers_in_order(self):
        sink = RecordingTransferSink()
        first = make_transfer(amount=1)
        second = make_transfer(amount=2)

        assert sink.issue(first) is first
        sink.issue(second)

        assert sink.issued == [first, second]
        assert isinstance(sink, TransferSink)


class TestDatabaseTransferSink:
    """Tests for DatabaseTransferSink.issue()."""

    def test_persists_pending_intent(self, ledger_state):
        sink = DatabaseTransferSink(CONTRACT_ACCOUNT_ID)

        issued = sink.issue(make_transfer(amount=999 * 10**21))

        intent = TransferIntent.objects.get(id=issued.intent_id)
        assert intent.ledger == ledger_state
        assert intent.receiver_account_id == BENEFICIARY
        assert intent.donor_account_id == "alice.testnet"
        assert intent.amount == 999 * 10**21
        assert intent.status == TransferStatus.PENDING

    def test_returns_transfer_with_intent_id(self, ledger_state):
        issued = DatabaseTransferSink(CONTRACT_ACCOUNT_ID).issue(make_transfer())

        assert issued.intent_id is not None
        assert issued.receiver_id == BENEFICIARY
        assert issued.amount == 1000

    def test_queues_execution_after_commit(
        self, ledger_state, django_capture_on_commit_callbacks
    ):
        with patch.object(execute_transfer_intent, "delay") as mock_delay:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                issued = DatabaseTransferSink(CONTRACT_ACCOUNT_ID).issue(
                    make_transfer()
                )

        assert len(callbacks) == 1
        mock_delay.assert_called_once_with(issued.intent_id)

    def test_nothing_queued_without_commit(self, ledger_state):
        with patch.object(execute_transfer_intent, "delay") as mock_delay:
            DatabaseTransferSink(CONTRACT_ACCOUNT_ID).issue(make_transfer())

        mock_delay.assert_not_called()


class TestBackends:
    def test_logging_backend_returns_reference(self):
        backend = LoggingTransferBackend()

        assert backend.send(BENEFICIARY, 1000, reference="abc") == "log:abc"
        assert isinstance(backend, TransferBackend)

    def test_get_transfer_backend_uses_setting(self, settings):
        settings.DONATIONS_TRANSFER_BACKEND = (
            "donations.tests.test_transfers.FailingBackend"
        )

        backend = get_transfer_backend()

        assert isinstance(backend, FailingBackend)
        with pytest.raises(TransferFailed):
            backend.send(BENEFICIARY, 1, reference="x")

    def test_default_backend_is_logging(self):
        assert isinstance(get_transfer_backend(), LoggingTransferBackend)
