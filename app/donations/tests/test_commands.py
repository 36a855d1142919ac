"""
Tests for the init_donation_ledger management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from donations.models import LedgerState
from donations.tests.factories import BENEFICIARY, CONTRACT_ACCOUNT_ID


@pytest.mark.django_db
class TestInitDonationLedgerCommand:
    def test_initializes_configured_ledger(self):
        out = StringIO()

        call_command("init_donation_ledger", BENEFICIARY, stdout=out)

        state = LedgerState.objects.get(contract_account_id=CONTRACT_ACCOUNT_ID)
        assert state.beneficiary == BENEFICIARY
        assert "Initialized donations.testnet" in out.getvalue()

    def test_contract_account_option(self):
        call_command(
            "init_donation_ledger",
            BENEFICIARY,
            "--contract-account-id",
            "other-donations.testnet",
            stdout=StringIO(),
        )

        assert LedgerState.objects.filter(
            contract_account_id="other-donations.testnet"
        ).exists()

    def test_second_run_fails(self, ledger_state):
        with pytest.raises(CommandError, match="Already initialized"):
            call_command("init_donation_ledger", "other.testnet", stdout=StringIO())

    def test_invalid_beneficiary_fails(self):
        with pytest.raises(CommandError, match="Invalid account ID"):
            call_command("init_donation_ledger", "Not Valid", stdout=StringIO())

        assert not LedgerState.objects.exists()
