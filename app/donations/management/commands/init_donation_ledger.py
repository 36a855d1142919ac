"""
Initialize the donation ledger from the command line.

Runs initialize() as the ledger's own account, which is how deployments
create the ledger without exposing a privileged API user.

Usage:
    python manage.py init_donation_ledger beneficiary.testnet
    python manage.py init_donation_ledger beneficiary.testnet \
        --contract-account-id other-donations.testnet
"""

from django.core.management.base import BaseCommand, CommandError

from donations.conf import get_ledger_settings
from donations.exceptions import DonationLedgerError
from donations.services import get_ledger
from donations.types import CallContext


class Command(BaseCommand):
    help = "Initialize the donation ledger with its beneficiary"

    def add_arguments(self, parser):
        parser.add_argument("beneficiary", help="Account that receives donations")
        parser.add_argument(
            "--contract-account-id",
            default=None,
            help="Ledger account (default: DONATIONS_CONTRACT_ACCOUNT_ID)",
        )

    def handle(self, *args, **options):
        contract_account_id = (
            options["contract_account_id"]
            or get_ledger_settings().contract_account_id
        )
        beneficiary = options["beneficiary"]

        try:
            get_ledger(contract_account_id).initialize(
                CallContext(
                    predecessor_account_id=contract_account_id,
                    current_account_id=contract_account_id,
                ),
                beneficiary,
            )
        except DonationLedgerError as e:
            raise CommandError(e.message) from e

        self.stdout.write(
            self.style.SUCCESS(
                f"Initialized {contract_account_id} with beneficiary {beneficiary}"
            )
        )
