"""
Tests for DonationLedger.

Runs the accounting rules against the in-memory store, so every test
here is independent of the database.
"""

import pytest

from donations.constants import MAX_AMOUNT, STORAGE_COST
from donations.exceptions import (
    AlreadyInitialized,
    InsufficientAttachment,
    InvalidAccountId,
    NotInitialized,
    Overflow,
    Unauthorized,
)
from donations.services import DonationLedger
from donations.store import InMemoryLedgerStore
from donations.tests.factories import BENEFICIARY, CONTRACT_ACCOUNT_ID
from donations.transfers import RecordingTransferSink
from donations.types import CallContext, DonationRecord, Transfer


class TestInitialize:
    """Tests for DonationLedger.initialize()."""

    def test_sets_beneficiary_with_empty_donations(self, ledger, self_context):
        ledger.initialize(self_context, BENEFICIARY)

        assert ledger.beneficiary() == BENEFICIARY
        assert ledger.total_donations() == 0
        assert list(ledger.get_donations()) == []

    def test_second_initialize_raises_already_initialized(
        self, initialized_ledger, self_context
    ):
        with pytest.raises(AlreadyInitialized) as exc_info:
            initialized_ledger.initialize(self_context, "other.testnet")

        assert exc_info.value.message == "Already initialized"
        assert initialized_ledger.beneficiary() == BENEFICIARY

    def test_rejects_foreign_caller(self, ledger, store):
        context = CallContext(
            predecessor_account_id="mallory.testnet",
            current_account_id=CONTRACT_ACCOUNT_ID,
        )

        with pytest.raises(Unauthorized):
            ledger.initialize(context, BENEFICIARY)

        assert store.state_exists() is False

    def test_rejects_malformed_beneficiary(self, ledger, self_context, store):
        with pytest.raises(InvalidAccountId):
            ledger.initialize(self_context, "Not An Account")

        assert store.state_exists() is False


class TestDonate:
    """Tests for DonationLedger.donate()."""

    def test_scenario_first_donation(self, initialized_ledger, donate_as, fee):
        """donor_a attaches F + 1000: total 1000, one donor."""
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))

        assert initialized_ledger.get_donation_for_account("donor_a") == 1000
        assert initialized_ledger.total_donations() == 1

    def test_scenario_repeat_donation_accumulates(
        self, initialized_ledger, donate_as, fee
    ):
        """donor_a donates again with F + 2000: total 3000, still one donor."""
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))
        initialized_ledger.donate(donate_as("donor_a", fee + 2000))

        assert initialized_ledger.get_donation_for_account("donor_a") == 3000
        assert initialized_ledger.total_donations() == 1

    def test_scenario_second_donor(self, initialized_ledger, donate_as, fee):
        """donor_b attaches F + 500: two donors, donor_a unchanged."""
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))
        initialized_ledger.donate(donate_as("donor_a", fee + 2000))
        initialized_ledger.donate(donate_as("donor_b", fee + 500))

        assert initialized_ledger.total_donations() == 2
        assert initialized_ledger.get_donation_for_account("donor_b") == 500
        assert initialized_ledger.get_donation_for_account("donor_a") == 3000

    def test_scenario_insufficient_attachment(
        self, initialized_ledger, donate_as, fee, sink
    ):
        """Attaching F - 1 fails and changes nothing."""
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))

        with pytest.raises(InsufficientAttachment) as exc_info:
            initialized_ledger.donate(donate_as("donor_a", fee - 1))

        assert exc_info.value.message == f"Attach at least {STORAGE_COST} yoctoNEAR"
        assert exc_info.value.details == {
            "required": str(STORAGE_COST),
            "attached": str(fee - 1),
        }
        assert initialized_ledger.get_donation_for_account("donor_a") == 1000
        assert initialized_ledger.total_donations() == 1
        assert len(sink.issued) == 1

    def test_insufficient_attachment_does_not_register_new_donor(
        self, initialized_ledger, donate_as
    ):
        with pytest.raises(InsufficientAttachment):
            initialized_ledger.donate(donate_as("donor_a", 0))

        assert initialized_ledger.total_donations() == 0
        assert list(initialized_ledger.get_donations()) == []

    @pytest.mark.parametrize("account_id", ["Alice.testnet", "a", "x" * 65, ""])
    def test_rejects_malformed_donor(
        self, initialized_ledger, donate_as, fee, sink, account_id
    ):
        with pytest.raises(InvalidAccountId):
            initialized_ledger.donate(donate_as(account_id, fee + 1000))

        assert initialized_ledger.total_donations() == 0
        assert sink.issued == []

    def test_exact_storage_cost_records_zero_net_donation(
        self, initialized_ledger, donate_as, fee, sink
    ):
        receipt = initialized_ledger.donate(donate_as("donor_a", fee))

        assert receipt.amount == 0
        assert initialized_ledger.total_donations() == 1
        assert initialized_ledger.get_donation_for_account("donor_a") == 0
        assert sink.issued == [
            Transfer(receiver_id=BENEFICIARY, amount=0, donor_id="donor_a")
        ]

    def test_returns_receipt_with_net_amount_and_total(
        self, initialized_ledger, donate_as
    ):
        one_token = 10**24
        initialized_ledger.donate(donate_as("donor_a", one_token))

        receipt = initialized_ledger.donate(donate_as("donor_a", one_token))

        assert receipt.donor == "donor_a"
        assert receipt.amount == one_token - STORAGE_COST
        assert receipt.total == 2 * (one_token - STORAGE_COST)
        assert receipt.transfer.receiver_id == BENEFICIARY
        assert receipt.transfer.amount == one_token - STORAGE_COST

    def test_issues_one_transfer_per_donation(
        self, initialized_ledger, donate_as, fee, sink
    ):
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))
        initialized_ledger.donate(donate_as("donor_b", fee + 500))

        assert sink.issued == [
            Transfer(receiver_id=BENEFICIARY, amount=1000, donor_id="donor_a"),
            Transfer(receiver_id=BENEFICIARY, amount=500, donor_id="donor_b"),
        ]

    def test_transfer_goes_to_beneficiary_current_at_donation_time(
        self, initialized_ledger, self_context, donate_as, fee, sink
    ):
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))
        initialized_ledger.change_beneficiary(self_context, "new-home.testnet")
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))

        assert [t.receiver_id for t in sink.issued] == [
            BENEFICIARY,
            "new-home.testnet",
        ]

    def test_overflow_leaves_total_unchanged(
        self, initialized_ledger, donate_as, fee, sink
    ):
        initialized_ledger.donate(donate_as("whale", MAX_AMOUNT + fee))

        with pytest.raises(Overflow) as exc_info:
            initialized_ledger.donate(donate_as("whale", fee + 1))

        assert exc_info.value.details["current"] == str(MAX_AMOUNT)
        assert initialized_ledger.get_donation_for_account("whale") == MAX_AMOUNT
        assert len(sink.issued) == 1

    def test_total_may_reach_max_amount(self, initialized_ledger, donate_as, fee):
        initialized_ledger.donate(donate_as("whale", MAX_AMOUNT - 1 + fee))
        initialized_ledger.donate(donate_as("whale", 1 + fee))

        assert initialized_ledger.get_donation_for_account("whale") == MAX_AMOUNT

    def test_before_initialize_raises_not_initialized(self, ledger, donate_as, fee):
        with pytest.raises(NotInitialized):
            ledger.donate(donate_as("donor_a", fee + 1000))

    def test_custom_storage_cost(self, donate_as):
        ledger = DonationLedger(
            store=InMemoryLedgerStore(),
            transfers=RecordingTransferSink(),
            storage_cost=10,
        )
        ledger.initialize(
            CallContext(CONTRACT_ACCOUNT_ID, CONTRACT_ACCOUNT_ID), BENEFICIARY
        )

        receipt = ledger.donate(donate_as("donor_a", 25))

        assert receipt.amount == 15

    @pytest.mark.parametrize(
        "deposits",
        [
            [("aa", 1), ("aa", 2), ("aa", 3)],
            [("aa", 10), ("bb", 0), ("aa", 7), ("cc", 99), ("bb", 1)],
            [("xx", 10**24), ("yy", 5 * 10**24), ("xx", 3)],
        ],
    )
    def test_total_equals_sum_of_net_deposits(
        self, initialized_ledger, donate_as, fee, deposits
    ):
        expected = {}
        for account_id, net in deposits:
            initialized_ledger.donate(donate_as(account_id, fee + net))
            expected[account_id] = expected.get(account_id, 0) + net

        for account_id, total in expected.items():
            assert initialized_ledger.get_donation_for_account(account_id) == total
        assert initialized_ledger.total_donations() == len(expected)


class TestGetDonationForAccount:
    """Tests for DonationLedger.get_donation_for_account()."""

    def test_unknown_account_returns_zero(self, initialized_ledger):
        assert initialized_ledger.get_donation_for_account("stranger") == 0

    def test_before_initialize_raises_not_initialized(self, ledger):
        with pytest.raises(NotInitialized):
            ledger.get_donation_for_account("donor_a")


class TestGetDonations:
    """Tests for DonationLedger.get_donations()."""

    @pytest.fixture
    def five_donors(self, initialized_ledger, donate_as, fee):
        for index, account_id in enumerate(["d0", "d1", "d2", "d3", "d4"]):
            initialized_ledger.donate(donate_as(account_id, fee + index + 1))
        return initialized_ledger

    def test_returns_records_in_first_donation_order(self, five_donors):
        records = list(five_donors.get_donations())

        assert records == [
            DonationRecord("d0", 1),
            DonationRecord("d1", 2),
            DonationRecord("d2", 3),
            DonationRecord("d3", 4),
            DonationRecord("d4", 5),
        ]

    def test_repeat_donation_keeps_position(self, five_donors, donate_as, fee):
        five_donors.donate(donate_as("d0", fee + 100))

        records = list(five_donors.get_donations())

        assert records[0] == DonationRecord("d0", 101)
        assert [r.account_id for r in records] == ["d0", "d1", "d2", "d3", "d4"]

    def test_limit_caps_page_size(self, five_donors):
        assert len(list(five_donors.get_donations(limit=2))) == 2

    def test_pages_concatenate_to_full_listing(self, five_donors):
        full = list(five_donors.get_donations())

        pages = []
        for start in range(0, five_donors.total_donations(), 2):
            pages.extend(five_donors.get_donations(from_index=start, limit=2))

        assert pages == full

    @pytest.mark.parametrize("from_index", [5, 6, 10**30])
    def test_start_past_end_returns_empty(self, five_donors, from_index):
        assert list(five_donors.get_donations(from_index=from_index)) == []

    def test_limit_zero_returns_empty(self, five_donors):
        assert list(five_donors.get_donations(limit=0)) == []

    def test_default_limit_is_fifty(self, initialized_ledger, donate_as, fee):
        for index in range(55):
            initialized_ledger.donate(donate_as(f"donor-{index}", fee))

        page = initialized_ledger.get_donations()

        assert page.limit == 50
        assert len(list(page)) == 50
        assert len(list(initialized_ledger.get_donations(from_index=50))) == 5

    def test_page_is_restartable(self, five_donors):
        page = five_donors.get_donations(from_index=1, limit=3)

        assert list(page) == list(page)

    def test_reads_are_idempotent(self, five_donors):
        first = (
            list(five_donors.get_donations()),
            five_donors.total_donations(),
            five_donors.get_donation_for_account("d2"),
        )
        second = (
            list(five_donors.get_donations()),
            five_donors.total_donations(),
            five_donors.get_donation_for_account("d2"),
        )

        assert first == second

    @pytest.mark.parametrize("kwargs", [{"from_index": -1}, {"limit": -1}])
    def test_negative_arguments_raise_value_error(self, initialized_ledger, kwargs):
        with pytest.raises(ValueError):
            initialized_ledger.get_donations(**kwargs)

    def test_before_initialize_raises_not_initialized(self, ledger):
        with pytest.raises(NotInitialized):
            ledger.get_donations()


class TestChangeBeneficiary:
    """Tests for DonationLedger.change_beneficiary()."""

    def test_self_call_replaces_beneficiary(self, initialized_ledger, self_context):
        initialized_ledger.change_beneficiary(self_context, "new-home.testnet")

        assert initialized_ledger.beneficiary() == "new-home.testnet"

    def test_scenario_foreign_caller_is_rejected(self, initialized_ledger):
        """A non-privileged caller fails with Unauthorized; beneficiary unchanged."""
        context = CallContext(
            predecessor_account_id="mallory.testnet",
            current_account_id=CONTRACT_ACCOUNT_ID,
        )

        with pytest.raises(Unauthorized) as exc_info:
            initialized_ledger.change_beneficiary(context, "mallory.testnet")

        assert exc_info.value.message == "Method change_beneficiary is private"
        assert initialized_ledger.beneficiary() == BENEFICIARY

    def test_does_not_touch_donations(
        self, initialized_ledger, self_context, donate_as, fee
    ):
        initialized_ledger.donate(donate_as("donor_a", fee + 1000))

        initialized_ledger.change_beneficiary(self_context, "new-home.testnet")

        assert initialized_ledger.get_donation_for_account("donor_a") == 1000
        assert initialized_ledger.total_donations() == 1

    def test_before_initialize_raises_not_initialized(self, ledger, self_context):
        with pytest.raises(NotInitialized):
            ledger.change_beneficiary(self_context, "new-home.testnet")
