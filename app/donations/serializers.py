"""
Serializers for the donation ledger API.

Amounts can reach 2**128 - 1, well past the 2**53 integers JavaScript
clients parse exactly, so they travel as decimal strings in both
directions (integers are accepted on input too).

Serializers:
    - BeneficiarySerializer: beneficiary read/write
    - DonateSerializer: attached deposit of a donation
    - DonationReceiptSerializer: result of a donation
    - DonationRecordSerializer: one account's total
    - DonationPageQuerySerializer: from_index/limit query parameters
"""

from __future__ import annotations

from rest_framework import serializers

from .constants import ACCOUNT_ID_MAX_LENGTH, MAX_AMOUNT
from .validators import validate_account_id


class AmountField(serializers.Field):
    """Unsigned 128-bit amount, serialized as a decimal string."""

    default_error_messages = {
        "invalid": "A valid non-negative integer is required.",
        "out_of_range": "Amount must be between 0 and 2**128 - 1.",
    }

    def to_internal_value(self, data) -> int:
        if isinstance(data, bool):
            self.fail("invalid")
        if isinstance(data, int):
            value = data
        elif isinstance(data, str) and data.strip().isascii() and data.strip().isdigit():
            value = int(data.strip())
        else:
            self.fail("invalid")
        if not 0 <= value <= MAX_AMOUNT:
            self.fail("out_of_range")
        return value

    def to_representation(self, value: int) -> str:
        return str(value)


class AccountIdField(serializers.CharField):
    """Account identity following the host's naming rules."""

    def __init__(self, **kwargs):
        kwargs.setdefault("max_length", ACCOUNT_ID_MAX_LENGTH)
        super().__init__(**kwargs)
        self.validators.append(validate_account_id)


class BeneficiarySerializer(serializers.Serializer):
    beneficiary = AccountIdField()


class DonateSerializer(serializers.Serializer):
    attached_deposit = AmountField()


class TransferSerializer(serializers.Serializer):
    receiver_id = serializers.CharField()
    amount = AmountField()
    intent_id = serializers.CharField(allow_null=True)


class DonationReceiptSerializer(serializers.Serializer):
    donor = serializers.CharField()
    amount = AmountField()
    total = AmountField()
    transfer = TransferSerializer()


class DonationRecordSerializer(serializers.Serializer):
    account_id = serializers.CharField()
    total_amount = AmountField()


class DonationPageQuerySerializer(serializers.Serializer):
    """
    Query parameters of the donation list.

    Both are optional; the ledger applies its defaults (0 and 50).
    from_index may be arbitrarily large: a start past the end returns an
    empty page.
    """

    from_index = AmountField(required=False)
    limit = serializers.IntegerField(required=False, min_value=0)
