"""
Validators for ledger account identities.

An account identity follows the host's account naming rules:
- 2 to 64 characters
- lowercase letters and digits
- parts separated by a single '-', '_' or '.'
- no leading, trailing or doubled separators

Usage:
    from donations.validators import is_valid_account_id, validate_account_id

    is_valid_account_id("alice.testnet")  # True
    is_valid_account_id("Alice")          # False

    class LedgerState(models.Model):
        beneficiary = models.CharField(validators=[validate_account_id])
"""

from __future__ import annotations

import re

from django.core.exceptions import ValidationError

from .constants import ACCOUNT_ID_MAX_LENGTH, ACCOUNT_ID_MIN_LENGTH

ACCOUNT_ID_PATTERN = re.compile(r"^(([a-z\d]+[-_])*[a-z\d]+\.)*([a-z\d]+[-_])*[a-z\d]+$")


def is_valid_account_id(value: object) -> bool:
    """Return True if value is a well-formed account identity."""
    if not isinstance(value, str):
        return False
    if not ACCOUNT_ID_MIN_LENGTH <= len(value) <= ACCOUNT_ID_MAX_LENGTH:
        return False
    return ACCOUNT_ID_PATTERN.match(value) is not None


def validate_account_id(value: str) -> None:
    """
    Django/DRF validator for account identities.

    Raises:
        ValidationError: If value is not a well-formed account identity
    """
    if not is_valid_account_id(value):
        raise ValidationError(
            f"'{value}' is not a valid account ID. Use {ACCOUNT_ID_MIN_LENGTH}-"
            f"{ACCOUNT_ID_MAX_LENGTH} lowercase letters or digits separated "
            "by '-', '_' or '.'.",
            code="invalid_account_id",
        )
