"""
Model field for unsigned 128-bit amounts.

Ledger totals can reach 2**128 - 1, which overflows every native integer
column type (BigIntegerField stops at 2**63 - 1) and loses precision in
SQLite's NUMERIC affinity. U128Field stores the value as a zero-padded
decimal string of fixed width, so:

- the full range round-trips exactly on every backend
- lexicographic order of the column equals numeric order, so
  filters like total_amount__gte keep working

Usage:
    from donations.fields import U128Field

    class Donation(models.Model):
        total_amount = U128Field(default=0)

    Donation.objects.filter(total_amount__gte=10**24)
"""

from __future__ import annotations

from django.core import exceptions
from django.db import models

from .constants import AMOUNT_DIGITS, MAX_AMOUNT


class U128Field(models.Field):
    """
    Unsigned 128-bit integer stored as a fixed-width decimal string.

    Python-side values are always int (or None for nullable columns).
    Values outside [0, MAX_AMOUNT] are rejected on save.
    """

    description = "Unsigned 128-bit integer"

    default_error_messages = {
        "invalid": "'%(value)s' value must be an integer.",
        "out_of_range": "'%(value)s' is outside the range 0 to 2**128 - 1.",
    }

    def __init__(self, *args, **kwargs):
        kwargs["max_length"] = AMOUNT_DIGITS
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        del kwargs["max_length"]
        return name, path, args, kwargs

    def get_internal_type(self) -> str:
        return "CharField"

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return int(value)

    def to_python(self, value):
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            return value
        try:
            return int(str(value).strip())
        except (TypeError, ValueError) as e:
            raise exceptions.ValidationError(
                self.error_messages["invalid"],
                code="invalid",
                params={"value": value},
            ) from e

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if value is None:
            return None
        value = self.to_python(value)
        if not 0 <= value <= MAX_AMOUNT:
            raise exceptions.ValidationError(
                self.error_messages["out_of_range"],
                code="out_of_range",
                params={"value": value},
            )
        return f"{value:0{AMOUNT_DIGITS}d}"

    def value_to_string(self, obj) -> str:
        value = self.value_from_object(obj)
        return "" if value is None else str(value)
