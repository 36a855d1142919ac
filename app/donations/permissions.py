"""
Permission classes for the donation ledger API.

- IsLedgerOwner: Caller is the ledger's own account

The ledger's privileged operations (initialize, change_beneficiary) are
reserved for the account that owns it. The API authenticates callers as
Django users and treats the username as the caller's account identity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from .conf import get_ledger_settings
from .types import is_self

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsLedgerOwner(permissions.BasePermission):
    """Allows access only to the account configured as DONATIONS_CONTRACT_ACCOUNT_ID."""

    message = "Only the ledger's own account may perform this operation."

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not request.user.is_authenticated:
            return False
        return is_self(
            request.user.get_username(),
            get_ledger_settings().contract_account_id,
        )
