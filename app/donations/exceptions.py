"""
Donation ledger exceptions.

Every error is raised before the ledger mutates any state, so a rejected
call never leaves a partial balance update behind.

Exception Hierarchy:
    DonationLedgerError (base)
    ├── AlreadyInitialized - Ledger constructed twice (ConflictError)
    ├── NotInitialized - Operation on a ledger that was never constructed (NotFoundError)
    ├── InsufficientAttachment - Deposit below the storage cost (ValidationError)
    ├── Overflow - Accumulated total would exceed 2**128 - 1 (ValidationError)
    ├── InvalidAccountId - Malformed account identity (ValidationError)
    └── Unauthorized - Privileged call from another account (PermissionDeniedError)

    TransferFailed - Transfer backend could not send funds (ExternalServiceError)

Each ledger error also inherits the matching core exception, so callers
can map them to HTTP statuses by category:

    try:
        ledger.donate(context)
    except ValidationError as e:
        return Response(e.to_dict(), status=400)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


class DonationLedgerError(BaseApplicationError):
    """Base exception for all donation ledger operations."""

    default_error_code: str = "DONATION_LEDGER_ERROR"


class AlreadyInitialized(DonationLedgerError, ConflictError):
    """
    Raised when initialize() runs against a ledger that already has state.

    Example:
        raise AlreadyInitialized(
            "Already initialized",
            details={"contract_account_id": "donations.testnet"},
        )
    """

    default_error_code: str = "ALREADY_INITIALIZED"


class NotInitialized(DonationLedgerError, NotFoundError):
    """Raised when any operation but initialize() runs before construction."""

    default_error_code: str = "NOT_INITIALIZED"


class InvalidAccountId(DonationLedgerError, ValidationError):
    """Raised when an account identity breaks the naming rules."""

    default_error_code: str = "INVALID_ACCOUNT_ID"

    def __init__(self, account_id: str, details: dict[str, Any] | None = None):
        self.account_id = account_id
        super().__init__(
            message=f"Invalid account ID: {account_id!r}",
            details={"account_id": account_id, **(details or {})},
        )


class InsufficientAttachment(DonationLedgerError, ValidationError):
    """
    Raised when the attached deposit does not cover the storage cost.

    Attributes:
        required: Minimum deposit (the storage cost)
        attached: Deposit that came with the call

    Amounts go into details as strings because they can exceed the
    integer range JSON clients handle safely.
    """

    default_error_code: str = "INSUFFICIENT_ATTACHMENT"

    def __init__(self, required: int, attached: int):
        self.required = required
        self.attached = attached
        super().__init__(
            message=f"Attach at least {required} yoctoNEAR",
            details={"required": str(required), "attached": str(attached)},
        )


class Overflow(DonationLedgerError, ValidationError):
    """
    Raised when adding a donation would push a total past 2**128 - 1.

    Attributes:
        account_id: Donor whose total would overflow
        current: Total recorded before this donation
        amount: Net amount of the rejected donation
    """

    default_error_code: str = "BALANCE_OVERFLOW"

    def __init__(self, account_id: str, current: int, amount: int):
        self.account_id = account_id
        self.current = current
        self.amount = amount
        super().__init__(
            message=(
                f"Donation of {amount} would overflow the total of {account_id}"
            ),
            details={
                "account_id": account_id,
                "current": str(current),
                "amount": str(amount),
            },
        )


class Unauthorized(DonationLedgerError, PermissionDeniedError):
    """
    Raised when a privileged operation is called by anyone but the ledger itself.

    Attributes:
        caller: Account that made the call
        operation: Name of the rejected operation
    """

    default_error_code: str = "UNAUTHORIZED"

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(
            message=f"Method {operation} is private",
            details={"caller": caller, "operation": operation},
        )


class TransferFailed(ExternalServiceError):
    """
    Raised by a TransferBackend when funds could not be sent.

    The donation that produced the transfer stays recorded; the intent is
    retried and eventually marked failed for reconciliation.
    """

    default_error_code: str = "TRANSFER_FAILED"
