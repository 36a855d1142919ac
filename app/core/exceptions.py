"""
Base exception classes for application-wide error handling.

Every domain error raised by a service carries a human-readable message,
a machine-readable error code and a details dict, so that views can turn
it into a JSON body without knowing the concrete exception type.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input rejected by business rules
    ├── NotFoundError - Resource or state does not exist
    ├── PermissionDeniedError - Caller is not allowed to act
    ├── ConflictError - Operation clashes with existing state
    └── ExternalServiceError - A collaborator outside the process failed

Usage:
    from core.exceptions import ConflictError

    raise ConflictError(
        "Ledger already initialized",
        error_code="ALREADY_INITIALIZED",
        details={"contract_account_id": "donations.testnet"},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (amounts, identifiers, etc.)

    Example:
        try:
            ledger.donate(context)
        except BaseApplicationError as e:
            logger.warning(f"Donation rejected: {e.error_code}")
            return Response(e.to_dict(), status=400)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Attach at least 1000 units",
                "error_code": "INSUFFICIENT_ATTACHMENT",
                "details": {"required": "1000", "attached": "10"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when a request is well-formed but violates a business rule.

    Use for service-layer checks such as minimum amounts. Field format
    errors belong in DRF serializers.

    HTTP 400 Bad Request is the appropriate status.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource or piece of state does not exist.

    HTTP 404 Not Found is the appropriate status.
    """

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller is not allowed to perform an operation.

    For authentication failures (missing/invalid credentials), use DRF's
    AuthenticationFailed. Use this for authorization failures.

    HTTP 403 Forbidden is the appropriate status.
    """

    default_error_code: str = "PERMISSION_DENIED"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current state.

    Use for:
    - One-time setup attempted twice
    - Invalid state transitions
    - Concurrent modification conflicts

    HTTP 409 Conflict is the appropriate status.
    """

    default_error_code: str = "CONFLICT"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a collaborator outside the process fails.

    Use for payout rails, brokers and other network services. Log the
    original error for debugging but don't expose internal details to
    clients.

    HTTP 502 Bad Gateway or 503 Service Unavailable are appropriate.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
