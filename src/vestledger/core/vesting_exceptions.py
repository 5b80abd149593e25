"""
Vesting-specific exception hierarchy for vestledger.

Every ledger operation either commits fully or raises one of these typed
exceptions with state left exactly as it was before the call. Callers can
catch ``VestingError`` for blanket handling or a specific subclass for
precise recovery and diagnostics.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class VestingError(Exception):
    """Base exception for all vesting ledger errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried later
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


# ==================== Capability Errors ====================


class UnauthorizedError(VestingError):
    """Raised when a non-administrator calls an administrator-only operation."""
    pass


class ReentrancyRejectedError(VestingError):
    """Raised when a guarded operation is entered while already in progress."""
    pass


# ==================== Argument Errors ====================


class InvalidArgumentError(VestingError):
    """Raised for zero/negative amounts, empty identities or unusable cohorts."""
    pass


class ScheduleAlreadyExistsError(InvalidArgumentError):
    """Raised when a grant is created for a beneficiary that already has one."""
    pass


class ScheduleNotFoundError(InvalidArgumentError):
    """Raised when an operation needs a schedule the beneficiary does not have."""
    pass


class NotRevocableError(InvalidArgumentError):
    """Raised when revoking a schedule that is irrevocable or already revoked."""
    pass


# ==================== Accounting Errors ====================


class InsufficientReserveError(VestingError):
    """Raised when the unallocated token reserve cannot cover a request."""
    pass


class CliffNotElapsedError(VestingError):
    """Raised when an operation is attempted before a schedule's start time.

    Recoverable: the same call succeeds once the cliff has passed.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details, recoverable=True)


class InsufficientReleasableError(VestingError):
    """Raised when a claim is not strictly less than the releasable amount."""
    pass


class InsufficientBalanceError(VestingError):
    """Raised when a burn is not strictly less than the spendable balance."""
    pass


class ArithmeticOverflowError(VestingError):
    """Raised by checked arithmetic on overflow, underflow or division by zero."""
    pass


# ==================== Collaborator Errors ====================


class TokenLedgerError(VestingError):
    """Raised by the bundled token ledger when a token operation fails."""
    pass


class StorageError(VestingError):
    """Raised when ledger state cannot be persisted or restored."""
    pass


class CorruptedDataError(StorageError):
    """Raised when persisted state fails its integrity check."""
    pass


def get_error_context(exc: Exception) -> Dict[str, Any]:
    """Extract error context from an exception for logging.

    Args:
        exc: The exception to extract context from

    Returns:
        Dictionary containing error type, message, and any additional details
    """
    context = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, VestingError):
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    return context
