"""
vestledger - Core Protocol Interfaces

Protocol interfaces for the collaborators the vesting core consumes.
Using Protocol (from typing) allows for structural subtyping, enabling:
- Test doubles (including hostile ones that re-enter the ledger)
- Dependency injection without class inheritance
- Clear API contracts for the external token ledger

Security Notes:
- Implementations signal failure by raising; the vesting ledger treats
  any exception as an aborted operation and reverts its own state
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ITokenLedger(Protocol):
    """
    Protocol for the fungible token ledger the vesting contract draws from.

    Mirrors the ERC20 surface the ledger needs: supply and balance queries
    plus direct and allowance-based transfers. The ``sender``/``spender``
    argument plays the role of ``msg.sender``.
    """

    def total_supply(self) -> int:
        """Return the total token supply."""
        ...

    def balance_of(self, account: str) -> int:
        """Return the token balance held by ``account``."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Move ``amount`` from ``sender`` to ``recipient``.

        Returns:
            True on success

        Raises:
            Exception: Any failure; the caller aborts its operation
        """
        ...

    def transfer_from(
        self, spender: str, from_addr: str, to_addr: str, amount: int
    ) -> bool:
        """
        Move ``amount`` from ``from_addr`` to ``to_addr`` using the allowance
        ``from_addr`` granted to ``spender``.
        """
        ...


@runtime_checkable
class ITimeProvider(Protocol):
    """Callable returning the current time as integer Unix seconds."""

    def __call__(self) -> int:
        ...
