"""
Single-owner administrator capability.

Contracts hold an ``Ownable`` instance and ask it to authorize privileged
calls instead of inheriting ownership behavior. The owner address is
normalized to lower case so callers can pass checksummed or plain
addresses interchangeably.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..vesting_exceptions import InvalidArgumentError, UnauthorizedError
from .erc20 import ZERO_ADDRESS

logger = logging.getLogger(__name__)


@dataclass
class Ownable:
    """Explicit ownership field plus a checked-capability test."""

    owner: str

    def __post_init__(self) -> None:
        if not self.owner or self.owner.lower() == ZERO_ADDRESS:
            raise InvalidArgumentError("Ownable: owner is zero address")
        self.owner = self.owner.lower()

    def is_owner(self, caller: str) -> bool:
        return bool(caller) and caller.lower() == self.owner

    def require_owner(self, caller: str) -> None:
        """
        Require that ``caller`` holds the administrator capability.

        Raises:
            UnauthorizedError: If caller is not the owner
        """
        if not self.is_owner(caller):
            logger.warning(
                "Access denied: caller is not owner",
                extra={
                    "event": "ownable.unauthorized",
                    "caller": (caller or "")[:10],
                },
            )
            raise UnauthorizedError(
                "Ownable: caller is not the owner",
                details={"caller": caller},
            )

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand the administrator capability to ``new_owner`` (owner only)."""
        self.require_owner(caller)
        if not new_owner or new_owner.lower() == ZERO_ADDRESS:
            raise InvalidArgumentError("Ownable: new owner is zero address")
        previous = self.owner
        self.owner = new_owner.lower()
        logger.info(
            "Ownership transferred",
            extra={
                "event": "ownable.transferred",
                "previous_owner": previous[:10],
                "new_owner": self.owner[:10],
            },
        )
