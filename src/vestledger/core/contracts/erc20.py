"""
ERC20-style token ledger used as the vesting contract's external collaborator.

This module provides the fungible token the vesting ledger draws grants
from and pays releases into. It implements the ``ITokenLedger`` protocol:
- Supply and balance queries
- Direct transfers and allowance-based transferFrom
- Owner minting and holder burning
- Pause switch (owner only)
- Transfer/Approval events

Security features:
- uint256 bounds on every amount
- Zero address checks
- Balance and allowance underflow prevention
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from ..safe_math import MAX_UINT256
from ..vesting_exceptions import TokenLedgerError

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "0" * 40


@dataclass
class TokenEvent:
    """Represents an ERC20 event."""

    event_type: str  # "Transfer" or "Approval"
    from_address: str
    to_address: str
    value: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ERC20Token:
    """
    In-memory ERC20 token.

    Balances and allowances live in plain dicts keyed by lower-cased
    address so that the whole token can be serialized next to the vesting
    ledger state.
    """

    name: str
    symbol: str
    decimals: int = 18
    supply: int = 0

    address: str = ""
    owner: str = ""

    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[str, dict[str, int]] = field(default_factory=dict)
    events: list[TokenEvent] = field(default_factory=list)

    paused: bool = False

    def __post_init__(self) -> None:
        if not self.address:
            addr_input = f"{self.name}{self.symbol}{time.time()}".encode()
            addr_hash = hashlib.sha3_256(addr_input).digest()
            self.address = f"0x{addr_hash[-20:].hex()}"
        self.address = self._normalize(self.address)
        self.owner = self._normalize(self.owner)

    # ==================== View Functions ====================

    def total_supply(self) -> int:
        return self.supply

    def balance_of(self, account: str) -> int:
        """
        Get the token balance of an account.

        Args:
            account: Address to check

        Returns:
            Token balance
        """
        return self.balances.get(self._normalize(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        owner_norm = self._normalize(owner)
        spender_norm = self._normalize(spender)
        return self.allowances.get(owner_norm, {}).get(spender_norm, 0)

    # ==================== State-Changing Functions ====================

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Transfer tokens from sender to recipient.

        Args:
            sender: Address sending tokens (msg.sender)
            recipient: Address receiving tokens
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            TokenLedgerError: If transfer fails
        """
        self._require_not_paused()
        sender_norm = self._normalize(sender)
        recipient_norm = self._normalize(recipient)

        self._validate_address(recipient_norm, "recipient")
        self._validate_amount(amount)

        sender_balance = self.balances.get(sender_norm, 0)
        if sender_balance < amount:
            raise TokenLedgerError(
                f"ERC20: transfer amount exceeds balance "
                f"({amount} > {sender_balance})"
            )

        self.balances[sender_norm] = sender_balance - amount
        self.balances[recipient_norm] = self.balances.get(recipient_norm, 0) + amount

        self._emit("Transfer", sender_norm, recipient_norm, amount)

        logger.debug(
            "ERC20 transfer",
            extra={
                "event": "erc20.transfer",
                "token": self.symbol,
                "from": sender_norm[:10],
                "to": recipient_norm[:10],
                "amount": amount,
            }
        )

        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Approve spender to move up to ``amount`` of owner's tokens."""
        self._require_not_paused()
        owner_norm = self._normalize(owner)
        spender_norm = self._normalize(spender)

        self._validate_address(spender_norm, "spender")
        self._validate_amount(amount)

        self.allowances.setdefault(owner_norm, {})[spender_norm] = amount
        self._emit("Approval", owner_norm, spender_norm, amount)
        return True

    def transfer_from(
        self, spender: str, from_addr: str, to_addr: str, amount: int
    ) -> bool:
        """
        Transfer tokens using an allowance.

        Args:
            spender: Address executing transfer (msg.sender)
            from_addr: Token owner
            to_addr: Recipient
            amount: Amount to transfer

        Returns:
            True if successful

        Raises:
            TokenLedgerError: If allowance or balance is insufficient
        """
        self._require_not_paused()
        spender_norm = self._normalize(spender)
        from_norm = self._normalize(from_addr)
        to_norm = self._normalize(to_addr)

        self._validate_address(to_norm, "recipient")
        self._validate_amount(amount)

        current_allowance = self.allowance(from_norm, spender_norm)
        if current_allowance < amount:
            raise TokenLedgerError(
                f"ERC20: insufficient allowance ({current_allowance} < {amount})"
            )

        from_balance = self.balances.get(from_norm, 0)
        if from_balance < amount:
            raise TokenLedgerError(
                f"ERC20: transfer amount exceeds balance ({amount} > {from_balance})"
            )

        # Unlimited approvals are never decremented
        if current_allowance != MAX_UINT256:
            self.allowances[from_norm][spender_norm] = current_allowance - amount

        self.balances[from_norm] = from_balance - amount
        self.balances[to_norm] = self.balances.get(to_norm, 0) + amount

        self._emit("Transfer", from_norm, to_norm, amount)

        return True

    # ==================== Minting ====================

    def mint(self, minter: str, to: str, amount: int) -> bool:
        """
        Mint new tokens (owner only).

        Raises:
            TokenLedgerError: If caller is not owner or supply would exceed uint256
        """
        self._require_not_paused()
        self._require_owner(minter)

        to_norm = self._normalize(to)
        self._validate_address(to_norm, "recipient")
        self._validate_amount(amount)

        if self.supply + amount > MAX_UINT256:
            raise TokenLedgerError("ERC20: total supply exceeds uint256")

        self.supply += amount
        self.balances[to_norm] = self.balances.get(to_norm, 0) + amount

        self._emit("Transfer", ZERO_ADDRESS, to_norm, amount)

        logger.info(
            "ERC20 mint",
            extra={
                "event": "erc20.mint",
                "token": self.symbol,
                "to": to_norm[:10],
                "amount": amount,
                "new_supply": self.supply,
            }
        )

        return True

    # ==================== Admin Functions ====================

    def pause(self, caller: str) -> bool:
        """Pause token transfers (owner only)."""
        self._require_owner(caller)
        self.paused = True
        return True

    def unpause(self, caller: str) -> bool:
        """Unpause token transfers (owner only)."""
        self._require_owner(caller)
        self.paused = False
        return True

    # ==================== Helpers ====================

    def _normalize(self, address: str) -> str:
        return address.lower()

    def _validate_address(self, address: str, field: str) -> None:
        if address == ZERO_ADDRESS or not address:
            raise TokenLedgerError(f"ERC20: {field} is zero address")

    def _validate_amount(self, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TokenLedgerError("ERC20: amount must be an integer")
        if amount < 0:
            raise TokenLedgerError("ERC20: amount cannot be negative")
        if amount > MAX_UINT256:
            raise TokenLedgerError("ERC20: amount exceeds uint256")

    def _require_owner(self, caller: str) -> None:
        if self._normalize(caller) != self.owner:
            raise TokenLedgerError("ERC20: caller is not owner")

    def _require_not_paused(self) -> None:
        if self.paused:
            raise TokenLedgerError("ERC20: token is paused")

    def _emit(self, event_type: str, from_addr: str, to_addr: str, amount: int) -> None:
        self.events.append(
            TokenEvent(
                event_type=event_type,
                from_address=from_addr,
                to_address=to_addr,
                value=amount,
            )
        )

    # ==================== Serialization ====================

    def to_dict(self) -> dict[str, Any]:
        """Serialize token state to dictionary."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "total_supply": self.supply,
            "address": self.address,
            "owner": self.owner,
            "balances": dict(self.balances),
            "allowances": {k: dict(v) for k, v in self.allowances.items()},
            "paused": self.paused,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ERC20Token":
        """Deserialize token state from dictionary."""
        token = cls(
            name=data["name"],
            symbol=data["symbol"],
            decimals=data.get("decimals", 18),
            supply=data.get("total_supply", 0),
            address=data.get("address", ""),
            owner=data.get("owner", ""),
            paused=data.get("paused", False),
        )
        token.balances = dict(data.get("balances", {}))
        token.allowances = {
            k: dict(v) for k, v in data.get("allowances", {}).items()
        }
        return token
