"""
A deployed token + vesting ledger pair.

Bundles the ERC20 collaborator with the ledger that draws from it so the
two can be created, serialized and restored together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .contracts.erc20 import ERC20Token
from .metrics import VestingMetrics
from .vesting.ledger import VestingLedger

logger = logging.getLogger(__name__)


@dataclass
class VestingDeployment:
    token: ERC20Token
    ledger: VestingLedger

    @classmethod
    def create(
        cls,
        admin: str,
        reserve: int,
        token_name: str = "Vesting Token",
        token_symbol: str = "VEST",
        decimals: int = 18,
        time_provider: Callable[[], int] | None = None,
        metrics: VestingMetrics | None = None,
    ) -> "VestingDeployment":
        """
        Deploy a token owned by ``admin`` and a ledger funded with ``reserve``.
        """
        token = ERC20Token(name=token_name, symbol=token_symbol, decimals=decimals, owner=admin)
        ledger = VestingLedger(token, owner=admin, time_provider=time_provider, metrics=metrics)
        if reserve > 0:
            token.mint(admin, ledger.address, reserve)

        logger.info(
            "Vesting ledger deployed",
            extra={
                "event": "deployment.created",
                "token": token.address,
                "ledger": ledger.address,
                "reserve": reserve,
            },
        )
        return cls(token=token, ledger=ledger)

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token.to_dict(), "ledger": self.ledger.to_dict()}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        time_provider: Callable[[], int] | None = None,
        metrics: VestingMetrics | None = None,
    ) -> "VestingDeployment":
        token = ERC20Token.from_dict(data["token"])
        ledger = VestingLedger.from_dict(
            data["ledger"], token, time_provider=time_provider, metrics=metrics
        )
        return cls(token=token, ledger=ledger)
