"""
Contract building blocks consumed by the vesting core.

- ERC20Token: the external fungible token ledger
- Ownable: single-owner administrator capability
"""

from .erc20 import ZERO_ADDRESS, ERC20Token, TokenEvent
from .ownable import Ownable

__all__ = [
    "ERC20Token",
    "TokenEvent",
    "Ownable",
    "ZERO_ADDRESS",
]
