"""
Shared fixtures for vesting ledger tests.
"""

import pytest

from vestledger.core.contracts.erc20 import ERC20Token
from vestledger.core.vesting.ledger import VestingLedger
from vesting_test_utils import ADMIN, ALICE, BOB, LEDGER_ADDRESS, RESERVE, FakeClock


@pytest.fixture
def clock():
    return FakeClock(0)


@pytest.fixture
def token():
    return ERC20Token(name="Vesting Token", symbol="VEST", owner=ADMIN)


@pytest.fixture
def ledger(token, clock):
    """Ledger funded with RESERVE tokens and a 'team' cohort (cliff 100, duration 1000)."""
    ledger = VestingLedger(token, owner=ADMIN, address=LEDGER_ADDRESS, time_provider=clock)
    token.mint(ADMIN, ledger.address, RESERVE)
    ledger.registry.set_schedule_time(ADMIN, "team", cliff=100, duration=1000)
    return ledger


@pytest.fixture
def granted_ledger(ledger):
    """Alice and Bob each hold a 1000 token revocable 'team' grant created at t=0."""
    ledger.create_vesting_schedule(ADMIN, ALICE, "team", True, 1000)
    ledger.create_vesting_schedule(ADMIN, BOB, "team", True, 1000)
    return ledger
