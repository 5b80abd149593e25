"""
Reentrancy and authorization tests for the vesting ledger.

A hostile token ledger calls back into the vesting ledger from inside its
own transfer/transferFrom. Every such callback must be rejected, and the
outer operation must leave balances exactly as they were.
"""

import pytest

from vestledger.core.contracts.erc20 import ERC20Token
from vestledger.core.vesting.ledger import VestingLedger
from vestledger.core.vesting_exceptions import (
    ReentrancyRejectedError,
    UnauthorizedError,
)
from vesting_test_utils import ADMIN, ALICE, BOB, FakeClock

pytestmark = pytest.mark.security


class ReentrantToken(ERC20Token):
    """Token that re-enters the vesting ledger before moving funds."""

    target: VestingLedger | None = None
    reenter = None

    def transfer(self, sender, recipient, amount):
        if self.target is not None and self.reenter == "transfer":
            self.target.transfer_vesting_token(recipient, sender, 1)
        return super().transfer(sender, recipient, amount)

    def transfer_from(self, spender, from_addr, to_addr, amount):
        if self.target is not None and self.reenter == "burn":
            self.target.burn(from_addr, 1)
        return super().transfer_from(spender, from_addr, to_addr, amount)


@pytest.fixture
def hostile():
    clock = FakeClock(0)
    token = ReentrantToken(name="Hostile", symbol="EVIL", owner=ADMIN)
    ledger = VestingLedger(token, owner=ADMIN, time_provider=clock)
    token.mint(ADMIN, ledger.address, 10_000)
    ledger.registry.set_schedule_time(ADMIN, "team", 100, 1000)
    ledger.create_vesting_schedule(ADMIN, ALICE, "team", True, 1000)
    ledger.create_vesting_schedule(ADMIN, BOB, "team", True, 1000)
    clock.now = 600
    ledger.transfer_vesting_token(ALICE, BOB, 300)
    token.approve(BOB, ledger.address, 300)
    token.target = ledger
    return token, ledger


def _balances(token, ledger):
    return (
        dict(ledger.balances),
        {k: (s.released, s.revoked) for k, s in ledger.vesting_schedules.items()},
        ledger.vesting_schedules_total_amount,
        dict(token.balances),
        len(ledger.events),
    )


def test_reentrant_burn_from_transfer_from_is_rejected(hostile):
    token, ledger = hostile
    token.reenter = "burn"
    before = _balances(token, ledger)

    with pytest.raises(ReentrancyRejectedError):
        ledger.burn(BOB, 100)

    assert _balances(token, ledger) == before
    assert ledger._locked is False


def test_reentrant_transfer_from_transfer_is_rejected(hostile):
    token, ledger = hostile
    token.reenter = "transfer"
    before = _balances(token, ledger)

    with pytest.raises(ReentrancyRejectedError):
        ledger.transfer_vesting_token(ALICE, BOB, 50)

    assert _balances(token, ledger) == before
    assert ledger._locked is False


def test_guard_released_after_rejection(hostile):
    token, ledger = hostile
    token.reenter = "burn"
    with pytest.raises(ReentrancyRejectedError):
        ledger.burn(BOB, 100)

    token.reenter = None
    assert ledger.burn(BOB, 100) is True
    assert ledger.balance_of(BOB) == 200


def test_guard_rejects_direct_nested_call(granted_ledger, clock):
    clock.now = 600
    granted_ledger._locked = True
    with pytest.raises(ReentrancyRejectedError):
        granted_ledger.release(ALICE, 1)
    # A rejected entry must not clear the holder's lock
    assert granted_ledger._locked is True


@pytest.mark.parametrize(
    "operation",
    [
        lambda ledger: ledger.registry.set_schedule_time(ALICE, "team", 0, 1),
        lambda ledger: ledger.create_vesting_schedule(ALICE, ALICE, "team", True, 1),
        lambda ledger: ledger.revoke(ALICE, BOB),
        lambda ledger: ledger.withdraw(ALICE, 1),
        lambda ledger: ledger.ownership.transfer_ownership(ALICE, ALICE),
    ],
)
def test_admin_operations_reject_non_owner(granted_ledger, operation):
    before = granted_ledger.to_dict()
    with pytest.raises(UnauthorizedError):
        operation(granted_ledger)
    assert granted_ledger.to_dict() == before


def test_ownership_transfer_moves_capability(granted_ledger):
    granted_ledger.ownership.transfer_ownership(ADMIN, ALICE)
    with pytest.raises(UnauthorizedError):
        granted_ledger.withdraw(ADMIN, 1)
    assert granted_ledger.withdraw(ALICE, 1) is True
