"""
Unit tests for the in-memory ERC20 token the ledger draws from.
"""

import pytest

from vestledger.core.contracts.erc20 import ZERO_ADDRESS, ERC20Token
from vestledger.core.safe_math import MAX_UINT256
from vestledger.core.vesting_exceptions import TokenLedgerError
from vesting_test_utils import ADMIN, ALICE, BOB, CAROL


@pytest.fixture
def funded():
    token = ERC20Token(name="Vesting Token", symbol="VEST", owner=ADMIN)
    token.mint(ADMIN, ALICE, 1000)
    return token


class TestTransfer:
    def test_moves_balance(self, funded):
        assert funded.transfer(ALICE, BOB, 400) is True
        assert funded.balance_of(ALICE) == 600
        assert funded.balance_of(BOB) == 400
        assert funded.total_supply() == 1000
        assert funded.events[-1].event_type == "Transfer"

    def test_addresses_are_case_insensitive(self, funded):
        funded.transfer(ALICE.upper(), BOB, 1)
        assert funded.balance_of(ALICE) == 999

    def test_rejects_overdraft(self, funded):
        with pytest.raises(TokenLedgerError):
            funded.transfer(ALICE, BOB, 1001)
        assert funded.balance_of(ALICE) == 1000

    def test_rejects_zero_recipient(self, funded):
        with pytest.raises(TokenLedgerError):
            funded.transfer(ALICE, ZERO_ADDRESS, 1)

    @pytest.mark.parametrize("amount", [-1, True, 1.5, MAX_UINT256 + 1])
    def test_rejects_bad_amounts(self, funded, amount):
        with pytest.raises(TokenLedgerError):
            funded.transfer(ALICE, BOB, amount)


class TestAllowances:
    def test_transfer_from_spends_allowance(self, funded):
        funded.approve(ALICE, CAROL, 300)
        funded.transfer_from(CAROL, ALICE, BOB, 200)
        assert funded.allowance(ALICE, CAROL) == 100
        assert funded.balance_of(BOB) == 200

    def test_transfer_from_requires_allowance(self, funded):
        funded.approve(ALICE, CAROL, 10)
        with pytest.raises(TokenLedgerError):
            funded.transfer_from(CAROL, ALICE, BOB, 11)

    def test_unlimited_allowance_is_not_decremented(self, funded):
        funded.approve(ALICE, CAROL, MAX_UINT256)
        funded.transfer_from(CAROL, ALICE, BOB, 500)
        assert funded.allowance(ALICE, CAROL) == MAX_UINT256


class TestSupply:
    def test_only_owner_mints(self, funded):
        with pytest.raises(TokenLedgerError):
            funded.mint(ALICE, ALICE, 1)

    def test_mint_rejects_supply_overflow(self, funded):
        with pytest.raises(TokenLedgerError):
            funded.mint(ADMIN, BOB, MAX_UINT256)
        assert funded.total_supply() == 1000

    def test_mint_emits_transfer_from_zero(self, funded):
        event = funded.events[-1]
        assert (event.event_type, event.from_address, event.value) == ("Transfer", ZERO_ADDRESS, 1000)

    def test_pause_blocks_transfers(self, funded):
        funded.pause(ADMIN)
        with pytest.raises(TokenLedgerError):
            funded.transfer(ALICE, BOB, 1)
        funded.unpause(ADMIN)
        assert funded.transfer(ALICE, BOB, 1) is True


def test_dict_round_trip_preserves_state(funded):
    funded.approve(ALICE, CAROL, 5)
    restored = ERC20Token.from_dict(funded.to_dict())
    assert restored.address == funded.address
    assert restored.total_supply() == 1000
    assert restored.balance_of(ALICE) == 1000
    assert restored.allowance(ALICE, CAROL) == 5
