"""
Unit tests for checked uint256 arithmetic.
"""

import pytest

from vestledger.core.safe_math import MAX_UINT256, SafeMath
from vestledger.core.vesting_exceptions import ArithmeticOverflowError


def test_add_within_range():
    assert SafeMath.add(2, 3) == 5
    assert SafeMath.add(MAX_UINT256 - 1, 1) == MAX_UINT256


def test_add_overflow():
    with pytest.raises(ArithmeticOverflowError):
        SafeMath.add(MAX_UINT256, 1)


def test_sub_underflow():
    assert SafeMath.sub(5, 5) == 0
    with pytest.raises(ArithmeticOverflowError):
        SafeMath.sub(4, 5)


def test_mul_overflow():
    assert SafeMath.mul(2**128, 2**127) == 2**255
    with pytest.raises(ArithmeticOverflowError):
        SafeMath.mul(2**128, 2**128)


def test_div_truncates_and_rejects_zero():
    assert SafeMath.div(7, 2) == 3
    with pytest.raises(ArithmeticOverflowError):
        SafeMath.div(1, 0)


@pytest.mark.parametrize("value", [-1, MAX_UINT256 + 1, 1.5, "10", True])
def test_require_uint_rejects(value):
    with pytest.raises(ArithmeticOverflowError):
        SafeMath.require_uint(value)


def test_require_uint_accepts_bounds():
    assert SafeMath.require_uint(0) == 0
    assert SafeMath.require_uint(MAX_UINT256) == MAX_UINT256
