"""
Checked uint256 arithmetic.

Python integers never wrap, so overflow checking here means enforcing the
uint256 domain explicitly: every result must lie in ``[0, MAX_UINT256]``
and division by zero is an error rather than an exception type from the
interpreter. All failures raise ``ArithmeticOverflowError`` so callers see
a single, typed failure mode.
"""

from __future__ import annotations

from .vesting_exceptions import ArithmeticOverflowError

MAX_UINT256 = 2**256 - 1


class SafeMath:
    """Static helpers for checked unsigned 256-bit integer arithmetic."""

    @staticmethod
    def require_uint(value: int, name: str = "value") -> int:
        """Validate that ``value`` is an int within the uint256 range."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ArithmeticOverflowError(
                f"SafeMath: {name} must be an integer, got {type(value).__name__}"
            )
        if value < 0:
            raise ArithmeticOverflowError(f"SafeMath: {name} is negative ({value})")
        if value > MAX_UINT256:
            raise ArithmeticOverflowError(f"SafeMath: {name} exceeds uint256")
        return value

    @staticmethod
    def add(a: int, b: int) -> int:
        result = a + b
        if result > MAX_UINT256:
            raise ArithmeticOverflowError(
                "SafeMath: addition overflow", details={"a": a, "b": b}
            )
        return result

    @staticmethod
    def sub(a: int, b: int) -> int:
        if b > a:
            raise ArithmeticOverflowError(
                "SafeMath: subtraction underflow", details={"a": a, "b": b}
            )
        return a - b

    @staticmethod
    def mul(a: int, b: int) -> int:
        result = a * b
        if result > MAX_UINT256:
            raise ArithmeticOverflowError(
                "SafeMath: multiplication overflow", details={"a": a, "b": b}
            )
        return result

    @staticmethod
    def div(a: int, b: int) -> int:
        """Integer division truncating toward zero (operands are unsigned)."""
        if b == 0:
            raise ArithmeticOverflowError("SafeMath: division by zero", details={"a": a})
        return a // b
