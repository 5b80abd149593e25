"""
Vesting data model and unlock arithmetic.

A ``VestingSchedule`` unlocks ``amount_total`` linearly from ``start`` to
``start + duration``. The fraction is computed with integer division, so
the unlocked amount is truncated toward zero and never exceeds what time
has actually vested.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any

from ..safe_math import SafeMath


@dataclass(frozen=True)
class ScheduleTime:
    """Cohort parameters: delay before unlocking starts and the vesting span."""

    cliff: int = 0
    duration: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"cliff": self.cliff, "duration": self.duration}


@dataclass
class VestingSchedule:
    """One beneficiary's grant.

    An identity without a record is represented by ``VestingSchedule()``:
    every field zero and ``initialized`` False, which unlocks nothing.
    """

    initialized: bool = False
    beneficiary: str = ""
    start: int = 0
    duration: int = 0
    revocable: bool = False
    amount_total: int = 0
    released: int = 0
    revoked: bool = False

    def unlocked(self, now: int) -> int:
        """Cumulative amount vested at ``now``, regardless of claims."""
        if self.revoked or now < self.start:
            return 0
        if now >= self.start + self.duration:
            return self.amount_total
        elapsed = SafeMath.sub(now, self.start)
        return SafeMath.div(SafeMath.mul(self.amount_total, elapsed), self.duration)

    def locked(self, now: int) -> int:
        return SafeMath.sub(self.amount_total, self.unlocked(now))

    def releasable(self, now: int) -> int:
        if self.revoked:
            return 0
        # Underflow here means released ran ahead of unlocked; SafeMath raises.
        return SafeMath.sub(self.unlocked(now), self.released)

    def cliff_passed(self, now: int) -> bool:
        return self.initialized and self.start < now

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VestingSchedule":
        return cls(
            initialized=bool(data.get("initialized", False)),
            beneficiary=data.get("beneficiary", ""),
            start=int(data.get("start", 0)),
            duration=int(data.get("duration", 0)),
            revocable=bool(data.get("revocable", False)),
            amount_total=int(data.get("amount_total", 0)),
            released=int(data.get("released", 0)),
            revoked=bool(data.get("revoked", False)),
        )


@dataclass
class LedgerEvent:
    """Record emitted for observers (Released, Transfer, Revoked, ...)."""

    event_type: str
    from_address: str = ""
    to_address: str = ""
    value: int = 0
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
