"""
Vesting accounting core.

- ScheduleRegistry: cohort id -> (cliff, duration)
- VestingLedger: per-beneficiary grants, unlock arithmetic, transfers and burns
"""

from .ledger import VestingLedger, compute_schedule_id
from .registry import ScheduleRegistry
from .schedule import LedgerEvent, ScheduleTime, VestingSchedule

__all__ = [
    "VestingLedger",
    "ScheduleRegistry",
    "ScheduleTime",
    "VestingSchedule",
    "LedgerEvent",
    "compute_schedule_id",
]
