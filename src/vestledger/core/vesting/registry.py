"""
Cohort schedule registry.

Maps an opaque cohort id to its ``ScheduleTime``. Only the administrator
may write; grant creation reads. Changing a cohort never touches grants
that were already created from it, since each grant copies what it needs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from ..contracts.ownable import Ownable
from ..safe_math import SafeMath
from ..vesting_exceptions import ArithmeticOverflowError, InvalidArgumentError, VestingError
from .schedule import LedgerEvent, ScheduleTime

if TYPE_CHECKING:
    from ..metrics import VestingMetrics

logger = logging.getLogger(__name__)


class ScheduleRegistry:
    def __init__(self, ownership: Ownable, metrics: Optional["VestingMetrics"] = None) -> None:
        self.ownership = ownership
        self.metrics = metrics
        self.schedule_times: dict[str, ScheduleTime] = {}
        self.events: list[LedgerEvent] = []

    def set_schedule_time(self, caller: str, cohort: str, cliff: int, duration: int) -> None:
        """
        Insert or overwrite a cohort's cliff and duration (owner only).

        A zero duration is stored as given; grant creation refuses to use
        such a cohort.

        Raises:
            UnauthorizedError: If caller is not the administrator
            InvalidArgumentError: If the cohort id is empty or a value is negative
        """
        try:
            self._store_schedule_time(caller, cohort, cliff, duration)
        except VestingError as exc:
            if self.metrics:
                self.metrics.record_rejection("set_schedule_time", type(exc).__name__)
            raise

    def _store_schedule_time(self, caller: str, cohort: str, cliff: int, duration: int) -> None:
        self.ownership.require_owner(caller)
        if not cohort:
            raise InvalidArgumentError("Cohort id cannot be empty")
        try:
            SafeMath.require_uint(cliff, "cliff")
            SafeMath.require_uint(duration, "duration")
        except ArithmeticOverflowError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        self.schedule_times[cohort] = ScheduleTime(cliff=cliff, duration=duration)
        self.events.append(LedgerEvent(event_type="CohortConfigured", to_address=cohort))
        logger.info(
            "Cohort schedule set",
            extra={
                "event": "vesting.cohort_set",
                "cohort": cohort,
                "cliff": cliff,
                "duration": duration,
            },
        )

    def get_schedule_time(self, cohort: str) -> ScheduleTime:
        return self.schedule_times.get(cohort, ScheduleTime())

    def cohorts(self) -> list[str]:
        return sorted(self.schedule_times)

    def to_dict(self) -> dict[str, Any]:
        return {cohort: st.to_dict() for cohort, st in self.schedule_times.items()}

    def load_dict(self, data: dict[str, Any]) -> None:
        self.schedule_times = {
            cohort: ScheduleTime(cliff=int(v["cliff"]), duration=int(v["duration"]))
            for cohort, v in data.items()
        }
