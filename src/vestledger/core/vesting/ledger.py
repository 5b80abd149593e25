"""
Time-based token vesting ledger.

Each beneficiary holds at most one grant that unlocks linearly after its
cohort's cliff. The ledger tracks how much has been released, keeps an
internal spendable balance per identity, and moves value against an
external ``ITokenLedger``.

Security features:
- Administrator capability on grant creation, revocation and withdrawal
- Reentrancy guard on every operation that calls the token ledger
- Checks-effects-interactions ordering
- All-or-nothing semantics: a failing token call rolls back the operation
- Checked uint256 arithmetic throughout
"""

from __future__ import annotations

import copy
import functools
import hashlib
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator

from ..contracts.erc20 import ZERO_ADDRESS
from ..contracts.ownable import Ownable
from ..protocols import ITimeProvider, ITokenLedger
from ..safe_math import SafeMath
from ..vesting_exceptions import (
    ArithmeticOverflowError,
    CliffNotElapsedError,
    InsufficientBalanceError,
    InsufficientReleasableError,
    InsufficientReserveError,
    InvalidArgumentError,
    NotRevocableError,
    ReentrancyRejectedError,
    ScheduleAlreadyExistsError,
    ScheduleNotFoundError,
    TokenLedgerError,
    VestingError,
)
from .registry import ScheduleRegistry
from .schedule import LedgerEvent, VestingSchedule

if TYPE_CHECKING:
    from ..metrics import VestingMetrics

logger = logging.getLogger(__name__)


def compute_schedule_id(identity: str) -> str:
    """Deterministic storage key for an identity's schedule."""
    return hashlib.sha3_256(identity.lower().encode()).hexdigest()


def records_rejections(operation: str) -> Callable:
    """
    Count a ``VestingError`` escaping a public ledger operation.

    Only the outermost operation records, so an error raised by a nested
    (reentrant) call is counted once, under the operation the caller made.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(self: "VestingLedger", *args: Any, **kwargs: Any) -> Any:
            self._call_depth += 1
            try:
                return fn(self, *args, **kwargs)
            except VestingError as exc:
                if self.metrics and self._call_depth == 1:
                    self.metrics.record_rejection(operation, type(exc).__name__)
                raise
            finally:
                self._call_depth -= 1

        return wrapper

    return decorator


class VestingLedger:
    """
    Vesting accounting core.

    Usage:
        token = ERC20Token(name="Vest", symbol="VST", owner=admin)
        ledger = VestingLedger(token, owner=admin)
        token.mint(admin, ledger.address, 1_000_000)
        ledger.registry.set_schedule_time(admin, "team", cliff=100, duration=1000)
        ledger.create_vesting_schedule(admin, alice, "team", True, 1000)
    """

    def __init__(
        self,
        token: ITokenLedger,
        owner: str,
        address: str = "",
        registry: ScheduleRegistry | None = None,
        time_provider: ITimeProvider | None = None,
        metrics: "VestingMetrics" | None = None,
    ) -> None:
        self.token = token
        self.ownership = Ownable(owner)
        self.registry = registry or ScheduleRegistry(self.ownership, metrics=metrics)
        self.metrics = metrics
        self._time_provider = time_provider or (lambda: int(time.time()))

        if not address:
            addr_hash = hashlib.sha3_256(
                f"vesting:{self.ownership.owner}:{time.time()}".encode()
            ).digest()
            address = f"0x{addr_hash[-20:].hex()}"
        self.address = address.lower()

        self.vesting_schedules: dict[str, VestingSchedule] = {}
        self.balances: dict[str, int] = {}
        self.vesting_schedules_total_amount = 0
        self.events: list[LedgerEvent] = []

        # Reentrancy guard
        self._locked = False
        self._call_depth = 0

    # ==================== Time ====================

    def _current_time(self) -> int:
        timestamp = self._time_provider()
        try:
            return int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ValueError("time_provider must return an integer timestamp") from exc

    # ==================== Grant Lifecycle ====================

    @records_rejections("create_vesting_schedule")
    def create_vesting_schedule(
        self,
        caller: str,
        beneficiary: str,
        cohort: str,
        revocable: bool,
        amount: int,
    ) -> VestingSchedule:
        """
        Create the single grant for ``beneficiary`` (owner only).

        The grant starts at ``now + cohort.cliff`` and copies the cohort's
        duration, so later cohort edits do not affect it.

        Args:
            caller: Administrator address
            beneficiary: Identity receiving the grant
            cohort: Cohort id configured in the registry
            revocable: Whether the administrator may revoke the grant
            amount: Total tokens to vest

        Returns:
            The stored schedule

        Raises:
            UnauthorizedError: If caller is not the administrator
            InvalidArgumentError: Bad beneficiary, amount or cohort
            ScheduleAlreadyExistsError: If the beneficiary already has a grant
            InsufficientReserveError: If unallocated tokens cannot cover amount
        """
        self.ownership.require_owner(caller)
        beneficiary_norm = self._validate_identity(beneficiary, "beneficiary")
        self._validate_amount(amount)

        schedule_time = self.registry.get_schedule_time(cohort)
        if schedule_time.duration == 0:
            raise InvalidArgumentError(
                f"Cohort {cohort!r} has no vesting duration configured",
                details={"cohort": cohort},
            )

        schedule_id = compute_schedule_id(beneficiary_norm)
        existing = self.vesting_schedules.get(schedule_id)
        if existing is not None and existing.initialized:
            raise ScheduleAlreadyExistsError(
                f"Beneficiary {beneficiary_norm} already has a vesting schedule",
                details={"beneficiary": beneficiary_norm},
            )

        contract_balance = self.get_contract_token_balance()
        committed = self.vesting_schedules_total_amount
        if contract_balance < committed or contract_balance - committed < amount:
            raise InsufficientReserveError(
                "Not enough unallocated tokens for this grant",
                details={
                    "requested": amount,
                    "contract_balance": contract_balance,
                    "committed": committed,
                },
            )

        now = self._current_time()
        schedule = VestingSchedule(
            initialized=True,
            beneficiary=beneficiary_norm,
            start=SafeMath.add(now, schedule_time.cliff),
            duration=schedule_time.duration,
            revocable=bool(revocable),
            amount_total=amount,
            released=0,
            revoked=False,
        )
        new_total = SafeMath.add(committed, amount)

        self.vesting_schedules[schedule_id] = schedule
        self.vesting_schedules_total_amount = new_total
        self._emit("ScheduleCreated", self.address, beneficiary_norm, amount)

        logger.info(
            "Vesting schedule created",
            extra={
                "event": "vesting.created",
                "beneficiary": beneficiary_norm[:10],
                "cohort": cohort,
                "amount": amount,
                "start": schedule.start,
                "duration": schedule.duration,
            },
        )
        if self.metrics:
            self.metrics.record_grant(amount, self.vesting_schedules_total_amount)
        return copy.copy(schedule)

    @records_rejections("revoke")
    def revoke(self, caller: str, beneficiary: str) -> None:
        """
        Revoke a revocable grant (owner only).

        Unlocking stops entirely: the schedule reads as fully locked from
        now on and its total is returned to the unallocated reserve.
        """
        self.ownership.require_owner(caller)
        beneficiary_norm = self._validate_identity(beneficiary, "beneficiary")
        schedule = self.vesting_schedules.get(compute_schedule_id(beneficiary_norm))
        if schedule is None or not schedule.initialized:
            raise ScheduleNotFoundError(
                f"No vesting schedule for {beneficiary_norm}",
                details={"beneficiary": beneficiary_norm},
            )
        if not schedule.revocable:
            raise NotRevocableError("Vesting schedule is not revocable")
        if schedule.revoked:
            raise NotRevocableError("Vesting schedule already revoked")

        new_total = SafeMath.sub(self.vesting_schedules_total_amount, schedule.amount_total)
        schedule.revoked = True
        self.vesting_schedules_total_amount = new_total
        self._emit("Revoked", beneficiary_norm, "", 0)

        logger.info(
            "Vesting schedule revoked",
            extra={
                "event": "vesting.revoked",
                "beneficiary": beneficiary_norm[:10],
                "released": schedule.released,
                "amount_total": schedule.amount_total,
            },
        )
        if self.metrics:
            self.metrics.record_revoke(self.vesting_schedules_total_amount)

    # ==================== Value Movement ====================

    @records_rejections("transfer_vesting_token")
    def transfer_vesting_token(self, caller: str, recipient: str, amount: int) -> bool:
        """
        Pay ``amount`` of the caller's releasable tokens to ``recipient``.

        Both caller and recipient must hold a schedule whose cliff has
        passed, and ``amount`` must be strictly below the caller's
        releasable amount.

        Raises:
            CliffNotElapsedError: Either party's schedule has not started
            InsufficientReleasableError: amount >= releasable
            ReentrancyRejectedError: Called from inside another guarded call
        """
        caller_norm = self._validate_identity(caller, "caller")
        recipient_norm = self._validate_identity(recipient, "recipient")
        self._validate_amount(amount)

        with self._guarded("transfer_vesting_token"):
            now = self._current_time()
            schedule = self._schedule_for(caller_norm)
            self._require_cliff_passed(schedule, caller_norm, now)
            self._require_cliff_passed(self._schedule_for(recipient_norm), recipient_norm, now)

            releasable = schedule.releasable(now)
            if not releasable > amount:
                raise InsufficientReleasableError(
                    f"Releasable amount {releasable} must exceed {amount}",
                    details={"releasable": releasable, "requested": amount},
                )

            schedule.released = SafeMath.add(schedule.released, amount)
            self.balances[recipient_norm] = SafeMath.add(self.balance_of(recipient_norm), amount)

            self._call_token(self.token.transfer, self.address, recipient_norm, amount)
            self._emit("Transfer", caller_norm, recipient_norm, amount)

        logger.info(
            "Vesting tokens transferred",
            extra={
                "event": "vesting.transfer",
                "from": caller_norm[:10],
                "to": recipient_norm[:10],
                "amount": amount,
            },
        )
        if self.metrics:
            self.metrics.record_release(amount)
        return True

    @records_rejections("release")
    def release(self, caller: str, amount: int) -> bool:
        """Claim ``amount`` of the caller's releasable tokens to the caller."""
        caller_norm = self._validate_identity(caller, "caller")
        self._validate_amount(amount)

        with self._guarded("release"):
            now = self._current_time()
            schedule = self._schedule_for(caller_norm)
            self._require_cliff_passed(schedule, caller_norm, now)

            releasable = schedule.releasable(now)
            if not releasable > amount:
                raise InsufficientReleasableError(
                    f"Releasable amount {releasable} must exceed {amount}",
                    details={"releasable": releasable, "requested": amount},
                )

            schedule.released = SafeMath.add(schedule.released, amount)

            self._call_token(self.token.transfer, self.address, caller_norm, amount)
            self._emit("Released", self.address, caller_norm, amount)

        logger.info(
            "Vesting tokens released",
            extra={"event": "vesting.released", "beneficiary": caller_norm[:10], "amount": amount},
        )
        if self.metrics:
            self.metrics.record_release(amount)
        return True

    @records_rejections("burn")
    def burn(self, caller: str, amount: int) -> bool:
        """
        Return ``amount`` of spendable balance to the ledger.

        The caller must have approved this ledger on the token for at
        least ``amount``; tokens move from caller back to the ledger.

        Raises:
            InsufficientBalanceError: amount >= spendable balance
            ReentrancyRejectedError: Called from inside another guarded call
        """
        caller_norm = self._validate_identity(caller, "caller")
        self._validate_amount(amount)

        with self._guarded("burn"):
            balance = self.balance_of(caller_norm)
            if not balance > amount:
                raise InsufficientBalanceError(
                    f"Spendable balance {balance} must exceed {amount}",
                    details={"balance": balance, "requested": amount},
                )

            self.balances[caller_norm] = SafeMath.sub(balance, amount)

            self._call_token(
                self.token.transfer_from, self.address, caller_norm, self.address, amount
            )
            self._emit("Transfer", caller_norm, self.address, amount)

        logger.info(
            "Spendable balance burned",
            extra={"event": "vesting.burn", "from": caller_norm[:10], "amount": amount},
        )
        if self.metrics:
            self.metrics.record_burn(amount)
        return True

    @records_rejections("withdraw")
    def withdraw(self, caller: str, amount: int) -> bool:
        """Send unallocated tokens to the administrator (owner only)."""
        self.ownership.require_owner(caller)
        self._validate_amount(amount)

        with self._guarded("withdraw"):
            withdrawable = self.get_withdrawable_amount()
            if amount > withdrawable:
                raise InsufficientReserveError(
                    f"Only {withdrawable} tokens are unallocated",
                    details={"withdrawable": withdrawable, "requested": amount},
                )
            self._call_token(self.token.transfer, self.address, self.ownership.owner, amount)

        logger.info(
            "Unallocated tokens withdrawn",
            extra={"event": "vesting.withdraw", "amount": amount},
        )
        return True

    # ==================== Read-only Queries ====================

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity.lower(), 0)

    def get_vesting_schedule(self, identity: str) -> VestingSchedule:
        """Return a copy of the identity's schedule (all-zero if none)."""
        return copy.copy(self._schedule_for(identity.lower()))

    def get_total_granted_amount(self, identity: str) -> int:
        return self._schedule_for(identity.lower()).amount_total

    def get_unlocked_amount(self, identity: str) -> int:
        return self._schedule_for(identity.lower()).unlocked(self._current_time())

    def get_locked_amount(self, identity: str) -> int:
        return self._schedule_for(identity.lower()).locked(self._current_time())

    def get_releasable_amount(self, identity: str) -> int:
        return self._schedule_for(identity.lower()).releasable(self._current_time())

    def get_vesting_schedules_total_amount(self) -> int:
        return self.vesting_schedules_total_amount

    def get_withdrawable_amount(self) -> int:
        """Tokens held by the ledger that no active grant has committed."""
        return SafeMath.sub(self.get_contract_token_balance(), self.vesting_schedules_total_amount)

    def get_contract_token_balance(self) -> int:
        return self.token.balance_of(self.address)

    # ==================== Helpers ====================

    def _schedule_for(self, identity_norm: str) -> VestingSchedule:
        schedule = self.vesting_schedules.get(compute_schedule_id(identity_norm))
        return schedule if schedule is not None else VestingSchedule()

    def _require_cliff_passed(self, schedule: VestingSchedule, identity: str, now: int) -> None:
        if not schedule.cliff_passed(now):
            raise CliffNotElapsedError(
                f"Vesting has not started for {identity}",
                details={"identity": identity, "start": schedule.start, "now": now},
            )

    def _validate_identity(self, identity: str, field: str) -> str:
        if not identity or identity.lower() == ZERO_ADDRESS:
            raise InvalidArgumentError(f"{field} cannot be the zero address")
        return identity.lower()

    def _validate_amount(self, amount: int) -> None:
        try:
            SafeMath.require_uint(amount, "amount")
        except ArithmeticOverflowError as exc:
            raise InvalidArgumentError(str(exc)) from exc
        if amount == 0:
            raise InvalidArgumentError("amount must be positive")

    def _call_token(self, fn: Callable[..., bool], *args: Any) -> None:
        if not fn(*args):
            raise TokenLedgerError(
                f"Token ledger call {getattr(fn, '__name__', 'call')} reported failure"
            )

    def _emit(self, event_type: str, from_addr: str, to_addr: str, amount: int) -> None:
        self.events.append(
            LedgerEvent(
                event_type=event_type,
                from_address=from_addr,
                to_address=to_addr,
                value=amount,
            )
        )

    @contextmanager
    def _guarded(self, operation: str) -> Iterator[None]:
        """Hold the reentrancy lock and roll back all state if the body raises."""
        if self._locked:
            logger.warning(
                "Reentrant call rejected",
                extra={"event": "vesting.reentrancy_rejected", "operation": operation},
            )
            raise ReentrancyRejectedError(
                "VestingLedger: reentrant call", details={"operation": operation}
            )

        snapshot = (
            copy.deepcopy(self.vesting_schedules),
            dict(self.balances),
            self.vesting_schedules_total_amount,
            len(self.events),
        )
        try:
            self._locked = True
            yield
        except Exception:
            (
                self.vesting_schedules,
                self.balances,
                self.vesting_schedules_total_amount,
                events_len,
            ) = snapshot
            del self.events[events_len:]
            raise
        finally:
            self._locked = False

    # ==================== Serialization ====================

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "owner": self.ownership.owner,
            "cohorts": self.registry.to_dict(),
            "vesting_schedules": {
                key: schedule.to_dict() for key, schedule in self.vesting_schedules.items()
            },
            "balances": dict(self.balances),
            "vesting_schedules_total_amount": self.vesting_schedules_total_amount,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        token: ITokenLedger,
        time_provider: ITimeProvider | None = None,
        metrics: "VestingMetrics" | None = None,
    ) -> "VestingLedger":
        ledger = cls(
            token,
            owner=data["owner"],
            address=data["address"],
            time_provider=time_provider,
            metrics=metrics,
        )
        ledger.registry.load_dict(data.get("cohorts", {}))
        ledger.vesting_schedules = {
            key: VestingSchedule.from_dict(value)
            for key, value in data.get("vesting_schedules", {}).items()
        }
        ledger.balances = {k: int(v) for k, v in data.get("balances", {}).items()}
        ledger.vesting_schedules_total_amount = int(data.get("vesting_schedules_total_amount", 0))
        return ledger
