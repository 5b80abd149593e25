"""
vestledger - Prometheus metrics for the vesting ledger.

Counts grants, releases, burns and rejected operations, and tracks the
committed grant total as a gauge. Pass a dedicated ``CollectorRegistry``
to keep several ledgers (or test runs) from colliding on metric names.
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, generate_latest


class VestingMetrics:
    """Prometheus collectors for one vesting ledger."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        self.grants_total = Counter(
            "vestledger_grants_total",
            "Total number of vesting schedules created",
            registry=self.registry,
        )
        self.granted_tokens_total = Counter(
            "vestledger_granted_tokens_total",
            "Total tokens committed to vesting schedules",
            registry=self.registry,
        )
        self.revocations_total = Counter(
            "vestledger_revocations_total",
            "Total number of vesting schedules revoked",
            registry=self.registry,
        )
        self.released_tokens_total = Counter(
            "vestledger_released_tokens_total",
            "Total vested tokens released or transferred out",
            registry=self.registry,
        )
        self.burned_tokens_total = Counter(
            "vestledger_burned_tokens_total",
            "Total spendable tokens burned back to the ledger",
            registry=self.registry,
        )
        self.rejections_total = Counter(
            "vestledger_rejections_total",
            "Ledger operations rejected, by operation and error type",
            ["operation", "error_type"],
            registry=self.registry,
        )
        self.committed_amount = Gauge(
            "vestledger_committed_amount",
            "Sum of amount_total over active vesting schedules",
            registry=self.registry,
        )

    def record_grant(self, amount: int, committed: int) -> None:
        self.grants_total.inc()
        self.granted_tokens_total.inc(amount)
        self.committed_amount.set(committed)

    def record_revoke(self, committed: int) -> None:
        self.revocations_total.inc()
        self.committed_amount.set(committed)

    def record_release(self, amount: int) -> None:
        self.released_tokens_total.inc(amount)

    def record_burn(self, amount: int) -> None:
        self.burned_tokens_total.inc(amount)

    def record_rejection(self, operation: str, error_type: str) -> None:
        self.rejections_total.labels(operation=operation, error_type=error_type).inc()

    def export(self) -> bytes:
        """Render metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)
