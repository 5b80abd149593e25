"""
vestledger - Time-based token vesting ledger

Grants beneficiaries a fixed allocation that unlocks linearly after a
per-cohort cliff, tracks how much has been claimed, and lets a single
administrator configure cohorts and create grants.

Main Components:
- core.vesting: ScheduleRegistry and VestingLedger accounting core
- core.contracts: ERC20 token collaborator and Ownable capability
- core.ledger_storage: durable JSON state with integrity checks
- cli: command-line interface over a persisted ledger
"""

__version__ = "0.1.0"
__author__ = "vestledger Development Team"

__all__ = []
