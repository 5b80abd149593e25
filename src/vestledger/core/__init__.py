"""
vestledger Core Module

Core functionality for the vesting ledger including:
- Cohort schedules and per-beneficiary grants
- Unlock, release and burn accounting
- Token ledger collaborator and administrator capability
- Storage, configuration, logging and metrics
"""

__all__ = []
