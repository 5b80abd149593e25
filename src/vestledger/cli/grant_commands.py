"""
vestledger cohort and grant commands

Provides CLI interface for administrator operations:
- Cohort schedules (set, list)
- Grants (create, show, revoke)
"""

from __future__ import annotations

import logging

import click
from rich import box
from rich.table import Table

from vestledger.cli.context import CLI_ERRORS, LedgerContext, _cli_fail, console, pass_ledger

logger = logging.getLogger(__name__)


@click.group()
def cohort():
    """Cohort schedule commands."""
    pass


@cohort.command("set")
@click.argument("cohort_id")
@click.option("--caller", required=True, help="Administrator address.")
@click.option("--cliff", type=int, required=True, help="Seconds from grant creation to start.")
@click.option("--duration", type=int, required=True, help="Seconds over which tokens unlock.")
@pass_ledger
def set_cohort(lctx: LedgerContext, cohort_id: str, caller: str, cliff: int, duration: int):
    """Create or overwrite COHORT_ID's cliff and duration."""
    try:
        deployment = lctx.load()
        deployment.ledger.registry.set_schedule_time(caller, cohort_id, cliff, duration)
        lctx.save(deployment)
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit({"cohort": cohort_id, "cliff": cliff, "duration": duration}, "Cohort set")


@cohort.command("list")
@pass_ledger
def list_cohorts(lctx: LedgerContext):
    """List configured cohorts."""
    try:
        registry = lctx.load().ledger.registry
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    data = registry.to_dict()
    if lctx.json_output:
        lctx.emit(data, "Cohorts")
        return
    if not data:
        console.print("[yellow]No cohorts configured[/]")
        return
    table = Table(title="Cohorts", box=box.ROUNDED)
    table.add_column("Cohort", style="cyan")
    table.add_column("Cliff", justify="right")
    table.add_column("Duration", justify="right")
    for cohort_id in registry.cohorts():
        table.add_row(cohort_id, str(data[cohort_id]["cliff"]), str(data[cohort_id]["duration"]))
    console.print(table)


@click.group()
def grant():
    """Per-beneficiary grant commands."""
    pass


@grant.command("create")
@click.argument("beneficiary")
@click.option("--caller", required=True, help="Administrator address.")
@click.option("--cohort", "cohort_id", required=True)
@click.option("--amount", type=int, required=True)
@click.option("--revocable/--irrevocable", default=True, show_default=True)
@pass_ledger
def create_grant(
    lctx: LedgerContext, beneficiary: str, caller: str, cohort_id: str, amount: int, revocable: bool
):
    """Grant AMOUNT tokens to BENEFICIARY on a cohort schedule."""
    try:
        deployment = lctx.load()
        schedule = deployment.ledger.create_vesting_schedule(
            caller, beneficiary, cohort_id, revocable, amount
        )
        lctx.save(deployment)
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(schedule.to_dict(), "Grant created")


@grant.command("show")
@click.argument("beneficiary")
@pass_ledger
def show_grant(lctx: LedgerContext, beneficiary: str):
    """Show BENEFICIARY's schedule and current amounts."""
    try:
        ledger = lctx.load().ledger
        payload = ledger.get_vesting_schedule(beneficiary).to_dict()
        payload.update(
            unlocked=ledger.get_unlocked_amount(beneficiary),
            locked=ledger.get_locked_amount(beneficiary),
            releasable=ledger.get_releasable_amount(beneficiary),
            spendable_balance=ledger.balance_of(beneficiary),
        )
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, f"Grant {beneficiary}")


@grant.command("revoke")
@click.argument("beneficiary")
@click.option("--caller", required=True, help="Administrator address.")
@pass_ledger
def revoke_grant(lctx: LedgerContext, beneficiary: str, caller: str):
    """Revoke BENEFICIARY's revocable grant."""
    try:
        deployment = lctx.load()
        deployment.ledger.revoke(caller, beneficiary)
        lctx.save(deployment)
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit({"beneficiary": beneficiary, "revoked": True}, "Grant revoked")
