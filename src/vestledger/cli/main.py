#!/usr/bin/env python3
"""
vestledger - command-line interface

Operates on a ledger persisted under the data directory. Every command
loads the state, performs one ledger operation and saves the result, so a
failing operation never touches the file.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from vestledger.cli.context import CLI_ERRORS, LedgerContext, _cli_fail, console, pass_ledger
from vestledger.cli.grant_commands import cohort, grant
from vestledger.core.config import ConfigurationError, get_config
from vestledger.core.deployment import VestingDeployment
from vestledger.core.logging_config import setup_logging
from vestledger.core.vesting_exceptions import ArithmeticOverflowError

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Ledger data directory (defaults to VESTLEDGER_DATA_DIR).",
)
@click.option("--now", type=int, help="Override the clock with a Unix timestamp.")
@click.option("--json-output", is_flag=True, help="Output raw JSON")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Log level (defaults to VESTLEDGER_LOG_LEVEL).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Optional[str],
    now: Optional[int],
    json_output: bool,
    log_level: Optional[str],
):
    """Time-based token vesting ledger."""
    try:
        config = get_config()
    except ConfigurationError as exc:
        _cli_fail(exc)
    if data_dir:
        config.data_dir = data_dir
    setup_logging(
        name="vestledger",
        log_file=config.log_file,
        level=log_level or config.log_level,
        environment=config.network.value,
    )
    ctx.obj = LedgerContext(config, now, json_output)


@cli.command()
@click.option("--admin", help="Administrator address (defaults to VESTLEDGER_ADMIN).")
@click.option("--reserve", type=int, default=0, show_default=True, help="Tokens minted to the ledger.")
@click.option("--force", is_flag=True, help="Overwrite an existing ledger.")
@pass_ledger
def init(lctx: LedgerContext, admin: Optional[str], reserve: int, force: bool):
    """Deploy a new token and vesting ledger."""
    admin = admin or lctx.config.admin_address
    if not admin:
        raise click.UsageError("--admin is required when VESTLEDGER_ADMIN is not set")
    if lctx.storage.exists() and not force:
        raise click.ClickException("Ledger already exists; pass --force to replace it")
    try:
        deployment = VestingDeployment.create(
            admin,
            reserve,
            token_name=lctx.config.token_name,
            token_symbol=lctx.config.token_symbol,
            decimals=lctx.config.token_decimals,
            time_provider=lctx.time_provider,
        )
        lctx.save(deployment)
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(
        {
            "ledger": deployment.ledger.address,
            "token": deployment.token.address,
            "owner": deployment.ledger.ownership.owner,
            "reserve": reserve,
        },
        "Ledger deployed",
    )


@cli.command()
@pass_ledger
def status(lctx: LedgerContext):
    """Show contract-wide balances and commitments."""
    try:
        ledger = lctx.load().ledger
        balance = ledger.get_contract_token_balance()
        committed = ledger.get_vesting_schedules_total_amount()
        try:
            withdrawable = ledger.get_withdrawable_amount()
        except ArithmeticOverflowError:
            # Releases have drawn the balance below the committed total
            withdrawable = 0
        payload = {
            "ledger": ledger.address,
            "owner": ledger.ownership.owner,
            "contract_token_balance": balance,
            "vesting_schedules_total_amount": committed,
            "withdrawable": withdrawable,
            "over_committed": committed > balance,
            "cohorts": len(ledger.registry.cohorts()),
            "schedules": len(ledger.vesting_schedules),
        }
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, "Ledger status")


@cli.command()
@click.option("--owner", "holder", required=True, help="Token holder granting the allowance.")
@click.option("--amount", type=int, required=True)
@pass_ledger
def approve(lctx: LedgerContext, holder: str, amount: int):
    """Allow the ledger to pull tokens back from HOLDER on burn."""
    try:
        deployment = lctx.load()
        deployment.token.approve(holder, deployment.ledger.address, amount)
        lctx.save(deployment)
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit({"holder": holder, "spender": deployment.ledger.address, "amount": amount}, "Approved")


@cli.command()
@click.option("--caller", required=True, help="Beneficiary claiming tokens.")
@click.option("--amount", type=int, required=True)
@pass_ledger
def release(lctx: LedgerContext, caller: str, amount: int):
    """Release vested tokens to the caller."""
    try:
        deployment = lctx.load()
        deployment.ledger.release(caller, amount)
        lctx.save(deployment)
        payload = deployment.ledger.get_vesting_schedule(caller).to_dict()
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, "Released")


@cli.command()
@click.option("--caller", required=True, help="Beneficiary sending tokens.")
@click.option("--to", "recipient", required=True, help="Recipient beneficiary.")
@click.option("--amount", type=int, required=True)
@pass_ledger
def transfer(lctx: LedgerContext, caller: str, recipient: str, amount: int):
    """Transfer releasable tokens to another beneficiary."""
    try:
        deployment = lctx.load()
        ledger = deployment.ledger
        ledger.transfer_vesting_token(caller, recipient, amount)
        lctx.save(deployment)
        payload = {
            "from": caller,
            "to": recipient,
            "amount": amount,
            "released": ledger.get_vesting_schedule(caller).released,
            "recipient_balance": ledger.balance_of(recipient),
        }
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, "Transferred")


@cli.command()
@click.option("--caller", required=True)
@click.option("--amount", type=int, required=True)
@pass_ledger
def burn(lctx: LedgerContext, caller: str, amount: int):
    """Burn spendable balance back into the ledger."""
    try:
        deployment = lctx.load()
        deployment.ledger.burn(caller, amount)
        lctx.save(deployment)
        payload = {"caller": caller, "amount": amount, "balance": deployment.ledger.balance_of(caller)}
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, "Burned")


@cli.command()
@click.option("--caller", required=True, help="Administrator address.")
@click.option("--amount", type=int, required=True)
@pass_ledger
def withdraw(lctx: LedgerContext, caller: str, amount: int):
    """Withdraw unallocated tokens to the administrator."""
    try:
        deployment = lctx.load()
        deployment.ledger.withdraw(caller, amount)
        lctx.save(deployment)
        payload = {"amount": amount, "withdrawable": deployment.ledger.get_withdrawable_amount()}
    except CLI_ERRORS as exc:
        _cli_fail(exc)
    lctx.emit(payload, "Withdrawn")



cli.add_command(cohort)
cli.add_command(grant)


def main():
    """Main CLI entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/]")
        sys.exit(130)


if __name__ == "__main__":
    main()
