"""
Shared CLI plumbing: the per-invocation ledger context and error handling.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Callable, Optional

import click
from rich import box
from rich.console import Console
from rich.table import Table

from vestledger.core.config import ConfigurationError, VestingConfig
from vestledger.core.deployment import VestingDeployment
from vestledger.core.ledger_storage import LedgerStorage
from vestledger.core.vesting_exceptions import VestingError, get_error_context

logger = logging.getLogger(__name__)

console = Console()

CLI_ERRORS = (VestingError, ConfigurationError, ValueError)


def _cli_fail(exc: Exception, exit_code: int = 1) -> None:
    """Centralized CLI error handler for consistent messaging."""
    logger.error("CLI error: %s", exc, extra={"event": "cli.error", **get_error_context(exc)})
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(exit_code)


class LedgerContext:
    """Per-invocation state shared by all commands."""

    def __init__(self, config: VestingConfig, now: Optional[int], json_output: bool):
        self.config = config
        self.json_output = json_output
        self.storage = LedgerStorage(
            config.data_dir, state_file=config.state_file, max_backups=config.max_backups
        )
        self.time_provider: Callable[[], int] = (
            (lambda: now) if now is not None else (lambda: int(time.time()))
        )

    def load(self) -> VestingDeployment:
        if not self.storage.exists():
            raise click.ClickException(
                f"No ledger at {self.storage.state_path}. Run 'vestledger init' first."
            )
        return VestingDeployment.from_dict(
            self.storage.load_from_disk(), time_provider=self.time_provider
        )

    def save(self, deployment: VestingDeployment) -> None:
        self.storage.save_to_disk(deployment.to_dict())

    def emit(self, payload: dict[str, Any], title: str) -> None:
        if self.json_output:
            click.echo(json.dumps(payload, indent=2))
            return
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="white")
        for key, value in payload.items():
            table.add_row(key, str(value))
        console.print(table)


pass_ledger = click.make_pass_decorator(LedgerContext)
