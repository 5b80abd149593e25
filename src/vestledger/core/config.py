"""
vestledger Configuration

All settings come from environment variables so that the same install can
serve a development sandbox and a production ledger.

SECURITY NOTICE:
- The administrator address is never defaulted on mainnet
- State files hold balances; keep VESTLEDGER_DATA_DIR on protected storage
"""

from __future__ import annotations

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    DEVNET = "devnet"
    TESTNET = "testnet"
    MAINNET = "mainnet"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be an integer, got {raw!r}") from exc


def _get_network(env_var: str = "VESTLEDGER_NETWORK") -> NetworkType:
    raw = os.getenv(env_var, "devnet").strip().lower()
    try:
        return NetworkType(raw)
    except ValueError as exc:
        valid = ", ".join(n.value for n in NetworkType)
        raise ConfigurationError(f"{env_var} must be one of {valid}, got {raw!r}") from exc


class VestingConfig:
    """Snapshot of the environment taken at construction time."""

    def __init__(self) -> None:
        self.network = _get_network()
        self.data_dir = os.getenv(
            "VESTLEDGER_DATA_DIR", os.path.join(os.getcwd(), "vestledger_data")
        )
        self.state_file = os.getenv("VESTLEDGER_STATE_FILE", "ledger_state.json")
        self.max_backups = _get_int("VESTLEDGER_MAX_BACKUPS", 10)

        self.log_level = os.getenv("VESTLEDGER_LOG_LEVEL", "WARNING").upper()
        self.log_file = os.getenv("VESTLEDGER_LOG_FILE", "").strip() or None

        self.token_name = os.getenv("VESTLEDGER_TOKEN_NAME", "Vesting Token")
        self.token_symbol = os.getenv("VESTLEDGER_TOKEN_SYMBOL", "VEST")
        self.token_decimals = _get_int("VESTLEDGER_TOKEN_DECIMALS", 18)
        self.admin_address = os.getenv("VESTLEDGER_ADMIN", "").strip().lower()

        self.validate()

    def validate(self) -> None:
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")
        if not 0 <= self.token_decimals <= 18:
            raise ConfigurationError("VESTLEDGER_TOKEN_DECIMALS must be between 0 and 18")
        if self.max_backups < 0:
            raise ConfigurationError("VESTLEDGER_MAX_BACKUPS cannot be negative")
        if self.network is NetworkType.MAINNET and not self.admin_address:
            raise ConfigurationError(
                "CRITICAL: VESTLEDGER_ADMIN environment variable required for mainnet"
            )

    @property
    def state_path(self) -> str:
        return os.path.join(self.data_dir, self.state_file)


def get_config() -> VestingConfig:
    """Read the current environment into a VestingConfig."""
    config = VestingConfig()
    logger.debug(
        "Configuration loaded",
        extra={
            "event": "config.loaded",
            "network": config.network.value,
            "data_dir": config.data_dir,
        },
    )
    return config
