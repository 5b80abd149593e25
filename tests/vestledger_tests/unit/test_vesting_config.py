"""
Unit tests for environment-driven configuration.
"""

import os

import pytest

from vestledger.core.config import ConfigurationError, NetworkType, VestingConfig, get_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("VESTLEDGER_"):
            monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = get_config()
    assert config.network is NetworkType.DEVNET
    assert config.log_level == "WARNING"
    assert config.token_symbol == "VEST"
    assert config.state_path.endswith(os.path.join("vestledger_data", "ledger_state.json"))


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("VESTLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("VESTLEDGER_NETWORK", "testnet")
    monkeypatch.setenv("VESTLEDGER_TOKEN_DECIMALS", "6")
    monkeypatch.setenv("VESTLEDGER_ADMIN", "0xABC")
    config = VestingConfig()
    assert config.data_dir == str(tmp_path)
    assert config.network is NetworkType.TESTNET
    assert config.token_decimals == 6
    assert config.admin_address == "0xabc"


@pytest.mark.parametrize(
    "key,value",
    [
        ("VESTLEDGER_NETWORK", "moonnet"),
        ("VESTLEDGER_TOKEN_DECIMALS", "many"),
        ("VESTLEDGER_TOKEN_DECIMALS", "19"),
        ("VESTLEDGER_LOG_LEVEL", "chatty"),
        ("VESTLEDGER_MAX_BACKUPS", "-1"),
    ],
)
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigurationError):
        VestingConfig()


def test_mainnet_requires_admin(monkeypatch):
    monkeypatch.setenv("VESTLEDGER_NETWORK", "mainnet")
    with pytest.raises(ConfigurationError):
        VestingConfig()
    monkeypatch.setenv("VESTLEDGER_ADMIN", "0xadmin")
    assert VestingConfig().network is NetworkType.MAINNET
