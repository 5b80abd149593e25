"""
End-to-end tests for the vestledger CLI using click's CliRunner.
"""

import json
import os

import pytest
from click.testing import CliRunner

from vestledger.cli.main import cli
from vesting_test_utils import ADMIN, ALICE, BOB


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("VESTLEDGER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def invoke(*args, now=0):
        base = [
            "--data-dir", str(tmp_path),
            "--now", str(now),
            "--json-output",
            "--log-level", "CRITICAL",
        ]
        return runner.invoke(cli, base + [str(a) for a in args])

    return invoke


@pytest.fixture
def deployed(run):
    assert run("init", "--admin", ADMIN, "--reserve", 5000).exit_code == 0
    assert run("cohort", "set", "team", "--caller", ADMIN, "--cliff", 100, "--duration", 1000).exit_code == 0
    return run


def test_init_reports_deployment(run, tmp_path):
    result = run("init", "--admin", ADMIN, "--reserve", 5000)
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["owner"] == ADMIN
    assert payload["reserve"] == 5000
    assert (tmp_path / "ledger_state.json").exists()


def test_init_refuses_to_overwrite(deployed):
    result = deployed("init", "--admin", ADMIN)
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_commands_require_a_ledger(run):
    result = run("status")
    assert result.exit_code == 1
    assert "vestledger init" in result.output


def test_grant_lifecycle(deployed):
    result = deployed("grant", "create", ALICE, "--caller", ADMIN, "--cohort", "team", "--amount", 1000)
    assert result.exit_code == 0, result.output
    created = json.loads(result.stdout)
    assert created["start"] == 100
    assert created["amount_total"] == 1000

    status = json.loads(deployed("status").stdout)
    assert status["vesting_schedules_total_amount"] == 1000
    assert status["withdrawable"] == 4000

    shown = json.loads(deployed("grant", "show", ALICE, now=600).stdout)
    assert shown["unlocked"] == 500
    assert shown["releasable"] == 500

    result = deployed("transfer", "--caller", ALICE, "--to", BOB, "--amount", 100, now=600)
    assert result.exit_code == 1
    assert "has not started" in result.output


def test_transfer_between_beneficiaries(deployed):
    for who in (ALICE, BOB):
        deployed("grant", "create", who, "--caller", ADMIN, "--cohort", "team", "--amount", 1000)

    result = deployed("transfer", "--caller", ALICE, "--to", BOB, "--amount", 100, now=600)
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["released"] == 100
    assert payload["recipient_balance"] == 100

    shown = json.loads(deployed("grant", "show", ALICE, now=600).stdout)
    assert shown["releasable"] == 400


def test_failed_operation_leaves_state_untouched(deployed, tmp_path):
    deployed("grant", "create", ALICE, "--caller", ADMIN, "--cohort", "team", "--amount", 1000)
    before = (tmp_path / "ledger_state.json").read_text()

    result = deployed("grant", "create", BOB, "--caller", ALICE, "--cohort", "team", "--amount", 1)
    assert result.exit_code == 1
    assert (tmp_path / "ledger_state.json").read_text() == before


def test_revoke_frees_reserve(deployed):
    deployed("grant", "create", ALICE, "--caller", ADMIN, "--cohort", "team", "--amount", 1000)
    assert deployed("grant", "revoke", ALICE, "--caller", ADMIN).exit_code == 0
    status = json.loads(deployed("status").stdout)
    assert status["vesting_schedules_total_amount"] == 0
    assert status["withdrawable"] == 5000


def test_cohort_list(deployed):
    listed = json.loads(deployed("cohort", "list").stdout)
    assert listed == {"team": {"cliff": 100, "duration": 1000}}


def test_status_reports_over_committed_ledger(run):
    run("init", "--admin", ADMIN, "--reserve", 1000)
    run("cohort", "set", "team", "--caller", ADMIN, "--cliff", 100, "--duration", 1000)
    run("grant", "create", ALICE, "--caller", ADMIN, "--cohort", "team", "--amount", 1000)
    assert run("release", "--caller", ALICE, "--amount", 100, now=600).exit_code == 0

    result = run("status", now=600)
    assert result.exit_code == 0, result.output
    status = json.loads(result.stdout)
    assert status["contract_token_balance"] == 900
    assert status["vesting_schedules_total_amount"] == 1000
    assert status["withdrawable"] == 0
    assert status["over_committed"] is True
