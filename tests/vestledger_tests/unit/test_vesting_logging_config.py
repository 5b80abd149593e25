"""
Unit tests for structured JSON logging setup.
"""

import json
import logging

from vestledger.core.logging_config import CustomJsonFormatter, get_logger, setup_logging


def _record(msg="Grant created", **extra):
    record = logging.LogRecord("vestledger.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_adds_context_fields():
    formatter = CustomJsonFormatter(environment="devnet")
    payload = json.loads(formatter.format(_record(event="vesting.created", amount=1000)))
    assert payload["message"] == "Grant created"
    assert payload["environment"] == "devnet"
    assert payload["service"] == "vestledger"
    assert payload["level"] == "info"
    assert payload["event"] == "vesting.created"
    assert payload["amount"] == 1000
    assert payload["source"]["line"] == 10
    assert "timestamp" in payload


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "ledger.json"
    logger = setup_logging(
        name="vestledger_test_file", log_file=str(log_file), level="INFO", enable_console=False
    )
    logger.info("Cohort configured", extra={"event": "vesting.cohort_set"})
    for handler in logger.handlers:
        handler.flush()

    line = log_file.read_text().strip().splitlines()[-1]
    assert json.loads(line)["event"] == "vesting.cohort_set"


def test_setup_logging_replaces_handlers():
    setup_logging(name="vestledger_test_dupes", level="DEBUG")
    logger = setup_logging(name="vestledger_test_dupes", level="WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_get_logger_reuses_configured_logger():
    first = setup_logging(name="vestledger_test_reuse", level="ERROR")
    assert get_logger("vestledger_test_reuse", level="DEBUG") is first
    assert first.level == logging.ERROR
