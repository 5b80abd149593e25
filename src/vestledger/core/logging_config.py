"""
vestledger - Structured Logging Configuration

Configures structured JSON logging:
- JSON format for easy parsing and aggregation
- Log rotation to prevent disk space issues
- Console and file handlers

Usage:
    from vestledger.core.logging_config import setup_logging

    logger = setup_logging(
        name="vestledger",
        log_file="/var/log/vestledger/ledger.json",
        level="INFO"
    )

    logger.info("Grant created", extra={"event": "vesting.created", "amount": 1000})
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter


class CustomJsonFormatter(JsonFormatter):
    """
    JSON formatter with additional context fields.

    Adds timestamp, environment, service and source location to all log
    records.
    """

    def __init__(
        self,
        fmt: str = "%(timestamp)s %(level)s %(name)s %(message)s",
        timestamp: bool = True,
        environment: Optional[str] = None,
        service_name: str = "vestledger",
    ):
        super().__init__(fmt=fmt)
        self.timestamp = timestamp
        self.environment = environment or "production"
        self.service_name = service_name

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        if self.timestamp and not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["environment"] = self.environment
        log_record["service"] = self.service_name

        if not log_record.get("level"):
            log_record["level"] = record.levelname.lower()

        log_record["source"] = {
            "function": record.funcName,
            "module": record.module,
            "line": record.lineno,
        }


def setup_logging(
    name: str = "vestledger",
    log_file: Optional[str] = None,
    level: str = "INFO",
    environment: str = "production",
    enable_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Setup structured JSON logging.

    Args:
        name: Logger name (the package logger configures every module below it)
        log_file: Path to JSON log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment identifier (dev, staging, prod)
        enable_console: Whether to log to the console
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    formatter = CustomJsonFormatter(
        environment=environment,
        service_name=name.split(".")[0],
    )

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(getattr(logging, level.upper()))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not create file handler for %s: %s", log_file, e)

    return logger


def get_logger(
    name: str,
    log_file: Optional[str] = None,
    level: str = "INFO",
) -> logging.Logger:
    """Get a logger, configuring it only if it has no handlers yet."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logging(name=name, log_file=log_file, level=level)

    return logger
