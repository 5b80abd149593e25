"""
Ledger state persistence with integrity checks.

The vesting ledger itself is pure in-memory state; this module makes it
durable. Saved files are packages of ``{"metadata": ..., "state": ...}``
where the metadata carries a SHA-256 checksum of the canonical state JSON.
"""

import hashlib
import json
import logging
import os
import shutil
import time
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional

from .vesting_exceptions import CorruptedDataError, StorageError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "ledger_backup_"
FORMAT_VERSION = "1.0"


class LedgerStorage:
    """
    Ledger persistent storage with data integrity and recovery

    Features:
    - Atomic writes (write to temp, then rename)
    - SHA-256 checksums for data integrity
    - Automatic backups on save
    - Recovery from the newest valid backup when the main file is corrupt
    """

    def __init__(self, data_dir: str, state_file: str = "ledger_state.json", max_backups: int = 10):
        self.data_dir = data_dir
        self.state_path = os.path.join(data_dir, state_file)
        self.backup_dir = os.path.join(data_dir, "backups")
        self.max_backups = max_backups

        os.makedirs(self.data_dir, exist_ok=True)
        os.makedirs(self.backup_dir, exist_ok=True)

        self.lock = Lock()

    def _calculate_checksum(self, data: str) -> str:
        return hashlib.sha256(data.encode("utf-8")).hexdigest()

    def _canonical(self, state: Dict[str, Any]) -> str:
        return json.dumps(state, indent=2, sort_keys=True)

    def exists(self) -> bool:
        return os.path.exists(self.state_path)

    def save_to_disk(self, state: Dict[str, Any], create_backup: bool = True) -> str:
        """
        Save ledger state to disk with atomic write.

        Args:
            state: Serialized ledger state
            create_backup: Whether to back up the previous file first

        Returns:
            The checksum of the saved state

        Raises:
            StorageError: If the file cannot be written
        """
        with self.lock:
            state_json = self._canonical(state)
            checksum = self._calculate_checksum(state_json)
            package = {
                "metadata": {
                    "timestamp": time.time(),
                    "checksum": checksum,
                    "version": FORMAT_VERSION,
                },
                "state": state,
            }

            try:
                if create_backup and os.path.exists(self.state_path):
                    self._create_backup()

                temp_file = self.state_path + ".tmp"
                with open(temp_file, "w") as f:
                    f.write(json.dumps(package, indent=2, sort_keys=True))
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(temp_file, self.state_path)
            except OSError as e:
                logger.error(
                    "Failed to save ledger state",
                    extra={"event": "storage.save_failed", "path": self.state_path, "error": str(e)},
                )
                raise StorageError(f"Failed to save ledger state: {e}") from e

            logger.debug(
                "Ledger state saved",
                extra={"event": "storage.saved", "path": self.state_path, "checksum": checksum[:8]},
            )
            return checksum

    def load_from_disk(self) -> Dict[str, Any]:
        """
        Load ledger state, verifying its checksum.

        Falls back to the newest valid backup if the main file is corrupt.

        Raises:
            StorageError: If no state file exists
            CorruptedDataError: If neither the file nor any backup is valid
        """
        with self.lock:
            if not os.path.exists(self.state_path):
                raise StorageError(f"No ledger state found at {self.state_path}")

            try:
                return self._read_package(self.state_path)
            except (json.JSONDecodeError, CorruptedDataError) as e:
                logger.warning(
                    "Ledger state corrupt, attempting recovery",
                    extra={"event": "storage.corrupt", "path": self.state_path, "error": str(e)},
                )

            for backup in self.list_backups():
                try:
                    state = self._read_package(backup)
                except (json.JSONDecodeError, CorruptedDataError, OSError):
                    continue
                logger.warning(
                    "Recovered ledger state from backup",
                    extra={"event": "storage.recovered", "backup": os.path.basename(backup)},
                )
                return state

            raise CorruptedDataError(
                "Ledger state failed integrity check and no valid backup exists",
                details={"path": self.state_path},
            )

    def _read_package(self, path: str) -> Dict[str, Any]:
        with open(path, "r") as f:
            package = json.load(f)

        if not isinstance(package, dict) or "state" not in package:
            raise CorruptedDataError(f"{os.path.basename(path)} is not a ledger state package")

        state = package["state"]
        expected = package.get("metadata", {}).get("checksum")
        if expected != self._calculate_checksum(self._canonical(state)):
            raise CorruptedDataError(f"Checksum mismatch in {os.path.basename(path)}")
        return state

    def _create_backup(self) -> None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = os.path.join(self.backup_dir, f"{BACKUP_PREFIX}{timestamp}.json")
        suffix = 0
        while os.path.exists(backup_file):
            suffix += 1
            backup_file = os.path.join(self.backup_dir, f"{BACKUP_PREFIX}{timestamp}_{suffix}.json")
        shutil.copy2(self.state_path, backup_file)
        self._cleanup_old_backups()

    def _cleanup_old_backups(self) -> None:
        for stale in self.list_backups()[self.max_backups:]:
            os.remove(stale)

    def list_backups(self) -> List[str]:
        """Backup paths, newest first."""
        backups = [
            os.path.join(self.backup_dir, f)
            for f in os.listdir(self.backup_dir)
            if f.startswith(BACKUP_PREFIX) and f.endswith(".json")
        ]
        return sorted(backups, reverse=True)

    def get_metadata(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.state_path):
            return None
        with open(self.state_path, "r") as f:
            return json.load(f).get("metadata")
