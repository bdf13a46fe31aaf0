# =============================================================================
# racf_core/offline/settings_store.py
# Small JSON key/value store for client-side flags
# =============================================================================
"""
SettingsStore - durable client flags kept outside the record database.

Clearing or deleting the SQLite record store does not touch these values,
which is what lets the seeding flag outlive an emptied store.
"""

from __future__ import annotations
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from racf_core.errors import StorageError

logger = logging.getLogger(__name__)


class SettingsStore:
    """JSON file of settings, re-read on every access so other processes' writes are seen."""

    DEFAULT_PATH = Path("local_data") / "settings.json"

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else self.DEFAULT_PATH
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(
                f"Error loading settings: {e}",
                operation="read",
                path=str(self.path),
            ) from e
        if not isinstance(data, dict):
            raise StorageError(
                "Settings file does not contain an object",
                operation="read",
                path=str(self.path),
            )
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Read a setting. Raises StorageError if the file cannot be read."""
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Persist a setting. Raises StorageError if the file cannot be written."""
        with self._lock:
            try:
                data = self._load()
            except StorageError:
                logger.warning(f"Overwriting unreadable settings file: {self.path}")
                data = {}
            data[key] = value

            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise StorageError(
                    f"Error saving settings: {e}",
                    operation="write",
                    path=str(self.path),
                ) from e

