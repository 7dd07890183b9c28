"""
Persistence for notification settings and dismissed alerts.

Values are stored under string keys in a small key-value store. The file
store keeps one JSON document on disk; the memory store is used in tests and
when no file is configured.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core import constants
from ..models import NotificationSettings

SETTINGS_KEY = "weather_notification_settings"
DISMISSED_KEY = "dismissed_alerts"


class MemoryStore:
    """In-memory key-value store."""

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value


class JsonFileStore:
    """Key-value store persisted as a JSON file."""

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """
        Initialize file store.

        Args:
            path: JSON file path; created on first write
            logger: Logger instance
        """
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            try:
                data = self._read()
            except (OSError, ValueError) as e:
                self.logger.warning(f"Rewriting unreadable settings file {self.path}: {e}")
                data = {}
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.path)


class SettingsRepository:
    """Load and save notification settings and dismissed alert ids."""

    def __init__(
        self,
        store: Any,
        dismissed_limit: int = constants.DISMISSED_ALERTS_LIMIT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize repository.

        Args:
            store: Key-value store (MemoryStore or JsonFileStore)
            dismissed_limit: Maximum number of remembered dismissed ids
            logger: Logger instance
        """
        self.store = store
        self.dismissed_limit = dismissed_limit
        self.logger = logger or logging.getLogger(__name__)

    def load_settings(self) -> NotificationSettings:
        """
        Load settings, falling back to defaults when missing or unreadable.

        Returns:
            NotificationSettings
        """
        try:
            data = self.store.get(SETTINGS_KEY)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read notification settings: {e}")
            return NotificationSettings()

        if not data:
            return NotificationSettings()
        try:
            return NotificationSettings.from_dict(data)
        except (TypeError, ValueError) as e:
            self.logger.error(f"Invalid stored notification settings, using defaults: {e}")
            return NotificationSettings()

    def save_settings(self, settings: NotificationSettings) -> None:
        """Persist settings. Write failures are logged."""
        try:
            self.store.set(SETTINGS_KEY, settings.to_dict())
        except OSError as e:
            self.logger.error(f"Failed to save notification settings: {e}")

    def dismissed_ids(self) -> List[str]:
        """Dismissed alert ids, oldest first."""
        try:
            ids = self.store.get(DISMISSED_KEY, [])
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read dismissed alerts: {e}")
            return []
        return [str(i) for i in ids] if isinstance(ids, list) else []

    def add_dismissed(self, alert_id: str) -> None:
        """Remember a dismissed alert id, keeping only the newest ids."""
        ids = [i for i in self.dismissed_ids() if i != alert_id]
        ids.append(alert_id)
        try:
            self.store.set(DISMISSED_KEY, ids[-self.dismissed_limit:])
        except OSError as e:
            self.logger.error(f"Failed to save dismissed alerts: {e}")
