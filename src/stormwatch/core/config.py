"""
Configuration for the storm monitoring system.

Settings come from a JSON file; provider API keys and a few deployment
values come from the environment.
"""

import json
import os
from typing import Dict, Any, List, Optional
from pathlib import Path

from . import constants

# Keys every configuration file must define, per section
REQUIRED_KEYS: Dict[str, List[str]] = {
    "api": ["timeout", "max_retries"],
    "cache": ["max_entries"],
    "rate_limit": ["request_delay", "cooldown"],
    "notifications": ["settings_file"],
}

# Provider name -> environment variable holding its API key
API_KEY_VARIABLES = {
    "openweather": "OPENWEATHER_API_KEY",
    "accuweather": "ACCUWEATHER_API_KEY",
    "xweather": "XWEATHER_API_KEY",
}


class Config:
    """Application configuration backed by a JSON document."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Load, override and validate configuration.

        Args:
            config_file: Path to the JSON file. Falls back to the CONFIG_FILE
                         environment variable, then 'config.json'

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not valid JSON or misses required keys
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = self._read_file(Path(self.config_file))
        self._apply_environment()
        self._check_required()

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Configuration file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must hold a JSON object")
        return data

    def _apply_environment(self) -> None:
        # Provider keys are never read from the config file
        self.config["api_keys"] = {
            provider: os.getenv(variable) or None
            for provider, variable in API_KEY_VARIABLES.items()
        }

        timeout = os.getenv("API_TIMEOUT")
        if timeout and "api" in self.config:
            self.config["api"]["timeout"] = int(timeout)

        settings_file = os.getenv("SETTINGS_FILE")
        if settings_file and "notifications" in self.config:
            self.config["notifications"]["settings_file"] = settings_file

        environment = os.getenv("ENVIRONMENT")
        if environment:
            self.config["environment"] = environment

    def _check_required(self) -> None:
        absent = [section for section in REQUIRED_KEYS if not isinstance(self.config.get(section), dict)]
        if absent:
            raise ValueError(f"Missing required configuration sections: {', '.join(absent)}")

        missing = [
            f"{section}.{key}"
            for section, keys in REQUIRED_KEYS.items()
            for key in keys
            if key not in self.config[section]
        ]
        if missing:
            raise ValueError(f"Missing required configuration keys: {', '.join(missing)}")

        if self.danger_distance_km >= self.watch_distance_km:
            raise ValueError("analysis.danger_distance_km must be below analysis.watch_distance_km")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dotted path, e.g. 'cache.ttl.alerts'.

        Args:
            key: Dotted path
            default: Returned when any part of the path is missing or null

        Returns:
            Configuration value
        """
        value: Any = self.config
        for part in key.split("."):
            if not isinstance(value, dict) or value.get(part) is None:
                return default
            value = value[part]
        return value

    def api_key(self, provider: str) -> Optional[str]:
        """
        Get the API key for a provider.

        Args:
            provider: Provider name ('openweather', 'accuweather', 'xweather')

        Returns:
            API key or None when not configured
        """
        return self.get(f"api_keys.{provider}")

    def cache_ttl(self, kind: str) -> float:
        """
        Get cache time-to-live for a data kind.

        Args:
            kind: Data kind ('current', 'forecast', 'alerts', 'hurricanes',
                  'potential', 'location_key')

        Returns:
            TTL in seconds
        """
        defaults = {
            "current": constants.CACHE_TTL_CURRENT,
            "forecast": constants.CACHE_TTL_FORECAST,
            "alerts": constants.CACHE_TTL_ALERTS,
            "hurricanes": constants.CACHE_TTL_HURRICANES,
            "potential": constants.CACHE_TTL_POTENTIAL,
            "location_key": constants.CACHE_TTL_LOCATION_KEY,
        }
        return self.get(f"cache.ttl.{kind}", defaults.get(kind, constants.CACHE_TTL_CURRENT))

    @property
    def api_timeout(self) -> int:
        """Get API timeout in seconds."""
        return self.get("api.timeout", 10)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts."""
        return self.get("api.max_retries", 2)

    @property
    def user_agent(self) -> str:
        """Get the User-Agent sent to public feeds."""
        return self.get("api.user_agent", constants.DEFAULT_USER_AGENT)

    @property
    def cache_max_entries(self) -> int:
        """Get maximum number of entries per cache."""
        return self.get("cache.max_entries", constants.CACHE_MAX_ENTRIES)

    @property
    def coordinate_precision(self) -> int:
        """Get number of decimals used when keying caches by coordinates."""
        return self.get("cache.coordinate_precision", constants.COORDINATE_PRECISION)

    @property
    def request_delay(self) -> float:
        """Get delay between queued requests in seconds."""
        return self.get("rate_limit.request_delay", constants.REQUEST_DELAY)

    @property
    def rate_limit_cooldown(self) -> float:
        """Get pause after an HTTP 429 in seconds."""
        return self.get("rate_limit.cooldown", constants.RATE_LIMIT_COOLDOWN)

    @property
    def danger_distance_km(self) -> float:
        """Get hurricane danger distance in km."""
        return self.get("analysis.danger_distance_km", constants.DANGER_DISTANCE_KM)

    @property
    def watch_distance_km(self) -> float:
        """Get hurricane watch distance in km."""
        return self.get("analysis.watch_distance_km", constants.WATCH_DISTANCE_KM)

    @property
    def same_alert_cooldown(self) -> float:
        """Get the per-alert suppression window in seconds."""
        return self.get("notifications.same_alert_cooldown", constants.SAME_ALERT_COOLDOWN)

    @property
    def min_notification_spacing(self) -> float:
        """Get the minimum spacing between any two notifications in seconds."""
        return self.get("notifications.min_spacing", constants.MIN_NOTIFICATION_SPACING)

    @property
    def alert_cache_size(self) -> int:
        """Get maximum number of remembered alerts."""
        return self.get("notifications.alert_cache_size", constants.ALERT_CACHE_SIZE)

    @property
    def settings_file(self) -> str:
        """Get path of the notification settings file."""
        return self.get("notifications.settings_file", "data/settings.json")

    @property
    def snapshot_timeout(self) -> float:
        """Get timeout for the concurrent data snapshot in seconds."""
        return self.get("monitoring.snapshot_timeout", constants.SNAPSHOT_TIMEOUT)

    @property
    def watch_points(self) -> List[Dict[str, Any]]:
        """Get coastal watch points scanned by storm detection sources."""
        return self.get("detection.watch_points", constants.DEFAULT_WATCH_POINTS)

    def __repr__(self) -> str:
        """String representation of config."""
        configured = sorted(k for k, v in self.get("api_keys", {}).items() if v)
        return (
            f"Config(file={self.config_file}, env={self.get('environment')}, "
            f"keys={configured})"
        )
