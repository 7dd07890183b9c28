"""
Notification settings model.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict

from ..core import constants


class AlertFrequency(Enum):
    """How often the monitor re-evaluates conditions."""

    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"


@dataclass
class NotificationSettings:
    """User preferences for weather notifications."""

    enable_push_notifications: bool = True
    enable_hurricane_alerts: bool = True
    enable_severe_weather_alerts: bool = True
    enable_moderate_weather_alerts: bool = False
    alert_frequency: AlertFrequency = AlertFrequency.IMMEDIATE
    test_mode: bool = False

    @property
    def poll_interval(self) -> float:
        """Seconds between monitoring evaluations."""
        if self.test_mode:
            return constants.TEST_MODE_INTERVAL
        return constants.FREQUENCY_INTERVALS[self.alert_frequency.value]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["alert_frequency"] = self.alert_frequency.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotificationSettings":
        """
        Build settings from a stored dictionary.

        Unknown keys are ignored and missing keys take their defaults.

        Raises:
            ValueError: If alert_frequency is not a known frequency
        """
        defaults = cls()
        frequency = data.get("alert_frequency", defaults.alert_frequency)
        return cls(
            enable_push_notifications=bool(
                data.get("enable_push_notifications", defaults.enable_push_notifications)
            ),
            enable_hurricane_alerts=bool(
                data.get("enable_hurricane_alerts", defaults.enable_hurricane_alerts)
            ),
            enable_severe_weather_alerts=bool(
                data.get("enable_severe_weather_alerts", defaults.enable_severe_weather_alerts)
            ),
            enable_moderate_weather_alerts=bool(
                data.get("enable_moderate_weather_alerts", defaults.enable_moderate_weather_alerts)
            ),
            alert_frequency=AlertFrequency(frequency) if not isinstance(frequency, AlertFrequency) else frequency,
            test_mode=bool(data.get("test_mode", defaults.test_mode)),
        )
