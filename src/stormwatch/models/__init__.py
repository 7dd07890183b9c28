"""
Data models for the storm monitoring system.

Contains DTOs for conditions, hurricane tracks, weather data and settings.
"""

from .condition import Severity, ConditionType, DataSource, WeatherCondition
from .hurricane import Basin, StormStatus, HurricanePosition, HurricaneTrack
from .weather import CurrentReading, ForecastDay, AlertCategory, WeatherAlert, AggregateResult
from .settings import AlertFrequency, NotificationSettings

__all__ = [
    "Severity",
    "ConditionType",
    "DataSource",
    "WeatherCondition",
    "Basin",
    "StormStatus",
    "HurricanePosition",
    "HurricaneTrack",
    "CurrentReading",
    "ForecastDay",
    "AlertCategory",
    "WeatherAlert",
    "AggregateResult",
    "AlertFrequency",
    "NotificationSettings",
]
