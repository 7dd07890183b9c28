"""
Service layer for storm monitoring.

Contains high-level services that orchestrate aggregation, notification
decisions, settings persistence and background monitoring.
"""

from .aggregator import FallbackAggregator, WeatherSnapshot
from .decision import NotificationDecider, AlertRecord
from .notifier import PlatformNotifier
from .settings_store import JsonFileStore, MemoryStore, SettingsRepository
from .monitor import WeatherMonitor, MonitorState

__all__ = [
    "FallbackAggregator",
    "WeatherSnapshot",
    "NotificationDecider",
    "AlertRecord",
    "PlatformNotifier",
    "JsonFileStore",
    "MemoryStore",
    "SettingsRepository",
    "WeatherMonitor",
    "MonitorState",
]
