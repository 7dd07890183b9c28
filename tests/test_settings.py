"""
Tests for notification settings and their persistence.
"""

import json

import pytest  # type: ignore

from src.stormwatch.core import constants
from src.stormwatch.models import AlertFrequency, NotificationSettings
from src.stormwatch.services import JsonFileStore, MemoryStore, SettingsRepository


class TestNotificationSettings:
    """Test cases for the settings model."""

    def test_defaults(self):
        settings = NotificationSettings()

        assert settings.enable_push_notifications
        assert settings.enable_hurricane_alerts
        assert settings.enable_severe_weather_alerts
        assert not settings.enable_moderate_weather_alerts
        assert settings.alert_frequency == AlertFrequency.IMMEDIATE
        assert not settings.test_mode

    @pytest.mark.parametrize("frequency,interval", [
        (AlertFrequency.IMMEDIATE, 120),
        (AlertFrequency.HOURLY, 3600),
        (AlertFrequency.DAILY, 86400),
    ])
    def test_poll_interval(self, frequency, interval):
        assert NotificationSettings(alert_frequency=frequency).poll_interval == interval

    def test_test_mode_interval(self):
        settings = NotificationSettings(alert_frequency=AlertFrequency.DAILY, test_mode=True)
        assert settings.poll_interval == constants.TEST_MODE_INTERVAL

    def test_round_trip(self):
        settings = NotificationSettings(
            enable_push_notifications=False,
            alert_frequency=AlertFrequency.HOURLY,
            test_mode=True,
        )

        data = settings.to_dict()

        assert data["alert_frequency"] == "hourly"
        assert NotificationSettings.from_dict(json.loads(json.dumps(data))) == settings

    def test_partial_dict(self):
        settings = NotificationSettings.from_dict({"enable_moderate_weather_alerts": True, "extra": 1})

        assert settings.enable_moderate_weather_alerts
        assert settings.enable_hurricane_alerts

    def test_bad_frequency(self):
        with pytest.raises(ValueError):
            NotificationSettings.from_dict({"alert_frequency": "weekly"})


class TestSettingsRepository:
    """Test cases for SettingsRepository."""

    @pytest.fixture
    def path(self, tmp_path):
        return tmp_path / "data" / "settings.json"

    def test_defaults_when_empty(self):
        assert SettingsRepository(MemoryStore()).load_settings() == NotificationSettings()

    def test_file_round_trip(self, path):
        repository = SettingsRepository(JsonFileStore(str(path)))
        settings = NotificationSettings(alert_frequency=AlertFrequency.DAILY)

        repository.save_settings(settings)

        assert path.exists()
        assert SettingsRepository(JsonFileStore(str(path))).load_settings() == settings

    def test_corrupt_file_uses_defaults(self, path):
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert SettingsRepository(JsonFileStore(str(path))).load_settings() == NotificationSettings()

    def test_invalid_stored_value_uses_defaults(self):
        store = MemoryStore()
        store.set("weather_notification_settings", {"alert_frequency": "weekly"})

        assert SettingsRepository(store).load_settings() == NotificationSettings()

    def test_dismissed_ids_are_bounded(self, path):
        repository = SettingsRepository(JsonFileStore(str(path)), dismissed_limit=3)

        for alert_id in ("a", "b", "c", "d", "b"):
            repository.add_dismissed(alert_id)

        assert repository.dismissed_ids() == ["c", "d", "b"]

    def test_settings_and_dismissed_share_file(self, path):
        repository = SettingsRepository(JsonFileStore(str(path)))

        repository.save_settings(NotificationSettings(test_mode=True))
        repository.add_dismissed("gov_1")

        data = json.loads(path.read_text())
        assert data["weather_notification_settings"]["test_mode"] is True
        assert data["dismissed_alerts"] == ["gov_1"]
