"""
Tests for background weather monitoring.
"""

import threading
import unittest
from dataclasses import replace
from unittest.mock import Mock

from src.stormwatch.models import (
    AlertFrequency,
    ConditionType,
    DataSource,
    NotificationSettings,
    Severity,
    WeatherCondition,
)
from src.stormwatch.services import (
    MemoryStore,
    MonitorState,
    NotificationDecider,
    SettingsRepository,
    WeatherMonitor,
    WeatherSnapshot,
)
from src.stormwatch.sources import MockWeatherSource
from tests.factories import FakeClock

CONDITION = WeatherCondition(
    id="hurricane_erin",
    type=ConditionType.HURRICANE,
    severity=Severity.EXTREME,
    title="HURRICANE ALERT: Erin",
    description="Erin is close.",
    recommendation="Evacuate.",
    probability=100,
    confidence=100,
    source="Test",
)


class TestWeatherMonitor(unittest.TestCase):
    """Test cases for WeatherMonitor."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.aggregator = Mock()
        self.aggregator.fetch_snapshot.return_value = WeatherSnapshot()
        self.analyzer = Mock()
        self.analyzer.analyze_snapshot.return_value = CONDITION
        self.decider = Mock(spec=NotificationDecider)
        self.decider.process.side_effect = self._process
        self.repository = SettingsRepository(MemoryStore())
        self.logger = Mock()
        self.delivered = threading.Event()
        self.monitor = self._monitor(self.decider)

    def tearDown(self):
        self.monitor.stop_monitoring()

    def _monitor(self, decider):
        return WeatherMonitor(
            aggregator=self.aggregator,
            analyzer=self.analyzer,
            decider=decider,
            settings_repository=self.repository,
            mock_source=MockWeatherSource(logger=Mock()),
            snapshot_timeout=5,
            clock=self.clock,
            logger=self.logger
        )

    def _start(self, monitor=None):
        monitor = monitor or self.monitor
        monitor.start_monitoring(25.7617, -80.1918, lambda condition: self.delivered.set())
        return monitor

    def _process(self, condition, settings, callback):
        callback(condition)
        return True

    def test_idle_evaluate(self):
        self.assertEqual(self.monitor.state, MonitorState.IDLE)
        self.assertIsNone(self.monitor.evaluate())

    def test_start_evaluates_immediately(self):
        self._start()

        self.assertTrue(self.delivered.wait(5))
        self.assertTrue(self.monitor.is_monitoring)
        self.aggregator.fetch_snapshot.assert_called_with(25.7617, -80.1918, timeout=5)

    def test_restart_discards_superseded_generation(self):
        """Test that results of an older loop are not delivered."""
        self._start()
        self._start()

        self.assertIsNone(self.monitor.evaluate(generation=1, force=True))
        self.assertIs(self.monitor.evaluate(generation=2, force=True), CONDITION)

    def test_stop(self):
        self._start()
        self.monitor.stop_monitoring()

        self.assertEqual(self.monitor.state, MonitorState.IDLE)
        self.assertIsNone(self.monitor.evaluate(force=True))

    def test_errors_become_none(self):
        self.aggregator.fetch_snapshot.side_effect = RuntimeError("network down")
        self._start()

        self.assertIsNone(self.monitor.evaluate(force=True))
        self.logger.error.assert_called()

    def test_frequency_gate(self):
        """Test that evaluations closer than the interval are skipped."""
        self._start()
        self.assertTrue(self.delivered.wait(5))

        self.assertIsNone(self.monitor.evaluate())

        self.clock.advance(NotificationSettings().poll_interval + 1)
        self.assertIs(self.monitor.evaluate(), CONDITION)

    def test_force_refresh_ignores_gate(self):
        self._start()
        self.assertTrue(self.delivered.wait(5))

        self.assertIs(self.monitor.force_refresh(), CONDITION)

    def test_test_mode_uses_mock_conditions(self):
        """Test that test mode never touches real sources."""
        self.repository.save_settings(NotificationSettings(test_mode=True))
        received = []
        done = threading.Event()

        def callback(condition):
            received.append(condition)
            done.set()

        monitor = self._monitor(NotificationDecider(clock=self.clock, logger=Mock()))
        monitor.start_monitoring(25.7617, -80.1918, callback)
        try:
            self.assertTrue(done.wait(5))
        finally:
            monitor.stop_monitoring()

        self.assertEqual(received[0].id, "test_hurricane")
        self.assertEqual(received[0].data_source, DataSource.MOCK)
        self.aggregator.fetch_snapshot.assert_not_called()

    def test_update_settings_restarts_on_interval_change(self):
        self._start()

        self.monitor.update_settings(NotificationSettings(alert_frequency=AlertFrequency.HOURLY))

        self.assertEqual(self.monitor._generation, 2)
        self.assertEqual(self.repository.load_settings().alert_frequency, AlertFrequency.HOURLY)

        self.monitor.update_settings(
            NotificationSettings(alert_frequency=AlertFrequency.HOURLY, enable_push_notifications=False)
        )

        self.assertEqual(self.monitor._generation, 2)
        self.assertFalse(self.monitor.settings.enable_push_notifications)

    def test_update_settings_while_idle(self):
        self.monitor.update_settings(NotificationSettings(alert_frequency=AlertFrequency.DAILY))

        self.assertFalse(self.monitor.is_monitoring)
        self.assertEqual(self.repository.load_settings().alert_frequency, AlertFrequency.DAILY)

    def test_dismiss_alert_persists(self):
        self.monitor.dismiss_alert("hurricane_erin")

        self.decider.dismiss.assert_called_once_with("hurricane_erin")
        self.assertEqual(self.repository.dismissed_ids(), ["hurricane_erin"])

    def test_session_test_mode_is_not_saved(self):
        """Test that session test mode serves mock conditions without touching stored settings."""
        received = []
        done = threading.Event()

        def callback(condition):
            received.append(condition)
            done.set()

        monitor = self._monitor(NotificationDecider(clock=self.clock, logger=Mock()))
        monitor.enable_test_mode()
        monitor.start_monitoring(25.7617, -80.1918, callback)
        try:
            self.assertTrue(done.wait(5))
        finally:
            monitor.stop_monitoring()

        self.assertEqual(received[0].data_source, DataSource.MOCK)
        self.assertTrue(monitor.settings.test_mode)
        self.assertFalse(self.repository.load_settings().test_mode)

    def test_update_settings_keeps_session_test_mode(self):
        self.monitor.enable_test_mode()

        self.monitor.update_settings(replace(self.monitor.settings, enable_push_notifications=False))

        self.assertTrue(self.monitor.settings.test_mode)
        stored = self.repository.load_settings()
        self.assertFalse(stored.test_mode)
        self.assertFalse(stored.enable_push_notifications)
