"""
Background weather monitoring.

The monitor is either idle or monitoring one location. While monitoring it
evaluates conditions immediately and then once per settings interval, and
hands every condition to the notification decider. Restarting bumps a
generation counter so results of a superseded loop are discarded.
"""

import logging
import threading
import time
from dataclasses import replace
from enum import Enum
from typing import Callable, Optional, Tuple, TYPE_CHECKING

from ..core import constants
from ..models import NotificationSettings, WeatherCondition

if TYPE_CHECKING:
    from ..processing import ConditionAnalyzer
    from ..sources import MockWeatherSource
    from .aggregator import FallbackAggregator
    from .decision import NotificationDecider
    from .settings_store import SettingsRepository


class MonitorState(Enum):
    IDLE = "idle"
    MONITORING = "monitoring"


class WeatherMonitor:
    """Poll conditions for a location and decide on notifications."""

    def __init__(
        self,
        aggregator: "FallbackAggregator",
        analyzer: "ConditionAnalyzer",
        decider: "NotificationDecider",
        settings_repository: "SettingsRepository",
        mock_source: Optional["MockWeatherSource"] = None,
        snapshot_timeout: float = constants.SNAPSHOT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize monitor.

        Args:
            aggregator: Fallback aggregator
            analyzer: Condition analyzer
            decider: Notification decider
            settings_repository: Settings persistence
            mock_source: Condition generator used in test mode
            snapshot_timeout: Seconds to wait for one data snapshot
            clock: Monotonic clock (injectable for tests)
            logger: Logger instance
        """
        self.aggregator = aggregator
        self.analyzer = analyzer
        self.decider = decider
        self.settings_repository = settings_repository
        self.mock_source = mock_source
        self.snapshot_timeout = snapshot_timeout
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._session_test_mode = False
        self.settings = self._load_settings()
        self.state = MonitorState.IDLE
        self._lock = threading.RLock()
        self._generation = 0
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._location: Optional[Tuple[float, float]] = None
        self._callback: Optional[Callable[[WeatherCondition], None]] = None
        self._last_check: Optional[float] = None

    def _load_settings(self) -> NotificationSettings:
        settings = self.settings_repository.load_settings()
        if self._session_test_mode and not settings.test_mode:
            settings = replace(settings, test_mode=True)
        return settings

    def enable_test_mode(self) -> None:
        """
        Use generated test conditions for the lifetime of this monitor.

        Unlike a saved setting, this is never written to the settings store.
        """
        with self._lock:
            self._session_test_mode = True
            self.settings = replace(self.settings, test_mode=True)
        self.logger.info("Test mode enabled for this session")

    @property
    def is_monitoring(self) -> bool:
        return self.state == MonitorState.MONITORING

    def start_monitoring(
        self,
        lat: float,
        lng: float,
        callback: Callable[[WeatherCondition], None]
    ) -> None:
        """
        Start monitoring a location, restarting if already monitoring.

        Evaluates immediately, then once per settings interval.

        Args:
            lat: Latitude
            lng: Longitude
            callback: Called with each delivered condition
        """
        self.stop_monitoring()

        with self._lock:
            self.settings = self._load_settings()
            self._generation += 1
            generation = self._generation
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._location = (lat, lng)
            self._callback = callback
            self.state = MonitorState.MONITORING

            self._thread = threading.Thread(
                target=self._run,
                args=(generation, stop_event),
                name=f"weather-monitor-{generation}",
                daemon=True
            )
            self._thread.start()

        self.logger.info(
            f"Monitoring ({lat:.4f}, {lng:.4f}) every {self.settings.poll_interval:.0f}s"
        )

    def stop_monitoring(self) -> None:
        """Cancel the pending evaluation. An evaluation already running is not delivered."""
        with self._lock:
            if self._stop_event is not None:
                self._stop_event.set()
                self._stop_event = None
            if self.state == MonitorState.MONITORING:
                self.logger.info("Monitoring stopped")
            self.state = MonitorState.IDLE

    def _run(self, generation: int, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self.evaluate(generation=generation)
            if stop_event.wait(self.settings.poll_interval):
                break

    def _is_current(self, generation: Optional[int]) -> bool:
        with self._lock:
            if not self.is_monitoring:
                return False
            return generation is None or generation == self._generation

    def evaluate(self, generation: Optional[int] = None, force: bool = False) -> Optional[WeatherCondition]:
        """
        Run one evaluation cycle.

        Any error inside the cycle is logged and treated as no condition.

        Args:
            generation: Loop generation that owns this cycle
            force: Skip the frequency check

        Returns:
            The delivered condition, or None
        """
        try:
            with self._lock:
                if self._location is None or self._callback is None:
                    return None
                lat, lng = self._location
                callback = self._callback
                settings = self.settings

                now = self._clock()
                if (
                    not force
                    and self._last_check is not None
                    and now - self._last_check < settings.poll_interval
                ):
                    self.logger.debug("Skipping evaluation: checked recently")
                    return None
                self._last_check = now

            condition = self.detect(lat, lng, settings)

            if not self._is_current(generation):
                self.logger.debug("Discarding result of a superseded evaluation")
                return None

            if self.decider.process(condition, settings, callback):
                return condition
            return None

        except Exception as e:
            self.logger.error(f"Weather evaluation failed: {e}", exc_info=True)
            return None

    def detect(self, lat: float, lng: float, settings: NotificationSettings) -> Optional[WeatherCondition]:
        """
        Produce the current condition for a location.

        Args:
            lat: Latitude
            lng: Longitude
            settings: Settings for this cycle

        Returns:
            Condition or None
        """
        if settings.test_mode:
            if self.mock_source is None:
                self.logger.warning("Test mode enabled but no mock source configured")
                return None
            return self.mock_source.next_condition(lat, lng)

        snapshot = self.aggregator.fetch_snapshot(lat, lng, timeout=self.snapshot_timeout)
        return self.analyzer.analyze_snapshot(snapshot, lat, lng)

    def force_refresh(self) -> Optional[WeatherCondition]:
        """Evaluate now, ignoring the frequency check."""
        return self.evaluate(force=True)

    def update_settings(self, settings: NotificationSettings) -> None:
        """
        Persist new settings; they apply from the next evaluation.

        A changed interval restarts the running poll loop. Session test mode
        stays in effect and is not saved.

        Args:
            settings: New settings
        """
        stored = settings
        if self._session_test_mode:
            stored = replace(settings, test_mode=self.settings_repository.load_settings().test_mode)
            settings = replace(settings, test_mode=True)
        self.settings_repository.save_settings(stored)
        with self._lock:
            interval_changed = settings.poll_interval != self.settings.poll_interval
            self.settings = settings
            restart = self.is_monitoring and interval_changed
            location, callback = self._location, self._callback

        if restart and location is not None and callback is not None:
            self.logger.info(f"Alert interval changed to {settings.poll_interval:.0f}s, restarting")
            self.start_monitoring(location[0], location[1], callback)

    def dismiss_alert(self, alert_id: str) -> None:
        """Dismiss an alert permanently."""
        self.decider.dismiss(alert_id)
        self.settings_repository.add_dismissed(alert_id)
