"""
Notification decisions.

Decides whether a synthesized condition becomes a notification. A condition
is delivered only when its category is enabled, it was not dismissed, the same
id was not delivered within the cooldown (unless severity rose), and no other
notification went out within the minimum spacing.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from cachetools import TTLCache

from ..core import constants
from ..models import ConditionType, NotificationSettings, Severity, WeatherCondition
from .notifier import PlatformNotifier


@dataclass
class AlertRecord:
    """Last delivery of a condition id."""

    condition: WeatherCondition
    timestamp: float
    dismissed: bool = False


class NotificationDecider:
    """Apply settings, cooldown and spacing rules to conditions."""

    def __init__(
        self,
        notifier: Optional[PlatformNotifier] = None,
        same_alert_cooldown: float = constants.SAME_ALERT_COOLDOWN,
        min_spacing: float = constants.MIN_NOTIFICATION_SPACING,
        cache_size: int = constants.ALERT_CACHE_SIZE,
        dismissed_ids: Optional[Iterable[str]] = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize decider.

        Args:
            notifier: Platform notifier for urgent conditions
            same_alert_cooldown: Seconds an id stays suppressed after delivery
            min_spacing: Minimum seconds between any two notifications
            cache_size: Maximum number of remembered alert ids
            dismissed_ids: Ids the user already dismissed
            clock: Monotonic clock (injectable for tests)
            logger: Logger instance
        """
        self.notifier = notifier
        self.same_alert_cooldown = same_alert_cooldown
        self.min_spacing = min_spacing
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._alerts: TTLCache = TTLCache(maxsize=cache_size, ttl=same_alert_cooldown, timer=clock)
        self._dismissed: "OrderedDict[str, None]" = OrderedDict((i, None) for i in dismissed_ids or [])
        self.dismissed_limit = constants.DISMISSED_ALERTS_LIMIT
        self._last_notification: Optional[float] = None
        self._lock = threading.Lock()

    @staticmethod
    def category_enabled(condition: WeatherCondition, settings: NotificationSettings) -> bool:
        """Check the per-category toggles for a condition."""
        if condition.type == ConditionType.HURRICANE:
            return settings.enable_hurricane_alerts
        if condition.severity >= Severity.SEVERE:
            return settings.enable_severe_weather_alerts
        return settings.enable_moderate_weather_alerts

    def dismiss(self, alert_id: str) -> None:
        """Never deliver this id again."""
        with self._lock:
            self._dismissed[alert_id] = None
            self._dismissed.move_to_end(alert_id)
            while len(self._dismissed) > self.dismissed_limit:
                self._dismissed.popitem(last=False)
            record = self._alerts.get(alert_id)
            if record is not None:
                record.dismissed = True

    def is_dismissed(self, alert_id: str) -> bool:
        with self._lock:
            return alert_id in self._dismissed

    def should_notify(self, condition: WeatherCondition, settings: NotificationSettings) -> bool:
        """
        Decide and, when positive, record the delivery.

        Args:
            condition: Candidate condition
            settings: Current notification settings

        Returns:
            True when the condition must be delivered now
        """
        if not self.category_enabled(condition, settings):
            self.logger.debug(f"Category disabled for {condition.id}")
            return False

        now = self._clock()
        with self._lock:
            if condition.id in self._dismissed:
                self.logger.debug(f"Alert {condition.id} was dismissed")
                return False

            record = self._alerts.get(condition.id)
            if record is not None and now - record.timestamp < self.same_alert_cooldown:
                if record.dismissed or condition.severity <= record.condition.severity:
                    self.logger.debug(
                        f"Suppressing {condition.id}: delivered {now - record.timestamp:.0f}s ago"
                    )
                    return False

            if self._last_notification is not None and now - self._last_notification < self.min_spacing:
                self.logger.debug(
                    f"Suppressing {condition.id}: last notification "
                    f"{now - self._last_notification:.0f}s ago"
                )
                return False

            self._alerts[condition.id] = AlertRecord(condition=condition, timestamp=now)
            self._last_notification = now
            return True

    def process(
        self,
        condition: Optional[WeatherCondition],
        settings: NotificationSettings,
        callback: Callable[[WeatherCondition], None]
    ) -> bool:
        """
        Deliver a condition if the rules allow it.

        The callback is invoked for every delivery. Severe and extreme
        conditions are also pushed through the platform notifier when push
        notifications are enabled.

        Args:
            condition: Condition from the analyzer, or None
            settings: Current notification settings
            callback: Presentation callback

        Returns:
            True when the condition was delivered
        """
        if condition is None or not self.should_notify(condition, settings):
            return False

        self.logger.info(f"Delivering {condition.id}: {condition.title} ({condition.severity.value})")
        callback(condition)

        if condition.is_urgent and settings.enable_push_notifications and self.notifier is not None:
            self.notifier.notify(condition)
        return True
