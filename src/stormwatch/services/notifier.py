"""
Platform notification side effect.

Urgent conditions are pushed to the operating system or device. Without
permission the notifier does nothing.
"""

import logging
from typing import Callable, Optional

from ..models import WeatherCondition


class PlatformNotifier:
    """Deliver urgent conditions through a platform callback."""

    def __init__(
        self,
        send: Optional[Callable[[str, str], None]] = None,
        permission_granted: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize notifier.

        Args:
            send: Callable taking (title, body); defaults to logging the notification
            permission_granted: Whether the user allowed platform notifications
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.send = send or self._log_notification
        self.permission_granted = permission_granted

    def _log_notification(self, title: str, body: str) -> None:
        self.logger.warning(f"NOTIFICATION: {title} - {body}")

    def notify(self, condition: WeatherCondition) -> bool:
        """
        Push a notification for a condition.

        Args:
            condition: Condition to announce

        Returns:
            True when a notification was sent
        """
        if not self.permission_granted:
            self.logger.debug(f"Notification permission denied, not sending {condition.id}")
            return False

        body = condition.description
        if condition.recommendation:
            body = f"{body} {condition.recommendation}"
        self.send(condition.title, body)
        return True
