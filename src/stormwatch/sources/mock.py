"""
Test-mode source.

Produces clearly labeled mock conditions so the notification path can be
exercised without real weather. Never used outside test mode.
"""

import itertools
import logging
from typing import Optional

from ..core import DateUtils
from ..models import ConditionType, DataSource, Severity, WeatherCondition
from ..processing.recommendations import recommendation_for
from .base import WeatherSource

TEST_CONDITIONS = [
    {
        "id": "test_hurricane",
        "type": ConditionType.HURRICANE,
        "severity": Severity.EXTREME,
        "title": "TEST: HURRICANE ALERT",
        "description": "Test hurricane alert. This is not a real storm.",
        "probability": 100,
    },
    {
        "id": "test_storm",
        "type": ConditionType.SEVERE_STORM,
        "severity": Severity.SEVERE,
        "title": "TEST: Severe Storm Warning",
        "description": "Test severe storm warning. This is not a real storm.",
        "probability": 85,
    },
]


class MockWeatherSource(WeatherSource):
    """Rotates through fixed test conditions."""

    name = "mock"
    label = "Test Mode"
    confidence = 100
    data_source = DataSource.MOCK

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(logger=logger)
        self._rotation = itertools.cycle(TEST_CONDITIONS)

    def next_condition(self, lat: float, lng: float) -> WeatherCondition:
        """
        Next test condition in the rotation.

        Args:
            lat: Latitude of the monitored location
            lng: Longitude of the monitored location

        Returns:
            Mock-tagged condition
        """
        template = next(self._rotation)
        self.logger.info(f"Test mode: generating {template['id']} for ({lat:.2f}, {lng:.2f})")
        return WeatherCondition(
            id=template["id"],
            type=template["type"],
            severity=template["severity"],
            title=template["title"],
            description=template["description"],
            recommendation=recommendation_for(template["type"], template["severity"]),
            probability=template["probability"],
            confidence=self.confidence,
            source=self.label,
            last_updated=DateUtils.now(),
            data_source=DataSource.MOCK
        )
