"""
National Weather Service alerts (api.weather.gov).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..api.helpers import extract_text
from ..core import DateUtils
from ..models import AlertCategory, Severity, WeatherAlert
from .base import WeatherSource, ALERTS

if TYPE_CHECKING:
    from ..api import APIClient

SEVERITY_MAP = {
    "minor": Severity.MINOR,
    "moderate": Severity.MODERATE,
    "severe": Severity.SEVERE,
    "extreme": Severity.EXTREME,
}

# Checked in order; the first keyword found in the event name wins
CATEGORY_KEYWORDS = [
    ("hurricane", AlertCategory.HURRICANE),
    ("tropical", AlertCategory.TROPICAL_STORM),
    ("tornado", AlertCategory.TORNADO),
    ("flood", AlertCategory.FLOOD),
    ("thunderstorm", AlertCategory.THUNDERSTORM),
]


def map_severity(value: Optional[str]) -> Severity:
    """NWS severity label to Severity; unknown labels are moderate."""
    return SEVERITY_MAP.get((value or "").strip().lower(), Severity.MODERATE)


def map_category(event: Optional[str]) -> AlertCategory:
    """NWS event name to AlertCategory."""
    event_lower = (event or "").lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in event_lower:
            return category
    return AlertCategory.OTHER


class NWSAlertsSource(WeatherSource):
    """Active NWS alerts for a point."""

    name = "nws"
    label = "National Weather Service"
    confidence = 95
    capabilities = frozenset({ALERTS})

    def __init__(
        self,
        client: "APIClient",
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, logger=logger)

    def fetch_alerts(self, lat: float, lng: float) -> List[WeatherAlert]:
        """
        Fetch alerts for a point.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            Alerts that are currently in effect
        """
        data = self._get_json(
            "/alerts",
            params={"point": f"{lat:.4f},{lng:.4f}"},
            headers={"Accept": "application/geo+json"}
        )
        return self.parse_alerts(data)

    def parse_alerts(self, data: Dict[str, Any], now: Optional[datetime] = None) -> List[WeatherAlert]:
        """
        Parse a GeoJSON alert collection.

        Features without an id are skipped. Alerts outside their effective
        window are dropped.

        Args:
            data: GeoJSON FeatureCollection
            now: Reference time for the activity check

        Returns:
            Active alerts
        """
        now = now or DateUtils.now()
        alerts = []
        features = data.get("features") if isinstance(data, dict) else None

        for feature in features or []:
            if not isinstance(feature, dict):
                self.logger.warning(f"{self.label}: skipping malformed alert feature")
                continue
            properties = feature.get("properties") or {}
            alert_id = extract_text(properties, ["id"]) or extract_text(feature, ["id"])
            if not alert_id:
                self.logger.warning(f"{self.label}: skipping alert without id")
                continue

            event = extract_text(properties, ["event"], "Weather Alert")
            area = extract_text(properties, ["areaDesc"])
            alert = WeatherAlert(
                id=alert_id,
                title=extract_text(properties, ["headline", "event"], "Weather Alert"),
                description=extract_text(properties, ["description"]),
                severity=map_severity(properties.get("severity")),
                category=map_category(event),
                event=event,
                effective=DateUtils.parse(properties.get("effective") or properties.get("onset")),
                expires=DateUtils.parse(properties.get("expires") or properties.get("ends")),
                areas=[part.strip() for part in area.split(";") if part.strip()],
                source=self.label
            )

            if alert.is_active(now):
                alerts.append(alert)

        self.logger.debug(f"{self.label}: {len(alerts)} active alerts")
        return alerts
