"""
Weather data models.

Contains DTOs for normalized readings, forecasts, alerts and aggregate
results. All values are in canonical units: °F, %, mb, mph, inches.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pytz

from ..core import constants
from .condition import DataSource, Severity


@dataclass
class CurrentReading:
    """Current observation from one provider."""

    source: str
    temperature: float  # °F
    humidity: float  # %
    pressure: float  # mb
    wind_speed: float  # mph
    description: str
    confidence: int = 80
    timestamp: datetime = field(default_factory=lambda: datetime.now(pytz.UTC))
    data_source: DataSource = DataSource.REAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "wind_speed": self.wind_speed,
            "description": self.description,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
            "data_source": self.data_source.value,
        }


@dataclass
class ForecastDay:
    """Daily forecast entry."""

    day: date
    high: float  # °F
    low: float  # °F
    precipitation: float  # inches
    wind_speed: float  # mph
    humidity: float  # %
    condition: str
    hurricane_risk: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "high": self.high,
            "low": self.low,
            "precipitation": self.precipitation,
            "wind_speed": self.wind_speed,
            "humidity": self.humidity,
            "condition": self.condition,
            "hurricane_risk": self.hurricane_risk,
        }


class AlertCategory(Enum):
    """Category of an official alert."""

    HURRICANE = "hurricane"
    TROPICAL_STORM = "tropical_storm"
    TORNADO = "tornado"
    FLOOD = "flood"
    THUNDERSTORM = "thunderstorm"
    OTHER = "other"


@dataclass
class WeatherAlert:
    """Official government alert."""

    id: str
    title: str
    description: str
    severity: Severity
    category: AlertCategory
    event: str
    effective: Optional[datetime] = None
    expires: Optional[datetime] = None
    areas: List[str] = field(default_factory=list)
    source: str = ""

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """An alert is active between its effective and expiry times."""
        now = now or datetime.now(pytz.UTC)
        if self.effective is not None and now < self.effective:
            return False
        if self.expires is not None and now > self.expires:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "category": self.category.value,
            "event": self.event,
            "effective": self.effective.isoformat() if self.effective else None,
            "expires": self.expires.isoformat() if self.expires else None,
            "areas": list(self.areas),
            "source": self.source,
        }


@dataclass
class AggregateResult:
    """Outcome of a fallback aggregation for one capability."""

    items: List[Any]
    source: str
    data_source: DataSource = DataSource.REAL
    last_updated: datetime = field(default_factory=lambda: datetime.now(pytz.UTC))

    @classmethod
    def empty(cls, source: str = constants.NO_DATA_SOURCE) -> "AggregateResult":
        """The sentinel returned when every source failed or had nothing."""
        return cls(items=[], source=source)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.items],
            "source": self.source,
            "data_source": self.data_source.value,
            "last_updated": self.last_updated.isoformat(),
        }
