"""
Weather condition models.

Contains the severity scale, condition types and the synthesized
WeatherCondition that is handed to the notification layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, Optional

import pytz


@total_ordering
class Severity(Enum):
    """Totally ordered severity scale: minor < moderate < severe < extreme."""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value: Any, default: Optional["Severity"] = None) -> "Severity":
        """
        Parse a provider severity label.

        'low' and 'minor' are the same level. Unknown labels map to the default
        (moderate unless given).
        """
        if isinstance(value, Severity):
            return value
        text = str(value or "").strip().lower()
        if text == "low":
            return cls.MINOR
        for member in cls:
            if member.value == text:
                return member
        return default if default is not None else cls.MODERATE


_SEVERITY_RANK = {
    Severity.MINOR: 0,
    Severity.MODERATE: 1,
    Severity.SEVERE: 2,
    Severity.EXTREME: 3,
}


class ConditionType(Enum):
    """Kind of weather condition."""

    RAIN = "rain"
    STORM = "storm"
    SEVERE_STORM = "severe_storm"
    HURRICANE = "hurricane"
    FLOOD = "flood"
    MODERATE = "moderate"
    SEVERE = "severe"
    CLEAR = "clear"


class DataSource(Enum):
    """Whether data comes from real providers or the test-mode generator."""

    REAL = "real"
    MOCK = "mock"


@dataclass
class WeatherCondition:
    """A single synthesized, ranked weather condition."""

    id: str  # Stable, source-prefixed; equal ids denote the same event
    type: ConditionType
    severity: Severity
    title: str
    description: str
    recommendation: str
    probability: int  # 0-100
    confidence: int  # 0-100
    source: str
    last_updated: datetime = field(default_factory=lambda: datetime.now(pytz.UTC))
    data_source: DataSource = DataSource.REAL
    distance: Optional[float] = None  # km, hurricane proximity only
    eta: Optional[float] = None  # hours, hurricane proximity only

    def __post_init__(self):
        self.probability = max(0, min(100, int(round(self.probability))))
        self.confidence = max(0, min(100, int(round(self.confidence))))

    @property
    def is_urgent(self) -> bool:
        """Severe and extreme conditions trigger a platform notification."""
        return self.severity >= Severity.SEVERE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
            "probability": self.probability,
            "confidence": self.confidence,
            "source": self.source,
            "last_updated": self.last_updated.isoformat(),
            "data_source": self.data_source.value,
            "distance": self.distance,
            "eta": self.eta,
        }
