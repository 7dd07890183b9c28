"""
Hurricane track models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pytz

from ..algorithms.saffir_simpson import saffir_simpson_category
from .condition import DataSource


class Basin(Enum):
    """Tropical cyclone basins."""

    ATL = "ATL"
    EPAC = "EPAC"
    CPAC = "CPAC"
    WPAC = "WPAC"
    IO = "IO"
    SH = "SH"


class StormStatus(Enum):
    """Lifecycle state of a tracked storm."""

    ACTIVE = "active"
    DISSIPATED = "dissipated"
    POST_TROPICAL = "post-tropical"


@dataclass
class HurricanePosition:
    """A storm fix or forecast point."""

    lat: float
    lng: float
    timestamp: datetime
    wind_speed: float  # mph
    pressure: Optional[float] = None  # mb

    @property
    def category(self) -> int:
        """Saffir-Simpson category, always derived from wind speed."""
        return saffir_simpson_category(self.wind_speed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.lat,
            "lng": self.lng,
            "timestamp": self.timestamp.isoformat(),
            "wind_speed": self.wind_speed,
            "pressure": self.pressure,
            "category": self.category,
        }


@dataclass
class HurricaneTrack:
    """A tracked tropical system with its past and forecast positions."""

    id: str
    name: str
    basin: Basin
    current_position: HurricanePosition
    historical_positions: List[HurricanePosition] = field(default_factory=list)
    forecast_positions: List[HurricanePosition] = field(default_factory=list)
    status: StormStatus = StormStatus.ACTIVE
    source: str = ""
    data_source: DataSource = DataSource.REAL
    last_updated: datetime = field(default_factory=lambda: datetime.now(pytz.UTC))

    @property
    def category(self) -> int:
        return self.current_position.category

    @property
    def wind_speed(self) -> float:
        return self.current_position.wind_speed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "basin": self.basin.value,
            "category": self.category,
            "status": self.status.value,
            "current_position": self.current_position.to_dict(),
            "historical_positions": [p.to_dict() for p in self.historical_positions],
            "forecast_positions": [p.to_dict() for p in self.forecast_positions],
            "source": self.source,
            "data_source": self.data_source.value,
            "last_updated": self.last_updated.isoformat(),
        }
