"""
Base class for upstream weather sources.

A source wraps one provider. It fetches, parses and normalizes into the shared
models, and raises on any network or parse failure. Sources implement any
subset of the capabilities; the aggregator only calls what a source declares.
"""

import logging
from abc import ABC
from typing import Any, Dict, FrozenSet, List, Optional, TYPE_CHECKING

import requests  # type: ignore

from ..api.exceptions import SourceNotConfiguredError, SourceUnavailableError
from ..models import (
    Basin,
    CurrentReading,
    DataSource,
    ForecastDay,
    HurricanePosition,
    HurricaneTrack,
    WeatherAlert,
)
from ..algorithms import basin_code, meets_storm_criteria
from ..api.helpers import slugify
from ..core import constants, DateUtils

if TYPE_CHECKING:
    from ..api import APIClient

CURRENT = "current"
FORECAST = "forecast"
HURRICANES = "hurricanes"
POTENTIAL = "potential"
ALERTS = "alerts"


class WeatherSource(ABC):
    """Common behaviour of all upstream sources."""

    name: str = "source"  # logical name, used for cache keys and ids
    label: str = "Unknown Source"  # provenance text shown to people
    confidence: int = 80
    requires_api_key: bool = False
    capabilities: FrozenSet[str] = frozenset()
    data_source: DataSource = DataSource.REAL

    def __init__(
        self,
        client: Optional["APIClient"] = None,
        api_key: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize source.

        Args:
            client: HTTP client bound to the provider
            api_key: Provider API key, when the provider needs one
            logger: Logger instance
        """
        self.client = client
        self.api_key = api_key
        self.logger = logger or logging.getLogger(__name__)

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities

    def _require_key(self) -> str:
        if self.requires_api_key and not self.api_key:
            raise SourceNotConfiguredError(f"{self.label} API key is not configured", source=self.name)
        return self.api_key or ""

    def _unsupported(self, capability: str):
        raise NotImplementedError(f"{self.label} does not provide {capability}")

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> Any:
        """GET a JSON document, mapping transport and decode errors to SourceUnavailableError."""
        try:
            return self.client.get(endpoint, params=params, headers=headers)
        except SourceUnavailableError:
            raise
        except (requests.exceptions.RequestException, ValueError) as e:
            raise SourceUnavailableError(f"{self.label}: {e}", source=self.name) from e

    def _get_text(self, endpoint: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> str:
        """GET a text document, mapping transport errors to SourceUnavailableError."""
        try:
            return self.client.get_text(endpoint, params=params, headers=headers)
        except SourceUnavailableError:
            raise
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError(f"{self.label}: {e}", source=self.name) from e

    def fetch_current(self, lat: float, lng: float) -> CurrentReading:
        """Current conditions at a location."""
        self._unsupported(CURRENT)

    def fetch_forecast(self, lat: float, lng: float) -> List[ForecastDay]:
        """Daily forecast for a location."""
        self._unsupported(FORECAST)

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        """Currently active tropical systems."""
        self._unsupported(HURRICANES)

    def fetch_potential_hurricanes(self) -> List[HurricaneTrack]:
        """Areas that may develop into tropical systems."""
        self._unsupported(POTENTIAL)

    def fetch_alerts(self, lat: float, lng: float) -> List[WeatherAlert]:
        """Official alerts for a location."""
        self._unsupported(ALERTS)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"


class WatchPointDetectionMixin:
    """
    Storm detection from readings at coastal watch points.

    Commercial providers publish no storm feed, so their current readings at
    hurricane-prone cities are checked against tropical storm criteria.
    """

    watch_points: List[Dict[str, Any]]

    def _scan_watch_points(self, criteria=meets_storm_criteria, title: str = "Storm Alert - {name}", id_prefix: str = "") -> List[HurricaneTrack]:
        """
        Build tracks for watch points whose readings meet the criteria.

        Args:
            criteria: Predicate over (wind_mph, pressure_mb, humidity)
            title: Track name template, formatted with the watch point name
            id_prefix: Extra prefix for track ids

        Returns:
            Tracks, one per matching watch point

        Raises:
            SourceUnavailableError: When no watch point could be read
        """
        tracks: List[HurricaneTrack] = []
        failures: List[Exception] = []

        for point in self.watch_points:
            try:
                reading = self.fetch_current(point["lat"], point["lng"])
            except SourceNotConfiguredError:
                raise
            except Exception as e:
                self.logger.warning(f"{self.label}: reading at {point['name']} failed: {e}")
                failures.append(e)
                continue

            if not criteria(reading.wind_speed, reading.pressure, reading.humidity):
                continue

            self.logger.info(
                f"{self.label}: storm conditions at {point['name']} "
                f"(wind {reading.wind_speed:.0f} mph, pressure {reading.pressure:.0f} mb)"
            )
            position = HurricanePosition(
                lat=point["lat"],
                lng=point["lng"],
                timestamp=reading.timestamp,
                wind_speed=reading.wind_speed,
                pressure=reading.pressure
            )
            tracks.append(HurricaneTrack(
                id=f"{self.name}_{id_prefix}{slugify(point['name'])}",
                name=title.format(name=point["name"]),
                basin=Basin(basin_code(point["lat"], point["lng"])),
                current_position=position,
                source=self.label,
                data_source=self.data_source,
                last_updated=DateUtils.now()
            ))

        if failures and len(failures) == len(self.watch_points):
            raise SourceUnavailableError(
                f"{self.label}: no watch point could be read", source=self.name
            ) from failures[-1]

        return tracks


def default_watch_points() -> List[Dict[str, Any]]:
    return [dict(point) for point in constants.DEFAULT_WATCH_POINTS]
