"""
NOAA National Hurricane Center KML products.

Active storm placemarks give the current fix. Forecast and past track
documents, when available, add positions to storms of the same name.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..algorithms import basin_code
from ..api.exceptions import SourceUnavailableError
from ..api.helpers import slugify
from ..core import constants, DateUtils
from ..models import Basin, HurricanePosition, HurricaneTrack
from ..processing.converter import UnitConverter
from .base import WeatherSource, HURRICANES

if TYPE_CHECKING:
    from ..api import APIClient

FORECAST_STEP_HOURS = 12
PAST_STEP_HOURS = 6


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_all(root: ET.Element, name: str) -> List[ET.Element]:
    return [el for el in root.iter() if _local(el.tag) == name]


def _find_text(element: ET.Element, name: str) -> str:
    for child in element.iter():
        if _local(child.tag) == name:
            return (child.text or "").strip()
    return ""


def parse_coordinates(text: str) -> List[Tuple[float, float]]:
    """
    Parse a KML coordinates string.

    Args:
        text: Whitespace separated 'lng,lat[,alt]' tuples

    Returns:
        List of (lat, lng) pairs; malformed tuples are skipped
    """
    points = []
    for chunk in text.split():
        parts = chunk.split(",")
        if len(parts) < 2:
            continue
        try:
            lng, lat = float(parts[0]), float(parts[1])
        except ValueError:
            continue
        points.append((lat, lng))
    return points


class NHCKmlSource(WeatherSource):
    """Active storms from NHC KML documents."""

    name = "nhc_kml"
    label = "NOAA National Hurricane Center (KML)"
    confidence = 90
    capabilities = frozenset({HURRICANES})

    def __init__(
        self,
        client: "APIClient",
        base_url: str = constants.NHC_KML_BASE_URL,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, logger=logger)
        self.base_url = base_url.rstrip("/")
        self.converter = UnitConverter(self.logger)

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        """
        Fetch active storms and enrich them with forecast and past tracks.

        Returns:
            Tracks

        Raises:
            SourceUnavailableError: If the active storms document is unavailable
        """
        active = self._get_text(f"{self.base_url}/activeStorms.kml")
        tracks = self.parse_active_storms(active)
        if not tracks:
            return tracks

        for document, kind in (("forecastTrack.kml", "forecast"), ("pastTrack.kml", "past")):
            try:
                body = self._get_text(f"{self.base_url}/{document}")
                self.attach_track_lines(tracks, body, kind)
            except SourceUnavailableError as e:
                self.logger.warning(f"{self.label}: {document} unavailable, continuing without it: {e}")

        return tracks

    def _parse_document(self, body: str) -> ET.Element:
        try:
            return ET.fromstring(body)
        except ET.ParseError as e:
            raise SourceUnavailableError(f"{self.label}: malformed KML: {e}", source=self.name) from e

    def parse_active_storms(self, body: str) -> List[HurricaneTrack]:
        """
        Parse active storm placemarks.

        Args:
            body: KML document

        Returns:
            One track per placemark that has a point
        """
        root = self._parse_document(body)
        tracks: Dict[str, HurricaneTrack] = {}
        now = DateUtils.now()

        for placemark in _find_all(root, "Placemark"):
            name = _find_text(placemark, "name")
            description = _find_text(placemark, "description")
            points = parse_coordinates(_find_text(placemark, "coordinates"))
            if not name or not points:
                continue

            lat, lng = points[0]
            wind, pressure = self._parse_intensity(description)
            storm_name = self._storm_name(name)
            if storm_name in tracks:
                continue

            tracks[storm_name] = HurricaneTrack(
                id=f"{self.name}_{slugify(storm_name)}",
                name=storm_name,
                basin=Basin(basin_code(lat, lng)),
                current_position=HurricanePosition(
                    lat=lat,
                    lng=lng,
                    timestamp=now,
                    wind_speed=wind,
                    pressure=pressure
                ),
                source=self.label,
                data_source=self.data_source,
                last_updated=now
            )

        self.logger.info(f"Parsed {len(tracks)} storms from KML")
        return list(tracks.values())

    def attach_track_lines(self, tracks: List[HurricaneTrack], body: str, kind: str) -> None:
        """
        Attach forecast or past positions to tracks with a matching name.

        KML track lines carry no per-point times, so points are spaced at a
        fixed step from the current fix and carry its wind speed.

        Args:
            tracks: Tracks to enrich in place
            body: KML document with LineString placemarks
            kind: 'forecast' or 'past'
        """
        root = self._parse_document(body)

        for placemark in _find_all(root, "Placemark"):
            label = f"{_find_text(placemark, 'name')} {_find_text(placemark, 'description')}".lower()
            points = parse_coordinates(_find_text(placemark, "coordinates"))
            if not points:
                continue

            for track in tracks:
                if track.name.lower() not in label:
                    continue
                current = track.current_position
                if kind == "forecast":
                    track.forecast_positions = self._spaced(points, current, FORECAST_STEP_HOURS)
                else:
                    # Past lines run oldest to newest and end at the current fix
                    past = points[:-1] if len(points) > 1 else points
                    track.historical_positions = self._spaced(list(reversed(past)), current, -PAST_STEP_HOURS)

    @staticmethod
    def _spaced(
        points: List[Tuple[float, float]],
        current: HurricanePosition,
        step_hours: float
    ) -> List[HurricanePosition]:
        positions = []
        for index, (lat, lng) in enumerate(points, start=1):
            positions.append(HurricanePosition(
                lat=lat,
                lng=lng,
                timestamp=DateUtils.add_hours(current.timestamp, step_hours * index),
                wind_speed=current.wind_speed,
                pressure=current.pressure
            ))
        return sorted(positions, key=lambda p: p.timestamp)

    def _parse_intensity(self, description: str) -> Tuple[float, Optional[float]]:
        wind = 0.0
        match = re.search(r"(\d+)\s*(?:kt|kts|knots)\b", description, re.IGNORECASE)
        if match:
            wind = self.converter.knots_to_mph(float(match.group(1)))
        else:
            match = re.search(r"(\d+)\s*mph", description, re.IGNORECASE)
            if match:
                wind = float(match.group(1))

        pressure_match = re.search(r"(\d+)\s*mb", description, re.IGNORECASE)
        pressure = float(pressure_match.group(1)) if pressure_match else None
        return round(wind, 1), pressure

    @staticmethod
    def _storm_name(placemark_name: str) -> str:
        """'Hurricane Erin' -> 'Erin'; unknown formats are kept as-is."""
        match = re.search(
            r"(?:Hurricane|Tropical Storm|Tropical Depression|Typhoon|Cyclone)\s+([A-Z][A-Za-z-]+)",
            placemark_name
        )
        return match.group(1) if match else placemark_name.strip()
