"""
NOAA National Hurricane Center RSS feed.

Storm items carry a structured cyclone record (name, type, center, wind,
pressure) in the NHC namespace. When a feed has no such records, advisory
items are parsed from their free text instead.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..algorithms import normalize_basin
from ..api.exceptions import SourceUnavailableError
from ..api.helpers import first_match, slugify
from ..core import constants, DateUtils
from ..models import Basin, HurricanePosition, HurricaneTrack
from ..processing.converter import UnitConverter
from .base import WeatherSource, HURRICANES

if TYPE_CHECKING:
    from ..api import APIClient

ADVISORY_KEYWORDS = (
    "hurricane",
    "tropical storm",
    "tropical depression",
    "typhoon",
    "cyclone",
    "advisory",
    "warning",
    "watch",
    "active",
    "summary",
)

NAME_PATTERNS = [
    r"(?:Hurricane|Tropical Storm|Tropical Depression|Typhoon)\s+([A-Z][a-z]+)",
    r"Summary for\s+(?:Hurricane|Tropical Storm|Tropical Depression|Post-Tropical Cyclone|Potential Tropical Cyclone)?\s*([A-Z][a-z]+)",
    r"([A-Z][a-z]+)\s+(?:Hurricane|Tropical Storm|Tropical Depression)",
]

COORDINATE_PATTERNS = [
    (r"(\d+\.?\d*)\s*([NS])[\s,]+(\d+\.?\d*)\s*([EW])", re.DOTALL),
    (r"LAT(?:ITUDE)?\.*\s*(-?\d+\.?\d*)\s*([NS])?.*?LON(?:GITUDE)?\.*\s*(-?\d+\.?\d*)\s*([EW])?", re.IGNORECASE | re.DOTALL),
]

WIND_PATTERNS = [
    (r"(\d+)\s*(?:kt|kts|knots)\b", "kt"),
    (r"(\d+)\s*mph", "mph"),
    (r"MAXIMUM SUSTAINED WINDS.*?(\d+)", "mph"),
]

PRESSURE_PATTERN = r"(\d{3,4})\s*MB"
DEFAULT_PRESSURE_MB = 1013.0


def _local(tag: str) -> str:
    """Element tag without its namespace."""
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str:
    for child in element:
        if _local(child.tag).lower() == name.lower():
            return (child.text or "").strip()
    return ""


def _first_number(text: str) -> Optional[float]:
    match = re.search(r"-?\d+\.?\d*", text or "")
    return float(match.group(0)) if match else None


class NHCRssSource(WeatherSource):
    """Active storms from the NHC Atlantic RSS feed."""

    name = "nhc_rss"
    label = "NOAA National Hurricane Center"
    confidence = 95
    capabilities = frozenset({HURRICANES})

    def __init__(
        self,
        client: "APIClient",
        feed_url: str = constants.NHC_RSS_URL,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, logger=logger)
        self.feed_url = feed_url
        self.converter = UnitConverter(self.logger)

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        """
        Fetch and parse the RSS feed.

        Returns:
            Tracks, deduplicated by storm name

        Raises:
            SourceUnavailableError: If the feed is unreachable or not XML
        """
        body = self._get_text(self.feed_url)
        return self.parse_feed(body)

    def parse_feed(self, body: str) -> List[HurricaneTrack]:
        """
        Parse an RSS document into tracks.

        Args:
            body: RSS XML

        Returns:
            Tracks, deduplicated by storm name

        Raises:
            SourceUnavailableError: If the document is not valid XML
        """
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise SourceUnavailableError(f"{self.label}: malformed RSS: {e}", source=self.name) from e

        items = [el for el in root.iter() if _local(el.tag) == "item"]
        tracks: Dict[str, HurricaneTrack] = {}

        # Structured records first
        for item in items:
            for element in item:
                if _local(element.tag).lower() != "cyclone":
                    continue
                track = self._parse_cyclone(element, self._item_time(item))
                if track is not None and track.name not in tracks:
                    tracks[track.name] = track

        if tracks:
            self.logger.info(f"Parsed {len(tracks)} storms from structured RSS records")
            return list(tracks.values())

        # Free-text advisories
        for item in items:
            title = _child_text(item, "title")
            description = _child_text(item, "description")
            if not self.is_active_storm_advisory(title, description):
                continue
            track = self.parse_advisory(title, description, self._item_time(item))
            if track is not None and track.name not in tracks:
                tracks[track.name] = track

        self.logger.info(f"Parsed {len(tracks)} storms from RSS advisories")
        return list(tracks.values())

    @staticmethod
    def is_active_storm_advisory(title: str, description: str) -> bool:
        text = f"{title} {description}".lower()
        return any(keyword in text for keyword in ADVISORY_KEYWORDS)

    def _item_time(self, item: ET.Element) -> datetime:
        published = _child_text(item, "pubDate")
        if published:
            try:
                return DateUtils.to_utc(parsedate_to_datetime(published))
            except (TypeError, ValueError):
                self.logger.debug(f"Unparseable pubDate: {published}")
        return DateUtils.now()

    def _parse_cyclone(self, element: ET.Element, timestamp: datetime) -> Optional[HurricaneTrack]:
        name = _child_text(element, "name")
        center = _child_text(element, "center")
        if not name or not center:
            return None

        parts = [p.strip() for p in center.split(",")]
        if len(parts) != 2:
            return None
        try:
            lat, lng = float(parts[0]), float(parts[1])
        except ValueError:
            return None

        wind_text = _child_text(element, "wind")
        wind = _first_number(wind_text) or 0.0
        if re.search(r"\b(?:kt|kts|knots)\b", wind_text, re.IGNORECASE):
            wind = self.converter.knots_to_mph(wind)

        pressure = _first_number(_child_text(element, "pressure"))
        storm_type = _child_text(element, "type")
        full_name = f"{storm_type} {name}".strip() if storm_type else name
        self.logger.debug(f"Cyclone record: {full_name} at ({lat}, {lng}), {wind:.0f} mph")

        return self._build_track(name, lat, lng, wind, pressure, timestamp, _child_text(element, "atcf"))

    def parse_advisory(self, title: str, description: str, timestamp: Optional[datetime] = None) -> Optional[HurricaneTrack]:
        """
        Parse a storm from advisory free text.

        Args:
            title: Item title
            description: Item description
            timestamp: Item publication time

        Returns:
            Track, or None when no coordinates can be found
        """
        text = f"{title} {description}"
        coordinates = self._parse_coordinates(text)
        if coordinates is None:
            return None
        lat, lng = coordinates

        name_match = first_match(NAME_PATTERNS, text, flags=0)
        name = name_match.group(1) if name_match else (title.strip() or "Unnamed Storm")

        wind = 0.0
        for pattern, unit in WIND_PATTERNS:
            match = re.search(pattern, text, re.IGNORECASE | re.DOTALL)
            if match:
                wind = self.converter.wind_to_mph(float(match.group(1)), unit)
                break

        pressure_match = re.search(PRESSURE_PATTERN, text, re.IGNORECASE)
        pressure = float(pressure_match.group(1)) if pressure_match else DEFAULT_PRESSURE_MB

        return self._build_track(name, lat, lng, wind, pressure, timestamp or DateUtils.now())

    @staticmethod
    def _parse_coordinates(text: str) -> Optional[Tuple[float, float]]:
        for pattern, flags in COORDINATE_PATTERNS:
            match = re.search(pattern, text, flags)
            if not match:
                continue
            lat, lat_hemi, lng, lng_hemi = match.groups()
            lat_value, lng_value = float(lat), float(lng)
            if lat_hemi and lat_hemi.upper() == "S":
                lat_value = -abs(lat_value)
            if lng_hemi and lng_hemi.upper() == "W":
                lng_value = -abs(lng_value)
            return lat_value, lng_value
        return None

    def _build_track(
        self,
        name: str,
        lat: float,
        lng: float,
        wind: float,
        pressure: Optional[float],
        timestamp: datetime,
        basin_label: Optional[str] = None
    ) -> HurricaneTrack:
        label = basin_label[:2] if basin_label else None
        return HurricaneTrack(
            id=f"{self.name}_{slugify(name)}",
            name=name,
            basin=Basin(normalize_basin(label, lat, lng)),
            current_position=HurricanePosition(
                lat=lat,
                lng=lng,
                timestamp=timestamp,
                wind_speed=round(wind, 1),
                pressure=pressure
            ),
            source=self.label,
            data_source=self.data_source,
            last_updated=DateUtils.now()
        )
