"""
NHC text bulletins used to find potential tropical development.

The Tropical Weather Outlook lists areas of low pressure, tropical waves and
disturbances. The Tropical Weather Discussion mentions systems that are
developing. Both are free text; positions are read with regular expressions.
"""

import logging
import re
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..algorithms import basin_code
from ..api.helpers import slugify
from ..core import constants, DateUtils
from ..models import Basin, HurricanePosition, HurricaneTrack
from .base import WeatherSource, POTENTIAL

if TYPE_CHECKING:
    from ..api import APIClient

TAG_PATTERN = re.compile(r"<[^>]+>")


def strip_markup(text: str) -> str:
    """Remove HTML tags and collapse whitespace."""
    return re.sub(r"\s+", " ", TAG_PATTERN.sub(" ", text)).strip()


class TextBulletinSource(WeatherSource):
    """Potential storms read from a text bulletin."""

    capabilities = frozenset({POTENTIAL})
    url: str = ""
    pattern: "re.Pattern" = re.compile(r"$^")
    estimated_wind = 25.0
    estimated_pressure = 1010.0

    def __init__(
        self,
        client: "APIClient",
        url: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, logger=logger)
        if url:
            self.url = url

    def fetch_potential_hurricanes(self) -> List[HurricaneTrack]:
        body = self._get_text(self.url)
        return self.parse_bulletin(body)

    def parse_bulletin(self, body: str) -> List[HurricaneTrack]:
        """
        Extract systems from bulletin text.

        Args:
            body: Bulletin text or HTML page

        Returns:
            One track per distinct position mentioned
        """
        text = strip_markup(body)
        tracks = []
        seen = set()
        now = DateUtils.now()

        for match in self.pattern.finditer(text):
            kind, lat, lng = self._match_fields(match)
            key = (round(lat, 1), round(lng, 1))
            if key in seen:
                continue
            seen.add(key)

            tracks.append(HurricaneTrack(
                id=f"{self.name}_{slugify(kind)}_{lat:.1f}_{lng:.1f}",
                name=f"{kind.title()} near {lat:.1f}N {abs(lng):.1f}W",
                basin=Basin(basin_code(lat, lng)),
                current_position=HurricanePosition(
                    lat=lat,
                    lng=lng,
                    timestamp=now,
                    wind_speed=self.estimated_wind,
                    pressure=self.estimated_pressure
                ),
                source=self.label,
                data_source=self.data_source,
                last_updated=now
            ))

        self.logger.info(f"{self.label}: {len(tracks)} potential systems")
        return tracks

    @staticmethod
    def _match_fields(match: "re.Match") -> Tuple[str, float, float]:
        kind, lat, lng = match.group(1), float(match.group(2)), -float(match.group(3))
        return kind, lat, lng


class NHCOutlookSource(TextBulletinSource):
    """Tropical Weather Outlook (Atlantic)."""

    name = "nhc_outlook"
    label = "NHC Tropical Weather Outlook"
    confidence = 75
    url = constants.NHC_OUTLOOK_URL
    pattern = re.compile(
        r"((?i:AREA OF LOW PRESSURE|TROPICAL WAVE|TROPICAL DISTURBANCE)).{0,400}?"
        r"(\d+\.?\d*)\s*N\b[^0-9]{0,40}?(\d+\.?\d*)\s*W\b"
    )
    estimated_wind = 25.0
    estimated_pressure = 1010.0


class NOAADiscussionSource(TextBulletinSource):
    """Tropical Weather Discussion (Atlantic)."""

    name = "noaa_discussion"
    label = "NOAA Tropical Weather Discussion"
    confidence = 65
    url = constants.NHC_DISCUSSION_URL
    pattern = re.compile(
        r"((?i:DEVELOPING|FORMATION)).{0,400}?(\d+\.?\d*)\s*N\b[^0-9]{0,40}?(\d+\.?\d*)\s*W\b"
    )
    estimated_wind = 20.0
    estimated_pressure = 1008.0
