"""
OpenWeatherMap source.

Uses imperial units, so temperatures are °F and wind speeds mph as delivered.
Pressure is hPa and rain volumes are mm.
"""

import logging
from collections import Counter, OrderedDict
from datetime import date
from statistics import mean
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..algorithms import forecast_hurricane_risk
from ..api.exceptions import SourceUnavailableError
from ..api.helpers import extract_number, extract_text
from ..core import DateUtils
from ..models import CurrentReading, ForecastDay, HurricaneTrack
from ..processing.converter import UnitConverter
from .base import (
    WeatherSource,
    WatchPointDetectionMixin,
    default_watch_points,
    CURRENT,
    FORECAST,
    HURRICANES,
)

if TYPE_CHECKING:
    from ..api import APIClient

FORECAST_DAYS = 5


class OpenWeatherSource(WatchPointDetectionMixin, WeatherSource):
    """Current conditions, forecast and watch-point storm detection."""

    name = "openweather"
    label = "OpenWeatherMap"
    confidence = 85
    requires_api_key = True
    capabilities = frozenset({CURRENT, FORECAST, HURRICANES})

    def __init__(
        self,
        client: "APIClient",
        api_key: Optional[str],
        watch_points: Optional[List[Dict[str, Any]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, api_key=api_key, logger=logger)
        self.watch_points = watch_points if watch_points is not None else default_watch_points()
        self.converter = UnitConverter(self.logger)

    def _params(self, lat: float, lng: float) -> Dict[str, Any]:
        return {"lat": lat, "lon": lng, "appid": self._require_key(), "units": "imperial"}

    def fetch_current(self, lat: float, lng: float) -> CurrentReading:
        data = self._get_json("/data/2.5/weather", params=self._params(lat, lng))
        return self.parse_current(data)

    def parse_current(self, data: Dict[str, Any]) -> CurrentReading:
        """
        Normalize a current weather payload.

        Raises:
            SourceUnavailableError: If the payload has no measurements
        """
        if not isinstance(data, dict) or not isinstance(data.get("main"), dict):
            raise SourceUnavailableError(f"{self.label}: no measurements in response", source=self.name)

        observed = DateUtils.parse(data.get("dt"), DateUtils.now())
        return CurrentReading(
            source=self.label,
            temperature=extract_number(data, ["main.temp"], 75.0),
            humidity=extract_number(data, ["main.humidity"], 70.0),
            pressure=extract_number(data, ["main.pressure", "main.sea_level"], 1013.0),
            wind_speed=extract_number(data, ["wind.speed"], 0.0),
            description=extract_text(data, ["weather.0.description", "weather.0.main"], "Unknown"),
            confidence=self.confidence,
            timestamp=observed,
            data_source=self.data_source
        )

    def fetch_forecast(self, lat: float, lng: float) -> List[ForecastDay]:
        data = self._get_json("/data/2.5/forecast", params=self._params(lat, lng))
        return self.parse_forecast(data)

    def parse_forecast(self, data: Dict[str, Any]) -> List[ForecastDay]:
        """
        Group 3-hourly entries into daily forecasts.

        Args:
            data: Forecast payload with a 'list' of 3-hour entries

        Returns:
            Up to five daily entries
        """
        entries = data.get("list") if isinstance(data, dict) else None
        if not entries:
            raise SourceUnavailableError(f"{self.label}: empty forecast", source=self.name)

        days: "OrderedDict[date, List[Dict[str, Any]]]" = OrderedDict()
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            stamp = DateUtils.parse(extract_text(entry, ["dt_txt"]).replace(" ", "T") or entry.get("dt"))
            if stamp is None:
                self.logger.debug(f"{self.label}: forecast entry without time skipped")
                continue
            days.setdefault(stamp.date(), []).append(entry)

        forecast = []
        for day, day_entries in list(days.items())[:FORECAST_DAYS]:
            highs = [extract_number(e, ["main.temp_max", "main.temp"], 75.0) for e in day_entries]
            lows = [extract_number(e, ["main.temp_min", "main.temp"], 65.0) for e in day_entries]
            winds = [extract_number(e, ["wind.speed"], 0.0) for e in day_entries]
            humidity = [extract_number(e, ["main.humidity"], 70.0) for e in day_entries]
            rain_mm = sum(extract_number(e, ["rain.3h"], 0.0) for e in day_entries)
            conditions = Counter(
                extract_text(e, ["weather.0.description", "weather.0.main"], "Unknown")
                for e in day_entries
            )

            wind_avg = round(mean(winds), 1)
            precipitation = round(self.converter.mm_to_inches(rain_mm), 2)
            forecast.append(ForecastDay(
                day=day,
                high=max(highs),
                low=min(lows),
                precipitation=precipitation,
                wind_speed=wind_avg,
                humidity=round(mean(humidity)),
                condition=conditions.most_common(1)[0][0],
                hurricane_risk=forecast_hurricane_risk(day, wind_avg, precipitation)
            ))

        return forecast

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        return self._scan_watch_points()
