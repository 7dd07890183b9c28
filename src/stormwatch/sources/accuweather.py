"""
AccuWeather source.

AccuWeather addresses locations by a location key, resolved once per
coordinate and cached for a day. Payload fields move between plans and unit
systems, so every value is read from a list of candidate paths.
"""

import logging
from datetime import date, timedelta
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
    from ..api import APIClient, ResponseCache

FORECAST_DAYS = 5


class AccuWeatherSource(WatchPointDetectionMixin, WeatherSource):
    """Current conditions, 5-day forecast and watch-point storm detection."""

    name = "accuweather"
    label = "AccuWeather"
    confidence = 90
    requires_api_key = True
    capabilities = frozenset({CURRENT, FORECAST, HURRICANES})

    def __init__(
        self,
        client: "APIClient",
        api_key: Optional[str],
        cache: Optional["ResponseCache"] = None,
        watch_points: Optional[List[Dict[str, Any]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, api_key=api_key, logger=logger)
        self.cache = cache
        self.watch_points = watch_points if watch_points is not None else default_watch_points()
        self.converter = UnitConverter(self.logger)

    def location_key(self, lat: float, lng: float) -> str:
        """
        Resolve the AccuWeather location key for coordinates.

        Raises:
            SourceUnavailableError: If no key is returned
        """
        if self.cache is None:
            return self._lookup_location_key(lat, lng)
        cache_key = self.cache.make_key(self.name, lat, lng)
        return self.cache.get_or_fetch("location_key", cache_key, lambda: self._lookup_location_key(lat, lng))

    def _lookup_location_key(self, lat: float, lng: float) -> str:
        data = self._get_json(
            "/locations/v1/cities/geoposition/search",
            params={"apikey": self._require_key(), "q": f"{lat:.4f},{lng:.4f}"}
        )
        key = extract_text(data, ["Key"])
        if not key:
            raise SourceUnavailableError(f"{self.label}: no location key for {lat},{lng}", source=self.name)
        self.logger.debug(f"{self.label}: location key {key} for {lat:.4f},{lng:.4f}")
        return key

    def fetch_current(self, lat: float, lng: float) -> CurrentReading:
        api_key = self._require_key()
        key = self.location_key(lat, lng)
        data = self._get_json(f"/currentconditions/v1/{key}", params={"apikey": api_key, "details": "true"})
        return self.parse_current(data)

    def parse_current(self, data: Any) -> CurrentReading:
        """
        Normalize a current conditions payload.

        Raises:
            SourceUnavailableError: If the payload holds no observation
        """
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise SourceUnavailableError(f"{self.label}: no current conditions", source=self.name)
        record = data[0]

        temperature = extract_number(record, ["Temperature.Imperial.Value"])
        if temperature is None:
            celsius = extract_number(record, ["Temperature.Metric.Value"])
            temperature = (
                self.converter.celsius_to_fahrenheit(celsius) if celsius is not None
                else extract_number(record, ["Temperature.Value"], 75.0)
            )

        wind = extract_number(record, ["Wind.Speed.Imperial.Value"])
        if wind is None:
            kmh = extract_number(record, ["Wind.Speed.Metric.Value"])
            wind = (
                self.converter.kmh_to_mph(kmh) if kmh is not None
                else extract_number(record, ["Wind.Speed.Value"], 5.0)
            )

        pressure = extract_number(record, ["Pressure.Metric.Value"])
        if pressure is None:
            pressure = self.converter.inhg_to_mb(
                extract_number(record, ["Pressure.Imperial.Value", "Pressure.Value"], 29.92)
            )

        return CurrentReading(
            source=self.label,
            temperature=round(temperature, 1),
            humidity=extract_number(record, ["RelativeHumidity", "Humidity"], 70.0),
            pressure=round(pressure, 1),
            wind_speed=round(wind, 1),
            description=extract_text(record, ["WeatherText"], "Partly Cloudy"),
            confidence=self.confidence,
            timestamp=DateUtils.parse(record.get("LocalObservationDateTime"), DateUtils.now()),
            data_source=self.data_source
        )

    def fetch_forecast(self, lat: float, lng: float) -> List[ForecastDay]:
        api_key = self._require_key()
        key = self.location_key(lat, lng)
        data = self._get_json(
            f"/forecasts/v1/daily/5day/{key}",
            params={"apikey": api_key, "metric": "false", "details": "true"}
        )
        return self.parse_forecast(data)

    def parse_forecast(self, data: Any, start: Optional[date] = None) -> List[ForecastDay]:
        """
        Normalize a 5-day forecast payload.

        A malformed day becomes a default-filled entry so the forecast keeps
        all of its days.

        Args:
            data: Payload with 'DailyForecasts'
            start: Date used for days whose own date cannot be read

        Returns:
            Daily entries

        Raises:
            SourceUnavailableError: If the payload has no daily forecasts
        """
        days = data.get("DailyForecasts") if isinstance(data, dict) else None
        if not isinstance(days, list) or not days:
            raise SourceUnavailableError(f"{self.label}: no daily forecasts", source=self.name)

        start = start or DateUtils.now().date()
        forecast = []
        for index, day in enumerate(days[:FORECAST_DAYS]):
            fallback_date = start + timedelta(days=index)
            try:
                forecast.append(self._parse_day(day, fallback_date))
            except Exception as e:
                self.logger.warning(f"{self.label}: malformed forecast day {index}, using defaults: {e}")
                forecast.append(self._default_day(fallback_date))
        return forecast

    def _parse_day(self, day: Dict[str, Any], fallback_date: date) -> ForecastDay:
        parsed = DateUtils.parse(day.get("Date"))
        day_date = parsed.date() if parsed else fallback_date
        wind = extract_number(day, ["Day.Wind.Speed.Value"], 0.0)
        precipitation = extract_number(
            day, ["Day.TotalLiquid.Value", "Day.Precipitation.Value", "Day.Rain.Value"], 0.0
        )
        return ForecastDay(
            day=day_date,
            high=extract_number(day, ["Temperature.Maximum.Value", "Temperature.Max.Value"], 75.0),
            low=extract_number(day, ["Temperature.Minimum.Value", "Temperature.Min.Value"], 65.0),
            precipitation=precipitation,
            wind_speed=wind,
            humidity=extract_number(day, ["Day.RelativeHumidity.Average", "Day.RelativeHumidity"], 70.0),
            condition=extract_text(day, ["Day.IconPhrase", "Day.ShortPhrase"], "Partly Cloudy"),
            hurricane_risk=forecast_hurricane_risk(day_date, wind, precipitation)
        )

    @staticmethod
    def _default_day(day_date: date) -> ForecastDay:
        return ForecastDay(
            day=day_date,
            high=75.0,
            low=65.0,
            precipitation=0.0,
            wind_speed=0.0,
            humidity=70.0,
            condition="Partly Cloudy",
            hurricane_risk=False
        )

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        return self._scan_watch_points()
