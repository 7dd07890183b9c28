"""
XWeather source.

Authenticated with a bearer token. Besides readings and forecasts it scans
coastal watch points for storms and for conditions favorable to tropical
development.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..algorithms import favors_development, forecast_hurricane_risk
from ..api.exceptions import SourceUnavailableError
from ..api.helpers import extract_number, extract_text, extract_value
from ..core import DateUtils
from ..models import CurrentReading, ForecastDay, HurricaneTrack
from .base import (
    WeatherSource,
    WatchPointDetectionMixin,
    default_watch_points,
    CURRENT,
    FORECAST,
    HURRICANES,
    POTENTIAL,
)

if TYPE_CHECKING:
    from ..api import APIClient

FORECAST_DAYS = 5


class XWeatherSource(WatchPointDetectionMixin, WeatherSource):
    """Current conditions, forecast, storm and development scans."""

    name = "xweather"
    label = "XWeather"
    confidence = 85
    requires_api_key = True
    capabilities = frozenset({CURRENT, FORECAST, HURRICANES, POTENTIAL})

    def __init__(
        self,
        client: "APIClient",
        api_key: Optional[str],
        watch_points: Optional[List[Dict[str, Any]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(client=client, api_key=api_key, logger=logger)
        self.watch_points = watch_points if watch_points is not None else default_watch_points()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._require_key()}"}

    def fetch_current(self, lat: float, lng: float) -> CurrentReading:
        headers = self._headers()
        data = self._get_json("/v1/current", params={"lat": lat, "lon": lng}, headers=headers)
        return self.parse_current(data)

    def parse_current(self, data: Dict[str, Any]) -> CurrentReading:
        """
        Normalize a current conditions payload.

        Raises:
            SourceUnavailableError: If none of wind, pressure or humidity is present
        """
        wind = extract_number(data, ["wind.speed", "response.ob.windSpeedMPH"])
        pressure = extract_number(data, ["pressure.value", "response.ob.pressureMB"])
        humidity = extract_number(data, ["humidity.value", "response.ob.humidity"])
        if wind is None and pressure is None and humidity is None:
            raise SourceUnavailableError(f"{self.label}: no measurements in response", source=self.name)

        return CurrentReading(
            source=self.label,
            temperature=extract_number(data, ["temperature.value", "response.ob.tempF"], 75.0),
            humidity=humidity if humidity is not None else 70.0,
            pressure=pressure if pressure is not None else 1013.0,
            wind_speed=wind if wind is not None else 0.0,
            description=extract_text(data, ["weather.description", "weather", "response.ob.weather"], "Unknown"),
            confidence=self.confidence,
            timestamp=DateUtils.parse(
                extract_value(data, ["timestamp", "response.ob.dateTimeISO"]), DateUtils.now()
            ),
            data_source=self.data_source
        )

    def fetch_forecast(self, lat: float, lng: float) -> List[ForecastDay]:
        headers = self._headers()
        data = self._get_json(
            "/v1/forecast",
            params={"lat": lat, "lon": lng, "days": FORECAST_DAYS},
            headers=headers
        )
        return self.parse_forecast(data)

    def parse_forecast(self, data: Dict[str, Any]) -> List[ForecastDay]:
        """
        Normalize a daily forecast payload.

        Raises:
            SourceUnavailableError: If the payload has no periods
        """
        periods = None
        if isinstance(data, dict):
            periods = data.get("forecast") or data.get("periods")
            response = data.get("response")
            if periods is None and isinstance(response, list) and response:
                periods = response[0].get("periods") if isinstance(response[0], dict) else None
        if not isinstance(periods, list) or not periods:
            raise SourceUnavailableError(f"{self.label}: empty forecast", source=self.name)

        forecast = []
        for period in periods[:FORECAST_DAYS]:
            if not isinstance(period, dict):
                continue
            stamp = DateUtils.parse(extract_value(period, ["date", "dateTimeISO", "timestamp"]))
            if stamp is None:
                self.logger.debug(f"{self.label}: forecast period without date skipped")
                continue
            wind = extract_number(period, ["wind.speed", "windSpeedMPH"], 0.0)
            precipitation = extract_number(period, ["precipitation", "precipIN"], 0.0)
            forecast.append(ForecastDay(
                day=stamp.date(),
                high=extract_number(period, ["temperature.max", "maxTempF"], 75.0),
                low=extract_number(period, ["temperature.min", "minTempF"], 65.0),
                precipitation=precipitation,
                wind_speed=wind,
                humidity=extract_number(period, ["humidity.value", "humidity"], 70.0),
                condition=extract_text(period, ["weather.description", "weather"], "Unknown"),
                hurricane_risk=forecast_hurricane_risk(stamp.date(), wind, precipitation)
            ))
        return forecast

    def fetch_hurricanes(self) -> List[HurricaneTrack]:
        return self._scan_watch_points()

    def fetch_potential_hurricanes(self) -> List[HurricaneTrack]:
        return self._scan_watch_points(
            criteria=favors_development,
            title="Potential Development near {name}",
            id_prefix="potential_"
        )
