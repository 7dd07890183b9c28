"""
Condition analysis.

Combines official alerts, hurricane proximity, averaged current readings and
forecast precipitation into at most one ranked WeatherCondition. Rules are
evaluated in priority order and the first match wins:

1. Active severe or extreme alert (highest severity wins)
2. Hurricane within the danger distance
3. Hurricane within the watch distance
4. Averaged current readings and forecast precipitation
5. Active moderate alert
"""

import logging
from datetime import datetime
from statistics import mean
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..algorithms import classification, haversine_km, km_to_miles
from ..core import constants, DateUtils
from ..models import (
    AlertCategory,
    ConditionType,
    CurrentReading,
    DataSource,
    ForecastDay,
    HurricaneTrack,
    Severity,
    WeatherAlert,
    WeatherCondition,
)
from .recommendations import recommendation_for

if TYPE_CHECKING:
    from ..services.aggregator import WeatherSnapshot

ALERT_TYPE_MAP = {
    AlertCategory.HURRICANE: ConditionType.HURRICANE,
    AlertCategory.TROPICAL_STORM: ConditionType.STORM,
    AlertCategory.THUNDERSTORM: ConditionType.SEVERE_STORM,
    AlertCategory.FLOOD: ConditionType.FLOOD,
    AlertCategory.TORNADO: ConditionType.SEVERE,
    AlertCategory.OTHER: ConditionType.SEVERE,
}

STORM_WORDS = ("storm", "thunder")
RAIN_WORDS = ("rain", "shower", "drizzle")


class ConditionAnalyzer:
    """Synthesize one weather condition for a location."""

    def __init__(
        self,
        danger_distance_km: float = constants.DANGER_DISTANCE_KM,
        watch_distance_km: float = constants.WATCH_DISTANCE_KM,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize analyzer.

        Args:
            danger_distance_km: Hurricanes closer than this are extreme
            watch_distance_km: Hurricanes closer than this are severe
            logger: Logger instance
        """
        self.danger_distance_km = danger_distance_km
        self.watch_distance_km = watch_distance_km
        self.logger = logger or logging.getLogger(__name__)

    def analyze_snapshot(self, snapshot: "WeatherSnapshot", lat: float, lng: float) -> Optional[WeatherCondition]:
        """Analyze a concurrently fetched snapshot."""
        return self.analyze(
            current_readings=snapshot.readings,
            active_alerts=snapshot.alerts,
            hurricane_tracks=snapshot.hurricanes,
            forecast=snapshot.forecast,
            lat=lat,
            lng=lng
        )

    def analyze(
        self,
        current_readings: List[CurrentReading],
        active_alerts: List[WeatherAlert],
        hurricane_tracks: List[HurricaneTrack],
        forecast: List[ForecastDay],
        lat: float,
        lng: float,
        now: Optional[datetime] = None
    ) -> Optional[WeatherCondition]:
        """
        Produce the single most important condition for a location.

        Args:
            current_readings: Readings from every source that answered
            active_alerts: Official alerts for the location
            hurricane_tracks: Active hurricane tracks
            forecast: Daily forecast
            lat: Latitude of the location
            lng: Longitude of the location
            now: Evaluation time (defaults to now, UTC)

        Returns:
            WeatherCondition, or None when nothing is notable
        """
        now = now or DateUtils.now()
        alerts = [alert for alert in active_alerts if alert.is_active(now)]

        condition = self._from_severe_alerts(alerts, now)
        if condition is not None:
            return condition

        condition = self._from_hurricanes(hurricane_tracks, lat, lng, now)
        if condition is not None:
            return condition

        condition = self._from_readings(current_readings, forecast, lat, lng, now)
        if condition is not None:
            return condition

        return self._from_moderate_alerts(alerts, now)

    def _from_severe_alerts(self, alerts: List[WeatherAlert], now: datetime) -> Optional[WeatherCondition]:
        severe = [alert for alert in alerts if alert.severity >= Severity.SEVERE]
        if not severe:
            return None

        # max() keeps the first of equally severe alerts
        alert = max(severe, key=lambda a: a.severity.rank)
        condition_type = ALERT_TYPE_MAP.get(alert.category, ConditionType.SEVERE)
        self.logger.info(f"Severe alert in effect: {alert.title} ({alert.severity.value})")

        return WeatherCondition(
            id=f"gov_{alert.id}",
            type=condition_type,
            severity=alert.severity,
            title=alert.title,
            description=alert.description,
            recommendation=recommendation_for(condition_type, alert.severity, official=True),
            probability=100,
            confidence=constants.ALERT_CONFIDENCE,
            source=alert.source or "Government Alert",
            last_updated=now
        )

    def _nearest_track(
        self,
        tracks: List[HurricaneTrack],
        lat: float,
        lng: float
    ) -> Optional[Tuple[HurricaneTrack, float]]:
        nearest = None
        for track in tracks:
            position = track.current_position
            distance = haversine_km(lat, lng, position.lat, position.lng)
            if nearest is None or distance < nearest[1]:
                nearest = (track, distance)
        return nearest

    def estimate_eta(self, track: HurricaneTrack, lat: float, lng: float) -> Optional[float]:
        """
        Hours until the storm reaches a location at its current closing speed.

        Args:
            track: Hurricane track
            lat: Latitude of the location
            lng: Longitude of the location

        Returns:
            Hours, or None without forecast positions or when the storm is not approaching
        """
        if not track.forecast_positions:
            return None

        current = track.current_position
        upcoming = track.forecast_positions[0]
        hours = (upcoming.timestamp - current.timestamp).total_seconds() / 3600.0
        if hours <= 0:
            return None

        distance_now = haversine_km(lat, lng, current.lat, current.lng)
        distance_next = haversine_km(lat, lng, upcoming.lat, upcoming.lng)
        closing_speed = (distance_now - distance_next) / hours
        if closing_speed <= 0:
            return None
        return round(distance_now / closing_speed, 1)

    def _from_hurricanes(
        self,
        tracks: List[HurricaneTrack],
        lat: float,
        lng: float,
        now: datetime
    ) -> Optional[WeatherCondition]:
        nearest = self._nearest_track(tracks, lat, lng)
        if nearest is None:
            return None

        track, distance_km = nearest
        if distance_km >= self.watch_distance_km:
            return None

        miles = km_to_miles(distance_km)
        eta = self.estimate_eta(track, lat, lng)
        storm = f"{classification(track.wind_speed)} {track.name}"
        description = (
            f"{storm} is {miles:.0f} miles away with maximum sustained winds of "
            f"{track.wind_speed:.0f} mph."
        )
        if eta is not None:
            description += f" Estimated arrival in {eta:.0f} hours."

        if distance_km < self.danger_distance_km:
            severity = Severity.EXTREME
            condition_id = f"hurricane_{track.id}"
            title = f"HURRICANE ALERT: {track.name}"
            probability = 100
            confidence = constants.HURRICANE_DANGER_CONFIDENCE
        else:
            severity = Severity.SEVERE
            condition_id = f"hurricane_watch_{track.id}"
            title = f"HURRICANE WATCH: {track.name}"
            probability = 75
            confidence = constants.HURRICANE_WATCH_CONFIDENCE

        self.logger.info(f"{title} at {distance_km:.0f} km (category {track.category})")

        return WeatherCondition(
            id=condition_id,
            type=ConditionType.HURRICANE,
            severity=severity,
            title=title,
            description=description,
            recommendation=recommendation_for(ConditionType.HURRICANE, severity),
            probability=probability,
            confidence=confidence,
            source=track.source or "Hurricane Tracking",
            last_updated=now,
            data_source=track.data_source,
            distance=round(distance_km, 1),
            eta=eta
        )

    def _from_readings(
        self,
        readings: List[CurrentReading],
        forecast: List[ForecastDay],
        lat: float,
        lng: float,
        now: datetime
    ) -> Optional[WeatherCondition]:
        if not readings and not forecast:
            return None

        wind = mean(r.wind_speed for r in readings) if readings else 0.0
        humidity = mean(r.humidity for r in readings) if readings else 0.0
        text = " ".join(r.description.lower() for r in readings)
        precipitation = mean(day.precipitation for day in forecast) if forecast else 0.0

        if wind > constants.SEVERE_STORM_WIND_MPH:
            condition_type, severity, probability = ConditionType.SEVERE_STORM, Severity.SEVERE, 85
            title = "Severe Storm Conditions"
        elif wind > constants.STORM_WIND_MPH or any(word in text for word in STORM_WORDS):
            condition_type, severity, probability = ConditionType.STORM, Severity.MODERATE, 85
            title = "Storm Conditions"
        elif any(word in text for word in RAIN_WORDS):
            severity = Severity.MODERATE if humidity > constants.WET_HUMIDITY else Severity.MINOR
            condition_type, probability = ConditionType.RAIN, 70
            title = "Rain Expected"
        elif humidity > constants.HUMID_RAIN_HUMIDITY and wind > constants.HUMID_RAIN_WIND_MPH:
            condition_type, severity, probability = ConditionType.RAIN, Severity.MODERATE, 60
            title = "Rain Likely"
        elif precipitation > constants.FORECAST_RAIN_INCHES:
            condition_type, severity, probability = ConditionType.RAIN, Severity.MINOR, 50
            title = "Rain in Forecast"
        else:
            return None

        if readings:
            confidence = mean(r.confidence for r in readings)
            sources = list(dict.fromkeys(r.source for r in readings))
            description = (
                f"Wind {wind:.0f} mph, humidity {humidity:.0f}%"
                f" from {len(readings)} source(s)."
            )
        else:
            confidence = 70
            sources = ["Forecast"]
            description = f"Average forecast precipitation {precipitation:.2f} in per day."

        is_mock = any(r.data_source == DataSource.MOCK for r in readings)

        return WeatherCondition(
            id=f"conditions_{condition_type.value}_{lat:.2f}_{lng:.2f}",
            type=condition_type,
            severity=severity,
            title=title,
            description=description,
            recommendation=recommendation_for(condition_type, severity),
            probability=probability,
            confidence=confidence,
            source=", ".join(sources),
            last_updated=now,
            data_source=DataSource.MOCK if is_mock else DataSource.REAL
        )

    def _from_moderate_alerts(self, alerts: List[WeatherAlert], now: datetime) -> Optional[WeatherCondition]:
        moderate = [alert for alert in alerts if alert.severity == Severity.MODERATE]
        if not moderate:
            return None

        alert = moderate[0]
        return WeatherCondition(
            id=f"nws_{alert.id}",
            type=ConditionType.MODERATE,
            severity=Severity.MODERATE,
            title=alert.title,
            description=alert.description,
            recommendation=recommendation_for(ConditionType.MODERATE, Severity.MODERATE),
            probability=80,
            confidence=constants.MODERATE_ALERT_CONFIDENCE,
            source=alert.source or "Government Alert",
            last_updated=now
        )
