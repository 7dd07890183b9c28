"""
Builders for test data shared across test modules.
"""

from datetime import datetime, timedelta

import pytz

from src.stormwatch.models import (
    AlertCategory,
    Basin,
    CurrentReading,
    ForecastDay,
    HurricanePosition,
    HurricaneTrack,
    Severity,
    WeatherAlert,
)

REFERENCE_TIME = datetime(2025, 9, 10, 12, 0, tzinfo=pytz.UTC)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_track(
    name="Test",
    lat=25.0,
    lng=-80.0,
    wind=130.0,
    track_id=None,
    forecast=None,
    timestamp=None,
    source="Test Feed",
):
    """Build a hurricane track; forecast is a list of (lat, lng, hours_ahead)."""
    timestamp = timestamp or REFERENCE_TIME
    forecast_positions = [
        HurricanePosition(lat=f_lat, lng=f_lng, timestamp=timestamp + timedelta(hours=hours), wind_speed=wind)
        for f_lat, f_lng, hours in (forecast or [])
    ]
    return HurricaneTrack(
        id=track_id or f"test_{name.lower()}",
        name=name,
        basin=Basin.ATL,
        current_position=HurricanePosition(lat=lat, lng=lng, timestamp=timestamp, wind_speed=wind, pressure=950.0),
        forecast_positions=forecast_positions,
        source=source,
    )


def make_reading(wind=5.0, humidity=60.0, pressure=1015.0, description="clear sky", source="Test", confidence=80):
    """Build a current reading."""
    return CurrentReading(
        source=source,
        temperature=80.0,
        humidity=humidity,
        pressure=pressure,
        wind_speed=wind,
        description=description,
        confidence=confidence,
    )


def make_alert(alert_id="a1", severity=Severity.SEVERE, category=AlertCategory.FLOOD, title="Flood Warning"):
    """Build an official alert active around REFERENCE_TIME."""
    return WeatherAlert(
        id=alert_id,
        title=title,
        description=f"{title} in effect.",
        severity=severity,
        category=category,
        event=title,
        effective=REFERENCE_TIME - timedelta(hours=2),
        expires=REFERENCE_TIME + timedelta(hours=22),
        areas=["Miami-Dade"],
        source="National Weather Service",
    )


def make_forecast_day(precipitation=0.0, wind=5.0, offset_days=0):
    """Build a forecast day."""
    return ForecastDay(
        day=(REFERENCE_TIME + timedelta(days=offset_days)).date(),
        high=88.0,
        low=78.0,
        precipitation=precipitation,
        wind_speed=wind,
        humidity=70.0,
        condition="Partly Cloudy",
    )
