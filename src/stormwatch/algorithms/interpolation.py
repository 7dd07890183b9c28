"""
Presentation-only track animation helpers.

Smooths a marker between two known fixes for display. Nothing here predicts
storm movement and the output must never feed the analyzer.
"""

from datetime import datetime
from typing import Dict

from .geo import bearing_degrees, haversine_km, km_to_miles


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in/ease-out curve on [0, 1]."""
    t = max(0.0, min(1.0, t))
    if t < 0.5:
        return 4 * t * t * t
    return 1 - ((-2 * t + 2) ** 3) / 2


def interpolate_position(
    start: Dict[str, float],
    end: Dict[str, float],
    progress: float
) -> Dict[str, float]:
    """
    Eased point between two fixes.

    Args:
        start: Dict with 'lat', 'lng' and optionally 'wind_speed'
        end: Dict with 'lat', 'lng' and optionally 'wind_speed'
        progress: Fraction of the way from start to end, clamped to [0, 1]

    Returns:
        Dict with 'lat', 'lng', 'wind_speed' and 'bearing'
    """
    eased = ease_in_out_cubic(progress)
    start_wind = start.get("wind_speed", 0.0)
    end_wind = end.get("wind_speed", start_wind)
    return {
        "lat": start["lat"] + (end["lat"] - start["lat"]) * eased,
        "lng": start["lng"] + (end["lng"] - start["lng"]) * eased,
        "wind_speed": start_wind + (end_wind - start_wind) * eased,
        "bearing": bearing_degrees(start["lat"], start["lng"], end["lat"], end["lng"]),
    }


def forward_speed_mph(
    lat1: float,
    lng1: float,
    time1: datetime,
    lat2: float,
    lng2: float,
    time2: datetime
) -> float:
    """Average forward speed between two timed fixes, 0 when times coincide."""
    hours = (time2 - time1).total_seconds() / 3600.0
    if hours <= 0:
        return 0.0
    return km_to_miles(haversine_km(lat1, lng1, lat2, lng2)) / hours
