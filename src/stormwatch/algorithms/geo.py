"""
Geographic helpers.

All distances are in kilometres. Conversion to miles happens only when text
is rendered for people.
"""

import math
from typing import Optional

from ..core import constants

# Provider basin labels mapped to basin codes
BASIN_ALIASES = {
    "ATLANTIC": "ATL",
    "AL": "ATL",
    "AT": "ATL",
    "ATL": "ATL",
    "EASTERN_PACIFIC": "EPAC",
    "EASTERN PACIFIC": "EPAC",
    "EP": "EPAC",
    "EPAC": "EPAC",
    "CENTRAL_PACIFIC": "CPAC",
    "CENTRAL PACIFIC": "CPAC",
    "CP": "CPAC",
    "CPAC": "CPAC",
    "WESTERN_PACIFIC": "WPAC",
    "WESTERN PACIFIC": "WPAC",
    "WP": "WPAC",
    "WPAC": "WPAC",
    "INDIAN_OCEAN": "IO",
    "INDIAN OCEAN": "IO",
    "IO": "IO",
    "SOUTHERN_HEMISPHERE": "SH",
    "SOUTHERN HEMISPHERE": "SH",
    "SH": "SH",
}


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points.

    Args:
        lat1: Latitude of the first point (degrees)
        lng1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lng2: Longitude of the second point (degrees)

    Returns:
        Distance in kilometres
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * constants.EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def km_to_miles(km: float) -> float:
    return km / constants.KM_PER_MILE


def miles_to_km(miles: float) -> float:
    return miles * constants.KM_PER_MILE


def bearing_degrees(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Heading from the first point toward the second, 0-360 with 0 = north.

    Uses the flat approximation atan2(d_lng, d_lat), which is what the map
    markers are rotated by.
    """
    heading = math.degrees(math.atan2(lng2 - lng1, lat2 - lat1))
    return (heading + 360.0) % 360.0


def basin_code(lat: float, lng: float) -> str:
    """
    Infer the tropical cyclone basin from coordinates.

    Args:
        lat: Latitude (degrees)
        lng: Longitude (degrees)

    Returns:
        Basin code: ATL, EPAC, CPAC, WPAC, IO or SH
    """
    if lat < 0:
        return "SH"
    if -100 <= lng <= -30 and lat <= 50:
        return "ATL"
    if -180 <= lng < -140 and lat <= 50:
        return "CPAC"
    if -140 <= lng < -100 and lat <= 50:
        return "EPAC"
    if 100 <= lng <= 180 and lat <= 50:
        return "WPAC"
    if 40 <= lng < 100 and lat <= 30:
        return "IO"
    return "ATL"


def normalize_basin(label: Optional[str], lat: float, lng: float) -> str:
    """
    Map a provider basin label to a basin code, inferring it when unknown.

    Args:
        label: Provider label such as 'ATLANTIC' or 'ep'
        lat: Storm latitude, used when the label is missing or unknown
        lng: Storm longitude, used when the label is missing or unknown

    Returns:
        Basin code
    """
    if label:
        code = BASIN_ALIASES.get(str(label).strip().upper())
        if code:
            return code
    return basin_code(lat, lng)


def valid_coordinates(lat: float, lng: float) -> bool:
    """Check that coordinates are within geographic bounds."""
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0
