"""
Storm algorithms.

Saffir-Simpson categorization, geographic distance and basin helpers,
threshold rules for local readings, and presentation-only track interpolation.
"""

from .saffir_simpson import saffir_simpson_category, classification
from .geo import (
    haversine_km,
    km_to_miles,
    miles_to_km,
    bearing_degrees,
    basin_code,
    normalize_basin,
    valid_coordinates,
)
from .detection import meets_storm_criteria, favors_development, forecast_hurricane_risk
from .interpolation import ease_in_out_cubic, interpolate_position, forward_speed_mph

__all__ = [
    "saffir_simpson_category",
    "classification",
    "haversine_km",
    "km_to_miles",
    "miles_to_km",
    "bearing_degrees",
    "basin_code",
    "normalize_basin",
    "valid_coordinates",
    "meets_storm_criteria",
    "favors_development",
    "forecast_hurricane_risk",
    "ease_in_out_cubic",
    "interpolate_position",
    "forward_speed_mph",
]
