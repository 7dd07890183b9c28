"""
Threshold rules applied to local readings and forecasts.
"""

from datetime import date

from ..core import constants


def meets_storm_criteria(wind_mph: float, pressure_mb: float, humidity: float) -> bool:
    """
    Check whether local readings indicate a tropical system nearby.

    Args:
        wind_mph: Sustained wind in mph
        pressure_mb: Sea-level pressure in mb
        humidity: Relative humidity in %

    Returns:
        True when hurricane winds, a very deep low, or a humid, windy low is observed
    """
    return (
        wind_mph > 74
        or pressure_mb < 980
        or (wind_mph > 39 and pressure_mb < 1000 and humidity > 80)
        or (wind_mph > 25 and pressure_mb < 995 and humidity > 85)
    )


def favors_development(wind_mph: float, pressure_mb: float, humidity: float) -> bool:
    """Check whether readings are favorable for tropical development."""
    return (
        (wind_mph > 20 and pressure_mb < 1010 and humidity > 75)
        or (wind_mph > 15 and pressure_mb < 1005 and humidity > 80)
        or (pressure_mb < 1000 and humidity > 85)
    )


def forecast_hurricane_risk(day: date, wind_mph: float, precipitation_in: float) -> bool:
    """
    Flag a forecast day as carrying hurricane risk.

    A day is flagged inside hurricane season (June to November) when wind or
    precipitation is elevated.
    """
    if day.month not in constants.HURRICANE_SEASON_MONTHS:
        return False
    return wind_mph > constants.RISK_WIND_MPH or precipitation_in > constants.RISK_PRECIPITATION_INCHES
