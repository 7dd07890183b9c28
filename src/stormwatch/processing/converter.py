"""
Unit conversion module.

Converts provider units into the canonical units used internally:
°F, mph, mb and inches.
"""

import logging
from typing import Optional

from ..core import constants


class UnitConverter:
    """Convert between different meteorological units."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize unit converter.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def celsius_to_fahrenheit(value: float) -> float:
        return value * 9.0 / 5.0 + 32.0

    @staticmethod
    def knots_to_mph(value: float) -> float:
        return value * constants.KNOTS_TO_MPH

    @staticmethod
    def kmh_to_mph(value: float) -> float:
        return value / constants.KM_PER_MILE

    @staticmethod
    def ms_to_mph(value: float) -> float:
        return value * 3600.0 / 1000.0 / constants.KM_PER_MILE

    @staticmethod
    def inhg_to_mb(value: float) -> float:
        return value * constants.INHG_TO_MB

    @staticmethod
    def kpa_to_mb(value: float) -> float:
        return value * 10.0

    @staticmethod
    def mm_to_inches(value: float) -> float:
        return value / constants.MM_PER_INCH

    def wind_to_mph(self, value: float, unit: str) -> float:
        """
        Convert a wind speed to mph.

        Args:
            value: Wind speed
            unit: Source unit ('mph', 'kt', 'knots', 'km/h', 'kmh', 'm/s')

        Returns:
            Wind speed in mph
        """
        unit_lower = unit.lower().strip()
        if unit_lower in ("mph", "mi/h"):
            return value
        if unit_lower in ("kt", "kts", "knots", "knot"):
            return self.knots_to_mph(value)
        if unit_lower in ("km/h", "kmh", "kph"):
            return self.kmh_to_mph(value)
        if unit_lower in ("m/s", "ms", "mps"):
            return self.ms_to_mph(value)

        self.logger.warning(f"Unknown wind speed unit: {unit}, using value as mph")
        return value

    def pressure_to_mb(self, value: float, unit: str) -> float:
        """
        Convert a pressure to mb (hPa).

        Args:
            value: Pressure
            unit: Source unit ('mb', 'hpa', 'inhg', 'kpa')

        Returns:
            Pressure in mb
        """
        unit_lower = unit.lower().strip()
        if unit_lower in ("mb", "hpa", "mbar"):
            return value
        if unit_lower in ("inhg", "in"):
            return self.inhg_to_mb(value)
        if unit_lower == "kpa":
            return self.kpa_to_mb(value)

        self.logger.warning(f"Unknown pressure unit: {unit}, using value as mb")
        return value

    def temperature_to_fahrenheit(self, value: float, unit: str) -> float:
        """
        Convert a temperature to °F.

        Args:
            value: Temperature
            unit: Source unit ('f', 'c', '°f', '°c')

        Returns:
            Temperature in °F
        """
        unit_lower = unit.lower().strip().lstrip("°")
        if unit_lower in ("f", "fahrenheit"):
            return value
        if unit_lower in ("c", "celsius"):
            return self.celsius_to_fahrenheit(value)

        self.logger.warning(f"Unknown temperature unit: {unit}, using value as °F")
        return value
