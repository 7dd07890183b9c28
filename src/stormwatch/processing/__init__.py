"""
Processing module for weather data.

Handles unit conversion, validation, condition analysis and recommendations.
"""

from .converter import UnitConverter
from .validator import TrackValidator
from .analyzer import ConditionAnalyzer
from . import recommendations

__all__ = [
    "UnitConverter",
    "TrackValidator",
    "ConditionAnalyzer",
    "recommendations",
]
