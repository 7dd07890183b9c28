"""
Core utilities for the storm monitoring system.

Provides configuration management and logging functionality.
"""

from .config import Config
from .logger import setup_logger, component_logger, LoggerContext
from . import constants
from .date_utils import DateUtils

__all__ = [
    "Config",
    "setup_logger",
    "component_logger",
    "LoggerContext",
    "constants",
    "DateUtils",
]
