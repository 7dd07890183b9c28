"""
Upstream weather sources.

One source per provider. Each normalizes its payloads into the shared models.
"""

from .base import WeatherSource, CURRENT, FORECAST, HURRICANES, POTENTIAL, ALERTS
from .nhc_rss import NHCRssSource
from .nhc_kml import NHCKmlSource
from .nhc_outlook import NHCOutlookSource, NOAADiscussionSource
from .nws_alerts import NWSAlertsSource
from .openweather import OpenWeatherSource
from .accuweather import AccuWeatherSource
from .xweather import XWeatherSource
from .mock import MockWeatherSource

__all__ = [
    "WeatherSource",
    "CURRENT",
    "FORECAST",
    "HURRICANES",
    "POTENTIAL",
    "ALERTS",
    "NHCRssSource",
    "NHCKmlSource",
    "NHCOutlookSource",
    "NOAADiscussionSource",
    "NWSAlertsSource",
    "OpenWeatherSource",
    "AccuWeatherSource",
    "XWeatherSource",
    "MockWeatherSource",
]
