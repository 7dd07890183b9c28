"""
Application-wide constants for storm monitoring.

This module defines default values and thresholds used throughout the application.
Values that are tunable per deployment are also exposed through Config.
"""

# Saffir-Simpson hurricane wind scale (mph), highest category first
SAFFIR_SIMPSON_THRESHOLDS = (
    (5, 157.0),
    (4, 130.0),
    (3, 111.0),
    (2, 96.0),
    (1, 74.0),
)

# Unit conversion factors
KNOTS_TO_MPH = 1.15078
INHG_TO_MB = 33.8639
MM_PER_INCH = 25.4
KM_PER_MILE = 1.609344
EARTH_RADIUS_KM = 6371.0

# Hurricane proximity thresholds (km)
DANGER_DISTANCE_KM = 500.0
WATCH_DISTANCE_KM = 1000.0

# Reading classification thresholds
SEVERE_STORM_WIND_MPH = 40.0
STORM_WIND_MPH = 25.0
HUMID_RAIN_HUMIDITY = 85.0
HUMID_RAIN_WIND_MPH = 15.0
FORECAST_RAIN_INCHES = 0.5
WET_HUMIDITY = 80.0

# Forecast hurricane risk
HURRICANE_SEASON_MONTHS = (6, 7, 8, 9, 10, 11)
RISK_WIND_MPH = 25.0
RISK_PRECIPITATION_INCHES = 2.0

# Confidence values (0-100)
ALERT_CONFIDENCE = 95
MODERATE_ALERT_CONFIDENCE = 90
HURRICANE_DANGER_CONFIDENCE = 100
HURRICANE_WATCH_CONFIDENCE = 90

# Notification decisions (seconds)
SAME_ALERT_COOLDOWN = 5 * 60
MIN_NOTIFICATION_SPACING = 60
TEST_MODE_INTERVAL = 10
FREQUENCY_INTERVALS = {
    "immediate": 2 * 60,
    "hourly": 60 * 60,
    "daily": 24 * 60 * 60,
}
ALERT_CACHE_SIZE = 256
DISMISSED_ALERTS_LIMIT = 500

# Cache TTLs (seconds)
CACHE_TTL_CURRENT = 10 * 60
CACHE_TTL_FORECAST = 10 * 60
CACHE_TTL_ALERTS = 5 * 60
CACHE_TTL_HURRICANES = 2 * 60
CACHE_TTL_POTENTIAL = 10 * 60
CACHE_TTL_LOCATION_KEY = 24 * 60 * 60
CACHE_MAX_ENTRIES = 512
COORDINATE_PRECISION = 4

# Rate limiting (seconds)
REQUEST_DELAY = 1.0
RATE_LIMIT_COOLDOWN = 60.0

# Snapshot fan-out join timeout (seconds)
SNAPSHOT_TIMEOUT = 30.0

# Sentinel provenance strings
NO_DATA_SOURCE = "No Data Available"
NO_POTENTIAL_STORMS_SOURCE = "No Potential Storms Detected"

# Fixed cache keys
ACTIVE_HURRICANES_KEY = "active_hurricanes"
POTENTIAL_HURRICANES_KEY = "potential_hurricanes"

# Hurricane-prone coastal cities (lat, lng) checked by the detection sources
DEFAULT_WATCH_POINTS = [
    {"name": "Miami", "lat": 25.7617, "lng": -80.1918},
    {"name": "Houston", "lat": 29.7604, "lng": -95.3698},
    {"name": "Lafayette", "lat": 30.2241, "lng": -92.0198},
    {"name": "Fort Lauderdale", "lat": 26.1224, "lng": -80.1373},
    {"name": "Tampa", "lat": 27.9506, "lng": -82.4572},
    {"name": "Austin", "lat": 30.2672, "lng": -97.7431},
    {"name": "New Orleans", "lat": 29.9511, "lng": -90.0715},
]

# Risk zones used by the recommendation engine (radius in miles)
HURRICANE_RISK_ZONES = [
    {"name": "Miami", "lat": 25.7617, "lng": -80.1918, "radius_miles": 200},
    {"name": "Fort Lauderdale", "lat": 26.1224, "lng": -80.1373, "radius_miles": 200},
    {"name": "West Palm Beach", "lat": 26.7153, "lng": -80.0534, "radius_miles": 200},
    {"name": "Jacksonville", "lat": 30.3322, "lng": -81.6557, "radius_miles": 200},
    {"name": "Houston", "lat": 29.7604, "lng": -95.3698, "radius_miles": 200},
    {"name": "New Orleans", "lat": 29.9511, "lng": -90.0715, "radius_miles": 200},
]

# Upstream endpoints
NHC_RSS_URL = "https://www.nhc.noaa.gov/index-at.xml"
NHC_KML_BASE_URL = "https://www.nhc.noaa.gov/gis/kml"
NHC_OUTLOOK_URL = "https://www.nhc.noaa.gov/text/refresh/TWOAT.shtml"
NHC_DISCUSSION_URL = "https://www.nhc.noaa.gov/text/refresh/TWDAT.shtml"
NWS_API_URL = "https://api.weather.gov"
OPENWEATHER_API_URL = "https://api.openweathermap.org"
ACCUWEATHER_API_URL = "http://dataservice.accuweather.com"
XWEATHER_API_URL = "https://api.xweather.com"
DEFAULT_USER_AGENT = "StormWatch/0.1 (emergency resource locator)"
