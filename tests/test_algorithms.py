"""
Tests for storm algorithms: Saffir-Simpson scale, geography, detection rules
and track interpolation.
"""

from datetime import date, datetime, timedelta

import pytest  # type: ignore
import pytz

from src.stormwatch.algorithms import (
    basin_code,
    bearing_degrees,
    classification,
    ease_in_out_cubic,
    favors_development,
    forecast_hurricane_risk,
    forward_speed_mph,
    haversine_km,
    interpolate_position,
    km_to_miles,
    meets_storm_criteria,
    normalize_basin,
    saffir_simpson_category,
    valid_coordinates,
)

KM_PER_DEGREE = 111.19492664


class TestSaffirSimpson:
    """Test cases for the Saffir-Simpson scale."""

    @pytest.mark.parametrize("wind,category", [
        (0, 0),
        (73.9, 0),
        (74, 1),
        (95.9, 1),
        (96, 2),
        (110.9, 2),
        (111, 3),
        (129.9, 3),
        (130, 4),
        (156.9, 4),
        (157, 5),
        (200, 5),
    ])
    def test_boundaries(self, wind, category):
        assert saffir_simpson_category(wind) == category

    def test_monotonic(self):
        """Test that the category never decreases as wind rises."""
        previous = 0
        for tenth in range(0, 2000):
            category = saffir_simpson_category(tenth / 10.0)
            assert category >= previous
            previous = category

    def test_classification(self):
        assert classification(130) == "Category 4 Hurricane"
        assert classification(50) == "Tropical Storm"
        assert classification(39) == "Tropical Storm"
        assert classification(30) == "Tropical Depression"


class TestGeo:
    """Test cases for distance, bearing and basins."""

    def test_haversine_along_meridian(self):
        assert haversine_km(25.0, -80.0, 26.0, -80.0) == pytest.approx(KM_PER_DEGREE, rel=1e-6)

    def test_haversine_zero_and_symmetric(self):
        assert haversine_km(25.0, -80.0, 25.0, -80.0) == 0.0
        assert haversine_km(25.0, -80.0, 30.0, -70.0) == pytest.approx(haversine_km(30.0, -70.0, 25.0, -80.0))

    def test_miami_distance(self):
        distance = haversine_km(25.7617, -80.1918, 25.0, -80.0)
        assert 80 < distance < 95

    def test_km_to_miles(self):
        assert km_to_miles(1.609344) == pytest.approx(1.0)

    @pytest.mark.parametrize("lat1,lng1,lat2,lng2,expected", [
        (0, 0, 1, 0, 0.0),
        (0, 0, 0, 1, 90.0),
        (0, 0, -1, 0, 180.0),
        (0, 0, 0, -1, 270.0),
    ])
    def test_bearing(self, lat1, lng1, lat2, lng2, expected):
        assert bearing_degrees(lat1, lng1, lat2, lng2) == pytest.approx(expected)

    @pytest.mark.parametrize("lat,lng,basin", [
        (25.0, -80.0, "ATL"),
        (15.0, -110.0, "EPAC"),
        (15.0, -150.0, "CPAC"),
        (15.0, 140.0, "WPAC"),
        (15.0, 88.0, "IO"),
        (-15.0, 140.0, "SH"),
        (60.0, 0.0, "ATL"),
    ])
    def test_basin_code(self, lat, lng, basin):
        assert basin_code(lat, lng) == basin

    def test_normalize_basin_labels(self):
        assert normalize_basin("ep", 25.0, -80.0) == "EPAC"
        assert normalize_basin("Atlantic", 15.0, -150.0) == "ATL"
        assert normalize_basin("unknown", 15.0, -150.0) == "CPAC"
        assert normalize_basin(None, 15.0, 140.0) == "WPAC"

    def test_valid_coordinates(self):
        assert valid_coordinates(90.0, -180.0)
        assert not valid_coordinates(91.0, 0.0)
        assert not valid_coordinates(0.0, 181.0)


class TestDetection:
    """Test cases for reading and forecast rules."""

    def test_hurricane_winds(self):
        assert meets_storm_criteria(80, 1010, 50)

    def test_deep_low(self):
        assert meets_storm_criteria(10, 975, 50)

    def test_humid_windy_low(self):
        assert meets_storm_criteria(45, 995, 85)
        assert meets_storm_criteria(30, 990, 90)

    def test_calm_conditions(self):
        assert not meets_storm_criteria(15, 1013, 70)

    def test_favors_development(self):
        assert favors_development(22, 1008, 80)
        assert favors_development(5, 998, 90)
        assert not favors_development(10, 1012, 60)

    def test_forecast_risk_in_season(self):
        assert forecast_hurricane_risk(date(2025, 9, 10), 30, 0.0)
        assert forecast_hurricane_risk(date(2025, 9, 10), 5, 2.5)
        assert not forecast_hurricane_risk(date(2025, 9, 10), 10, 0.5)

    def test_forecast_risk_out_of_season(self):
        assert not forecast_hurricane_risk(date(2025, 1, 10), 60, 5.0)


class TestInterpolation:
    """Test cases for presentation interpolation."""

    def test_easing_endpoints(self):
        assert ease_in_out_cubic(0.0) == 0.0
        assert ease_in_out_cubic(0.5) == pytest.approx(0.5)
        assert ease_in_out_cubic(1.0) == 1.0
        assert ease_in_out_cubic(1.5) == 1.0
        assert ease_in_out_cubic(-1.0) == 0.0

    def test_interpolate_position(self):
        start = {"lat": 20.0, "lng": -70.0, "wind_speed": 100.0}
        end = {"lat": 22.0, "lng": -70.0, "wind_speed": 120.0}

        middle = interpolate_position(start, end, 0.5)

        assert middle["lat"] == pytest.approx(21.0)
        assert middle["lng"] == pytest.approx(-70.0)
        assert middle["wind_speed"] == pytest.approx(110.0)
        assert middle["bearing"] == pytest.approx(0.0)

    def test_interpolate_endpoints(self):
        start = {"lat": 20.0, "lng": -70.0}
        end = {"lat": 22.0, "lng": -72.0}

        assert interpolate_position(start, end, 0.0)["lat"] == 20.0
        assert interpolate_position(start, end, 1.0)["lng"] == -72.0

    def test_forward_speed(self):
        t0 = datetime(2025, 9, 10, 12, 0, tzinfo=pytz.UTC)
        speed = forward_speed_mph(25.0, -80.0, t0, 26.0, -80.0, t0 + timedelta(hours=6))

        assert speed == pytest.approx(km_to_miles(KM_PER_DEGREE) / 6, rel=1e-6)
        assert forward_speed_mph(25.0, -80.0, t0, 26.0, -80.0, t0) == 0.0
