"""
Tests for unit conversion and track validation.
"""

import unittest
from datetime import timedelta
from unittest.mock import Mock

import pytest  # type: ignore

from src.stormwatch.models import HurricanePosition
from src.stormwatch.processing import TrackValidator, UnitConverter
from tests.factories import make_reading, make_track


class TestUnitConverter:
    """Test cases for UnitConverter."""

    @pytest.fixture
    def converter(self):
        return UnitConverter(Mock())

    def test_wind(self, converter):
        assert converter.wind_to_mph(100, "kt") == pytest.approx(115.078)
        assert converter.wind_to_mph(100, "km/h") == pytest.approx(62.1371, rel=1e-4)
        assert converter.wind_to_mph(10, "m/s") == pytest.approx(22.3694, rel=1e-4)
        assert converter.wind_to_mph(50, "mph") == 50

    def test_unknown_wind_unit_logs(self, converter):
        assert converter.wind_to_mph(50, "furlongs") == 50
        converter.logger.warning.assert_called_once()

    def test_pressure(self, converter):
        assert converter.pressure_to_mb(29.92, "inHg") == pytest.approx(1013.21, rel=1e-4)
        assert converter.pressure_to_mb(101.3, "kPa") == pytest.approx(1013.0)
        assert converter.pressure_to_mb(1005, "hPa") == 1005

    def test_temperature(self, converter):
        assert converter.temperature_to_fahrenheit(100, "°C") == pytest.approx(212.0)
        assert converter.temperature_to_fahrenheit(80, "F") == 80

    def test_precipitation(self, converter):
        assert converter.mm_to_inches(25.4) == pytest.approx(1.0)


class TestTrackValidator(unittest.TestCase):
    """Test cases for TrackValidator."""

    def setUp(self):
        """Set up test fixtures."""
        self.validator = TrackValidator(logger=Mock())

    def test_valid_reading(self):
        is_valid, errors = self.validator.validate_reading(make_reading())
        self.assertTrue(is_valid)
        self.assertEqual(errors, [])

    def test_invalid_reading(self):
        reading = make_reading(humidity=120, wind=-1, pressure=500)
        is_valid, errors = self.validator.validate_reading(reading)
        self.assertFalse(is_valid)
        self.assertEqual(len(errors), 3)

    def test_invalid_current_position_drops_track(self):
        track = make_track(lat=95.0)
        self.assertIsNone(self.validator.normalize_track(track))

    def test_positions_are_ordered_around_current(self):
        """Test that history precedes and forecast follows the current fix."""
        track = make_track(forecast=[(27.0, -82.0, 24), (26.0, -81.0, 12), (24.0, -79.0, -6)])
        now = track.current_position.timestamp
        track.historical_positions = [
            HurricanePosition(lat=23.0, lng=-78.0, timestamp=now - timedelta(hours=6), wind_speed=110),
            HurricanePosition(lat=22.0, lng=-77.0, timestamp=now - timedelta(hours=12), wind_speed=100),
            HurricanePosition(lat=25.5, lng=-80.5, timestamp=now + timedelta(hours=3), wind_speed=130),
            HurricanePosition(lat=200.0, lng=-77.0, timestamp=now - timedelta(hours=18), wind_speed=90),
        ]

        normalized = self.validator.normalize_track(track)

        historical = [p.timestamp for p in normalized.historical_positions]
        forecast = [p.timestamp for p in normalized.forecast_positions]
        self.assertEqual(historical, sorted(historical))
        self.assertEqual(forecast, sorted(forecast))
        self.assertTrue(all(t < now for t in historical))
        self.assertTrue(all(t > now for t in forecast))
        self.assertEqual(len(normalized.historical_positions), 2)
        self.assertEqual(len(normalized.forecast_positions), 2)

    def test_normalize_does_not_mutate_input(self):
        track = make_track(forecast=[(26.0, -81.0, -6)])
        self.validator.normalize_track(track)
        self.assertEqual(len(track.forecast_positions), 1)

    def test_normalize_tracks_filters(self):
        tracks = [make_track(name="Good"), make_track(name="Bad", lng=-200.0)]
        result = self.validator.normalize_tracks(tracks)
        self.assertEqual([t.name for t in result], ["Good"])
