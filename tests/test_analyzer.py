"""
Tests for condition analysis: rule priority, hurricane proximity and
reading thresholds.
"""

from unittest.mock import Mock

import pytest  # type: ignore

from src.stormwatch.algorithms import haversine_km
from src.stormwatch.models import AlertCategory, ConditionType, DataSource, Severity
from src.stormwatch.processing import ConditionAnalyzer
from tests.factories import (
    REFERENCE_TIME,
    make_alert,
    make_forecast_day,
    make_reading,
    make_track,
)

KM_PER_DEGREE = 111.19492664
LOCATION = (25.0, -80.0)
MIAMI = (25.7617, -80.1918)


def track_at_distance(km, **kwargs):
    """Track due north of LOCATION at the given great-circle distance."""
    return make_track(lat=LOCATION[0] + km / KM_PER_DEGREE, lng=LOCATION[1], **kwargs)


class TestConditionAnalyzer:
    """Test cases for ConditionAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        return ConditionAnalyzer(logger=Mock())

    def analyze(self, analyzer, readings=(), alerts=(), tracks=(), forecast=(), location=LOCATION):
        return analyzer.analyze(
            current_readings=list(readings),
            active_alerts=list(alerts),
            hurricane_tracks=list(tracks),
            forecast=list(forecast),
            lat=location[0],
            lng=location[1],
            now=REFERENCE_TIME,
        )

    def test_nothing_notable(self, analyzer):
        assert self.analyze(analyzer, readings=[make_reading()]) is None
        assert self.analyze(analyzer) is None

    def test_severe_alert_beats_hurricane(self, analyzer):
        """Test that an official severe alert outranks a nearby hurricane."""
        alert = make_alert(alert_id="w1", severity=Severity.SEVERE, category=AlertCategory.FLOOD)

        condition = self.analyze(analyzer, alerts=[alert], tracks=[track_at_distance(100)])

        assert condition.id == "gov_w1"
        assert condition.type == ConditionType.FLOOD
        assert condition.probability == 100
        assert condition.confidence == 95
        assert condition.recommendation.startswith("OFFICIAL ALERT")

    def test_highest_alert_severity_wins(self, analyzer):
        alerts = [
            make_alert(alert_id="s1", severity=Severity.SEVERE),
            make_alert(alert_id="e1", severity=Severity.EXTREME, category=AlertCategory.HURRICANE),
        ]

        condition = self.analyze(analyzer, alerts=alerts)

        assert condition.id == "gov_e1"
        assert condition.severity == Severity.EXTREME
        assert condition.type == ConditionType.HURRICANE

    def test_tornado_alert_maps_to_severe(self, analyzer):
        alert = make_alert(alert_id="t1", severity=Severity.EXTREME, category=AlertCategory.TORNADO)

        assert self.analyze(analyzer, alerts=[alert]).type == ConditionType.SEVERE

    def test_expired_alert_ignored(self, analyzer):
        alert = make_alert(severity=Severity.EXTREME)
        alert.expires = REFERENCE_TIME.replace(hour=0)

        assert self.analyze(analyzer, alerts=[alert]) is None

    @pytest.mark.parametrize("km,expected_severity,prefix", [
        (499, Severity.EXTREME, "hurricane_test"),
        (501, Severity.SEVERE, "hurricane_watch_test"),
    ])
    def test_distance_thresholds(self, analyzer, km, expected_severity, prefix):
        condition = self.analyze(analyzer, tracks=[track_at_distance(km, name="Test")])

        assert condition.type == ConditionType.HURRICANE
        assert condition.severity == expected_severity
        assert condition.id.startswith(prefix)
        assert condition.distance == pytest.approx(km, abs=0.1)

    def test_beyond_watch_distance(self, analyzer):
        assert self.analyze(analyzer, tracks=[track_at_distance(1001)]) is None

    def test_thresholds_are_exclusive(self):
        """Test that a storm exactly on a threshold falls outside it."""
        storm = track_at_distance(500, name="Test")
        exact = haversine_km(LOCATION[0], LOCATION[1], storm.current_position.lat, storm.current_position.lng)

        at_danger = ConditionAnalyzer(danger_distance_km=exact, watch_distance_km=exact * 2, logger=Mock())
        at_watch = ConditionAnalyzer(danger_distance_km=exact / 2, watch_distance_km=exact, logger=Mock())

        assert self.analyze(at_danger, tracks=[storm]).severity == Severity.SEVERE
        assert self.analyze(at_watch, tracks=[storm]) is None

    def test_watch_values(self, analyzer):
        condition = self.analyze(analyzer, tracks=[track_at_distance(800, name="Test")])

        assert condition.title == "HURRICANE WATCH: Test"
        assert condition.probability == 75
        assert condition.confidence == 90
        assert condition.recommendation.startswith("PREPARE NOW")

    def test_nearest_track_is_used(self, analyzer):
        far = track_at_distance(900, name="Far")
        near = track_at_distance(300, name="Near")

        condition = self.analyze(analyzer, tracks=[far, near])

        assert condition.title == "HURRICANE ALERT: Near"

    def test_miami_end_to_end(self, analyzer):
        """Test a Category 4 storm just south of Miami."""
        storm = make_track(name="Erin", lat=25.0, lng=-80.0, wind=130.0)

        condition = self.analyze(analyzer, tracks=[storm], location=MIAMI)

        assert storm.category == 4
        assert condition.severity == Severity.EXTREME
        assert 80 <= condition.distance <= 95
        assert condition.title == "HURRICANE ALERT: Erin"
        assert "Category 4 Hurricane" in condition.description
        assert condition.probability == 100
        assert condition.confidence == 100

    def test_eta_from_forecast(self, analyzer):
        """Test that ETA follows the closing speed toward the location."""
        storm = track_at_distance(400, forecast=[(LOCATION[0] + 200 / KM_PER_DEGREE, LOCATION[1], 10)])

        condition = self.analyze(analyzer, tracks=[storm])

        assert condition.eta == pytest.approx(20.0, abs=0.2)
        assert "Estimated arrival" in condition.description

    def test_eta_none_when_moving_away(self, analyzer):
        storm = track_at_distance(400, forecast=[(LOCATION[0] + 600 / KM_PER_DEGREE, LOCATION[1], 10)])

        assert self.analyze(analyzer, tracks=[storm]).eta is None

    def test_severe_wind(self, analyzer):
        readings = [make_reading(wind=45, confidence=80), make_reading(wind=41, confidence=90)]

        condition = self.analyze(analyzer, readings=readings)

        assert condition.type == ConditionType.SEVERE_STORM
        assert condition.severity == Severity.SEVERE
        assert condition.probability == 85
        assert condition.confidence == 85
        assert condition.id == "conditions_severe_storm_25.00_-80.00"

    def test_readings_are_averaged(self, analyzer):
        """Test that one windy source does not dominate the mean."""
        readings = [make_reading(wind=50), make_reading(wind=10)]

        condition = self.analyze(analyzer, readings=readings)

        assert condition.type == ConditionType.STORM

    def test_storm_text(self, analyzer):
        condition = self.analyze(analyzer, readings=[make_reading(description="Thunderstorm")])

        assert condition.type == ConditionType.STORM
        assert condition.severity == Severity.MODERATE

    @pytest.mark.parametrize("humidity,severity", [(85, Severity.MODERATE), (60, Severity.MINOR)])
    def test_rain_text(self, analyzer, humidity, severity):
        condition = self.analyze(analyzer, readings=[make_reading(description="light rain", humidity=humidity)])

        assert condition.type == ConditionType.RAIN
        assert condition.severity == severity
        assert condition.probability == 70

    def test_humid_and_breezy(self, analyzer):
        condition = self.analyze(analyzer, readings=[make_reading(humidity=90, wind=18)])

        assert condition.type == ConditionType.RAIN
        assert condition.probability == 60

    def test_forecast_precipitation(self, analyzer):
        forecast = [make_forecast_day(precipitation=1.0), make_forecast_day(precipitation=0.2, offset_days=1)]

        condition = self.analyze(analyzer, forecast=forecast)

        assert condition.type == ConditionType.RAIN
        assert condition.severity == Severity.MINOR
        assert condition.probability == 50
        assert condition.confidence == 70

    def test_hurricane_beats_readings(self, analyzer):
        condition = self.analyze(analyzer, readings=[make_reading(wind=60)], tracks=[track_at_distance(200)])

        assert condition.type == ConditionType.HURRICANE

    def test_moderate_alert_is_last(self, analyzer):
        alert = make_alert(alert_id="m1", severity=Severity.MODERATE)

        assert self.analyze(analyzer, alerts=[alert], readings=[make_reading(wind=30)]).type == ConditionType.STORM

        condition = self.analyze(analyzer, alerts=[alert])
        assert condition.id == "nws_m1"
        assert condition.severity == Severity.MODERATE
        assert condition.confidence == 90

    def test_mock_readings_tag_condition(self, analyzer):
        reading = make_reading(wind=45)
        reading.data_source = DataSource.MOCK

        assert self.analyze(analyzer, readings=[reading]).data_source == DataSource.MOCK

    def test_stable_ids(self, analyzer):
        first = self.analyze(analyzer, tracks=[track_at_distance(300)])
        second = self.analyze(analyzer, tracks=[track_at_distance(300)])

        assert first.id == second.id
