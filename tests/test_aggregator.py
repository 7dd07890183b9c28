"""
Tests for fallback aggregation across sources.
"""

import threading
from unittest.mock import Mock

from src.stormwatch.api import ResponseCache
from src.stormwatch.api.exceptions import SourceNotConfiguredError, SourceUnavailableError
from src.stormwatch.core import constants
from src.stormwatch.services import FallbackAggregator
from src.stormwatch.sources import (
    WeatherSource,
    ALERTS,
    CURRENT,
    FORECAST,
    HURRICANES,
    POTENTIAL,
)
from tests.factories import make_alert, make_forecast_day, make_reading, make_track


class StubSource(WeatherSource):
    """Source returning canned results and recording calls."""

    capabilities = frozenset({CURRENT, FORECAST, HURRICANES, POTENTIAL, ALERTS})

    def __init__(self, name, result=None, error=None):
        super().__init__(logger=Mock())
        self.name = name
        self.label = name.upper()
        self.result = result
        self.error = error
        self.calls = []

    def _answer(self, capability):
        self.calls.append(capability)
        if self.error is not None:
            raise self.error
        return self.result

    def fetch_current(self, lat, lng):
        return self._answer(CURRENT)

    def fetch_forecast(self, lat, lng):
        return self._answer(FORECAST)

    def fetch_hurricanes(self):
        return self._answer(HURRICANES)

    def fetch_potential_hurricanes(self):
        return self._answer(POTENTIAL)

    def fetch_alerts(self, lat, lng):
        return self._answer(ALERTS)


def build(chains, clock=None):
    cache = ResponseCache(timer=clock) if clock else ResponseCache()
    return FallbackAggregator(chains=chains, cache=cache, logger=Mock())


class TestFallbackOrder:
    """Test cases for priority order and fallback."""

    def test_first_success_wins(self):
        """Test that sources after the first success are never called."""
        a = StubSource("a", error=SourceUnavailableError("down"))
        b = StubSource("b", result=[make_track(name="Erin")])
        c = StubSource("c", result=[make_track(name="Other")])
        aggregator = build({HURRICANES: [a, b, c]})

        result = aggregator.get_hurricanes()

        assert result.source == "B"
        assert [t.name for t in result.items] == ["Erin"]
        assert a.calls == [HURRICANES]
        assert c.calls == []

    def test_empty_result_falls_through(self):
        a = StubSource("a", result=[])
        b = StubSource("b", result=[make_track(name="Erin")])
        aggregator = build({HURRICANES: [a, b]})

        assert aggregator.get_hurricanes().source == "B"

    def test_unconfigured_source_is_skipped(self):
        a = StubSource("a", error=SourceNotConfiguredError("no key"))
        b = StubSource("b", result=make_reading())
        aggregator = build({CURRENT: [a, b]})

        result = aggregator.get_current(25.0, -80.0)

        assert result.source == "B"
        assert len(result.items) == 1

    def test_unexpected_errors_are_skipped(self):
        a = StubSource("a", error=KeyError("bad payload"))
        b = StubSource("b", result=[make_forecast_day()])
        aggregator = build({FORECAST: [a, b]})

        assert aggregator.get_forecast(25.0, -80.0).source == "B"

    def test_total_failure_returns_sentinel(self):
        """Test that total failure yields the empty sentinel, never an exception."""
        a = StubSource("a", error=SourceUnavailableError("down"))
        b = StubSource("b", result=[])
        aggregator = build({HURRICANES: [a, b]})

        result = aggregator.get_hurricanes()

        assert result.items == []
        assert result.source == constants.NO_DATA_SOURCE
        assert result.is_empty

    def test_potential_sentinel(self):
        aggregator = build({POTENTIAL: [StubSource("a", result=[])]})

        assert aggregator.get_potential_hurricanes().source == constants.NO_POTENTIAL_STORMS_SOURCE

    def test_missing_chain(self):
        assert build({}).get_alerts(25.0, -80.0).is_empty

    def test_tracks_are_validated(self):
        bad = make_track(name="Bad", lat=123.0)
        a = StubSource("a", result=[bad])
        b = StubSource("b", result=[make_track(name="Good")])
        aggregator = build({HURRICANES: [a, b]})

        result = aggregator.get_hurricanes()

        assert [t.name for t in result.items] == ["Good"]


class TestCaching:
    """Test cases for cached aggregation."""

    def test_cached_within_ttl(self, clock):
        source = StubSource("a", result=[make_track()])
        aggregator = build({HURRICANES: [source]}, clock=clock)

        aggregator.get_hurricanes()
        clock.advance(constants.CACHE_TTL_HURRICANES - 1)
        aggregator.get_hurricanes()

        assert source.calls == [HURRICANES]

    def test_refetched_after_ttl(self, clock):
        source = StubSource("a", result=[make_track()])
        aggregator = build({HURRICANES: [source]}, clock=clock)

        aggregator.get_hurricanes()
        clock.advance(constants.CACHE_TTL_HURRICANES + 1)
        aggregator.get_hurricanes()

        assert source.calls == [HURRICANES, HURRICANES]

    def test_failures_are_not_cached(self):
        source = StubSource("a", error=SourceUnavailableError("down"))
        aggregator = build({HURRICANES: [source]})

        aggregator.get_hurricanes()
        aggregator.get_hurricanes()

        assert len(source.calls) == 2

    def test_nearby_coordinates_share_entry(self):
        source = StubSource("a", result=make_reading())
        aggregator = build({CURRENT: [source]})

        aggregator.get_current(25.76171, -80.19179)
        aggregator.get_current(25.761712, -80.191791)

        assert len(source.calls) == 1


class TestSnapshot:
    """Test cases for the concurrent snapshot."""

    def test_all_current_readings(self):
        a = StubSource("a", result=make_reading(wind=10, source="A"))
        b = StubSource("b", error=SourceUnavailableError("down"))
        c = StubSource("c", result=make_reading(wind=20, source="C"))
        aggregator = build({CURRENT: [a, b, c]})

        readings = aggregator.get_all_current(25.0, -80.0)

        assert [r.source for r in readings] == ["A", "C"]

    def test_implausible_readings_are_dropped(self):
        """Test that out-of-range readings never reach averaging or the cache."""
        broken = StubSource("broken", result=make_reading(humidity=140.0, pressure=12.0, source="Broken"))
        good = StubSource("good", result=make_reading(wind=20, source="Good"))
        aggregator = build({CURRENT: [broken, good]})

        assert [r.source for r in aggregator.get_all_current(25.0, -80.0)] == ["Good"]
        assert [r.source for r in aggregator.get_all_current(25.0, -80.0)] == ["Good"]
        assert broken.calls == [CURRENT, CURRENT]
        assert good.calls == [CURRENT]

    def test_snapshot_collects_parts(self):
        aggregator = build({
            CURRENT: [StubSource("cur", result=make_reading())],
            ALERTS: [StubSource("alerts", result=[make_alert()])],
            HURRICANES: [StubSource("nhc", result=[make_track()])],
            FORECAST: [StubSource("fc", result=[make_forecast_day()])],
        })

        snapshot = aggregator.fetch_snapshot(25.0, -80.0, timeout=5)

        assert len(snapshot.readings) == 1
        assert len(snapshot.alerts) == 1
        assert len(snapshot.hurricanes) == 1
        assert len(snapshot.forecast) == 1
        aggregator.close()

    def test_slow_part_times_out_empty(self):
        """Test that a part exceeding the timeout is left empty."""
        release = threading.Event()

        class SlowSource(StubSource):
            def fetch_hurricanes(self):
                release.wait(5)
                return [make_track()]

        aggregator = build({
            CURRENT: [StubSource("cur", result=make_reading())],
            HURRICANES: [SlowSource("slow")],
        })

        snapshot = aggregator.fetch_snapshot(25.0, -80.0, timeout=0.2)
        release.set()

        assert snapshot.hurricanes == []
        assert len(snapshot.readings) == 1
        aggregator.close()
