"""
Fallback aggregation across weather sources.

Each capability has a fixed priority list of sources. Sources are tried one at
a time in order; the first non-empty result wins, failures are logged and
skipped, and when every source fails or has nothing the empty sentinel is
returned. Nothing here raises to the caller.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, TYPE_CHECKING

from ..api.exceptions import SourceNotConfiguredError
from ..core import constants, LoggerContext
from ..models import AggregateResult, CurrentReading, ForecastDay, HurricaneTrack, WeatherAlert
from ..processing.validator import TrackValidator
from ..sources.base import CURRENT, FORECAST, HURRICANES, POTENTIAL, ALERTS

if TYPE_CHECKING:
    from ..api import ResponseCache
    from ..sources import WeatherSource


@dataclass
class WeatherSnapshot:
    """Everything the analyzer needs for one location."""

    readings: List[CurrentReading] = field(default_factory=list)
    alerts: List[WeatherAlert] = field(default_factory=list)
    hurricanes: List[HurricaneTrack] = field(default_factory=list)
    forecast: List[ForecastDay] = field(default_factory=list)


class FallbackAggregator:
    """Query sources in priority order per capability."""

    def __init__(
        self,
        chains: Dict[str, List["WeatherSource"]],
        cache: "ResponseCache",
        validator: Optional[TrackValidator] = None,
        max_workers: int = 4,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize aggregator.

        Args:
            chains: Sources per capability, highest priority first
            cache: Shared response cache
            validator: Validator for readings and storm tracks
            max_workers: Threads used for snapshot fan-out
            logger: Logger instance
        """
        self.chains = chains
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.validator = validator or TrackValidator(self.logger)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="snapshot")

    def _run_chain(
        self,
        capability: str,
        kind: str,
        cache_key: Hashable,
        call: Callable[["WeatherSource"], Any],
        empty_source: str = constants.NO_DATA_SOURCE
    ) -> AggregateResult:
        cached = self.cache.get(kind, cache_key)
        if cached is not None:
            return cached

        for source in self.chains.get(capability, []):
            try:
                result = call(source)
            except SourceNotConfiguredError as e:
                self.logger.debug(f"Skipping {source.label} for {capability}: {e}")
                continue
            except Exception as e:
                self.logger.warning(f"{source.label} failed for {capability}: {e}", exc_info=True)
                continue

            items = result if isinstance(result, list) else ([result] if result is not None else [])
            if capability in (HURRICANES, POTENTIAL):
                items = self.validator.normalize_tracks(items)

            if not items:
                self.logger.info(f"{source.label} returned no {capability}, trying next source")
                continue

            aggregate = AggregateResult(
                items=items,
                source=source.label,
                data_source=source.data_source
            )
            self.cache.set(kind, cache_key, aggregate)
            self.logger.info(f"{capability}: {len(items)} item(s) from {source.label}")
            return aggregate

        self.logger.warning(f"No source provided {capability}")
        return AggregateResult.empty(empty_source)

    def get_current(self, lat: float, lng: float) -> AggregateResult:
        """Current reading from the first source that answers."""
        return self._run_chain(
            CURRENT, "current", self.cache.make_key(CURRENT, lat, lng),
            lambda source: source.fetch_current(lat, lng)
        )

    def get_forecast(self, lat: float, lng: float) -> AggregateResult:
        """Daily forecast from the first source that answers."""
        return self._run_chain(
            FORECAST, "forecast", self.cache.make_key(FORECAST, lat, lng),
            lambda source: source.fetch_forecast(lat, lng)
        )

    def get_hurricanes(self) -> AggregateResult:
        """Active hurricanes from the first source that reports any."""
        return self._run_chain(
            HURRICANES, "hurricanes",
            self.cache.make_key(HURRICANES, key=constants.ACTIVE_HURRICANES_KEY),
            lambda source: source.fetch_hurricanes()
        )

    def get_potential_hurricanes(self) -> AggregateResult:
        """Potential tropical development from the first source that reports any."""
        return self._run_chain(
            POTENTIAL, "potential",
            self.cache.make_key(POTENTIAL, key=constants.POTENTIAL_HURRICANES_KEY),
            lambda source: source.fetch_potential_hurricanes(),
            empty_source=constants.NO_POTENTIAL_STORMS_SOURCE
        )

    def get_alerts(self, lat: float, lng: float) -> AggregateResult:
        """Official alerts from the first source that reports any."""
        return self._run_chain(
            ALERTS, "alerts", self.cache.make_key(ALERTS, lat, lng),
            lambda source: source.fetch_alerts(lat, lng)
        )

    def get_all_current(self, lat: float, lng: float) -> List[CurrentReading]:
        """
        Current readings from every source that answers.

        Used for averaging in the analyzer. Each source is cached separately.
        Readings outside plausible ranges are logged and dropped.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            Readings, possibly empty
        """
        readings = []
        for source in self.chains.get(CURRENT, []):
            cache_key = self.cache.make_key(source.name, lat, lng)
            cached = self.cache.get("current", cache_key)
            if cached is not None:
                readings.append(cached)
                continue
            try:
                reading = source.fetch_current(lat, lng)
            except SourceNotConfiguredError as e:
                self.logger.debug(f"Skipping {source.label}: {e}")
                continue
            except Exception as e:
                self.logger.warning(f"{source.label} current reading failed: {e}")
                continue

            is_valid, errors = self.validator.validate_reading(reading)
            if not is_valid:
                self.logger.warning(f"Dropping implausible reading from {source.label}: {'; '.join(errors)}")
                continue
            self.cache.set("current", cache_key, reading)
            readings.append(reading)
        return readings

    def fetch_snapshot(
        self,
        lat: float,
        lng: float,
        timeout: float = constants.SNAPSHOT_TIMEOUT
    ) -> WeatherSnapshot:
        """
        Fetch readings, alerts, hurricanes and forecast concurrently.

        Waits for all four within the timeout. Parts that fail or time out are
        left empty.

        Args:
            lat: Latitude
            lng: Longitude
            timeout: Seconds to wait for all parts

        Returns:
            WeatherSnapshot
        """
        with LoggerContext(self.logger, f"snapshot for ({lat:.4f}, {lng:.4f})"):
            futures = {
                "readings": self._executor.submit(self.get_all_current, lat, lng),
                "alerts": self._executor.submit(lambda: self.get_alerts(lat, lng).items),
                "hurricanes": self._executor.submit(lambda: self.get_hurricanes().items),
                "forecast": self._executor.submit(lambda: self.get_forecast(lat, lng).items),
            }
            done, _ = wait(list(futures.values()), timeout=timeout)

            parts: Dict[str, List[Any]] = {}
            for part, future in futures.items():
                if future not in done:
                    self.logger.warning(f"Snapshot part '{part}' timed out after {timeout:.0f}s")
                    future.cancel()
                    parts[part] = []
                elif future.exception() is not None:
                    self.logger.error(f"Snapshot part '{part}' failed: {future.exception()}")
                    parts[part] = []
                else:
                    parts[part] = future.result()

            return WeatherSnapshot(**parts)

    def close(self) -> None:
        """Release snapshot worker threads."""
        self._executor.shutdown(wait=False)
