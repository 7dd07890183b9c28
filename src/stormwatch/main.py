"""
Main entry point for the storm monitoring system.

Builds every component explicitly and exposes a small command line interface.
"""

import json
import logging
import sys
import time
from typing import Any, Dict, Optional

from .core import Config, setup_logger, component_logger, LoggerContext, constants
from .api import APIClient, RequestQueue, ResponseCache
from .models import AggregateResult, WeatherCondition
from .processing import ConditionAnalyzer, TrackValidator
from .processing.recommendations import ActionRecommendation, recommend_action
from .sources import (
    CURRENT,
    FORECAST,
    HURRICANES,
    POTENTIAL,
    ALERTS,
    NHCRssSource,
    NHCKmlSource,
    NHCOutlookSource,
    NOAADiscussionSource,
    NWSAlertsSource,
    OpenWeatherSource,
    AccuWeatherSource,
    XWeatherSource,
    MockWeatherSource,
)
from .services import (
    FallbackAggregator,
    JsonFileStore,
    NotificationDecider,
    PlatformNotifier,
    SettingsRepository,
    WeatherMonitor,
)


class StormWatchApp:
    """Composition root for the storm monitoring system."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        # Load configuration
        self.config = Config(config_file)

        # Setup logger
        self.logger = setup_logger()
        self.logger.info("=" * 60)
        self.logger.info("StormWatch Weather Monitoring")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.clients: Dict[str, APIClient] = {}
        self.queues: Dict[str, RequestQueue] = {}
        self.initialize_components()

    def _log(self, component: str) -> logging.Logger:
        return component_logger(component, self.logger)

    def _client(self, provider: str, base_url: str, headers: Optional[Dict[str, str]] = None) -> APIClient:
        queue = RequestQueue(
            name=provider,
            delay=self.config.request_delay,
            cooldown=self.config.rate_limit_cooldown,
            logger=self._log(f"queue.{provider}")
        )
        client = APIClient(
            base_url=base_url,
            timeout=self.config.api_timeout,
            max_retries=self.config.api_max_retries,
            headers=headers,
            request_queue=queue,
            logger=self._log(f"client.{provider}")
        )
        self.queues[provider] = queue
        self.clients[provider] = client
        return client

    def initialize_components(self) -> None:
        """Initialize all application components."""
        self.logger.info("Initializing components...")
        user_agent = {"User-Agent": self.config.user_agent}

        self.cache = ResponseCache.from_config(self.config, logger=self._log("cache"))

        nhc = self._client("nhc", "https://www.nhc.noaa.gov", user_agent)
        nws = self._client("nws", constants.NWS_API_URL, user_agent)
        openweather = self._client("openweather", constants.OPENWEATHER_API_URL)
        accuweather = self._client("accuweather", constants.ACCUWEATHER_API_URL)
        xweather = self._client("xweather", constants.XWEATHER_API_URL)

        watch_points = self.config.watch_points
        self.openweather = OpenWeatherSource(
            openweather, self.config.api_key("openweather"), watch_points, logger=self._log("sources.openweather")
        )
        self.accuweather = AccuWeatherSource(
            accuweather, self.config.api_key("accuweather"), self.cache, watch_points,
            logger=self._log("sources.accuweather")
        )
        self.xweather = XWeatherSource(
            xweather, self.config.api_key("xweather"), watch_points, logger=self._log("sources.xweather")
        )
        self.nhc_rss = NHCRssSource(nhc, logger=self._log("sources.nhc_rss"))
        self.nhc_kml = NHCKmlSource(nhc, logger=self._log("sources.nhc_kml"))
        self.nhc_outlook = NHCOutlookSource(nhc, logger=self._log("sources.nhc_outlook"))
        self.noaa_discussion = NOAADiscussionSource(nhc, logger=self._log("sources.noaa_discussion"))
        self.nws = NWSAlertsSource(nws, logger=self._log("sources.nws"))
        self.mock = MockWeatherSource(logger=self._log("sources.mock"))

        chains = {
            CURRENT: [self.openweather, self.accuweather, self.xweather],
            FORECAST: [self.openweather, self.accuweather, self.xweather],
            HURRICANES: [self.nhc_rss, self.openweather, self.accuweather, self.nhc_kml],
            POTENTIAL: [self.nhc_outlook, self.xweather, self.noaa_discussion],
            ALERTS: [self.nws],
        }
        self.aggregator = FallbackAggregator(
            chains=chains,
            cache=self.cache,
            validator=TrackValidator(self._log("validator")),
            logger=self._log("aggregator")
        )
        self.analyzer = ConditionAnalyzer(
            danger_distance_km=self.config.danger_distance_km,
            watch_distance_km=self.config.watch_distance_km,
            logger=self._log("analyzer")
        )

        self.settings_repository = SettingsRepository(
            JsonFileStore(self.config.settings_file, logger=self._log("settings")),
            logger=self._log("settings")
        )
        self.notifier = PlatformNotifier(logger=self._log("notifier"))
        self.decider = NotificationDecider(
            notifier=self.notifier,
            same_alert_cooldown=self.config.same_alert_cooldown,
            min_spacing=self.config.min_notification_spacing,
            cache_size=self.config.alert_cache_size,
            dismissed_ids=self.settings_repository.dismissed_ids(),
            logger=self._log("decision")
        )
        self.monitor = WeatherMonitor(
            aggregator=self.aggregator,
            analyzer=self.analyzer,
            decider=self.decider,
            settings_repository=self.settings_repository,
            mock_source=self.mock,
            snapshot_timeout=self.config.snapshot_timeout,
            logger=self._log("monitor")
        )

        self.logger.info("All components initialized successfully")

    def current_condition(self, lat: float, lng: float) -> Optional[WeatherCondition]:
        """Analyze conditions for a location once, without notification rules."""
        with LoggerContext(self.logger, "condition analysis"):
            snapshot = self.aggregator.fetch_snapshot(lat, lng, timeout=self.config.snapshot_timeout)
            return self.analyzer.analyze_snapshot(snapshot, lat, lng)

    def recommendation(self, lat: float, lng: float) -> ActionRecommendation:
        return recommend_action(self.current_condition(lat, lng), lat, lng)

    def hurricanes(self) -> AggregateResult:
        return self.aggregator.get_hurricanes()

    def potential_hurricanes(self) -> AggregateResult:
        return self.aggregator.get_potential_hurricanes()

    def forecast(self, lat: float, lng: float) -> AggregateResult:
        return self.aggregator.get_forecast(lat, lng)

    def close(self) -> None:
        """Stop monitoring and release network resources."""
        self.monitor.stop_monitoring()
        self.aggregator.close()
        for queue in self.queues.values():
            queue.close()
        for client in self.clients.values():
            client.close()


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="StormWatch weather and hurricane monitoring"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude of the location")
    parser.add_argument("--lng", type=float, default=None, help="Longitude of the location")
    parser.add_argument("--hurricanes", action="store_true", help="List active hurricanes")
    parser.add_argument("--potential", action="store_true", help="List potential tropical development")
    parser.add_argument("--forecast", action="store_true", help="Show the daily forecast")
    parser.add_argument("--monitor", action="store_true", help="Monitor the location until interrupted")
    parser.add_argument("--test-mode", action="store_true", help="Monitor with generated test conditions")

    args = parser.parse_args()

    needs_location = args.forecast or args.monitor or not (args.hurricanes or args.potential)
    if needs_location and (args.lat is None or args.lng is None):
        print("--lat and --lng are required")
        sys.exit(1)

    try:
        app = StormWatchApp(config_file=args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    try:
        if args.hurricanes:
            _print_json(app.hurricanes().to_dict())
        if args.potential:
            _print_json(app.potential_hurricanes().to_dict())
        if args.forecast:
            _print_json(app.forecast(args.lat, args.lng).to_dict())

        if args.monitor:
            if args.test_mode:
                app.monitor.enable_test_mode()
            app.monitor.start_monitoring(args.lat, args.lng, lambda c: _print_json(c.to_dict()))
            try:
                while True:
                    time.sleep(1)
            except KeyboardInterrupt:
                pass
        elif needs_location and not args.forecast:
            condition = app.current_condition(args.lat, args.lng)
            _print_json({
                "condition": condition.to_dict() if condition else None,
                "recommendation": recommend_action(condition, args.lat, args.lng).to_dict(),
            })
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)
    finally:
        app.close()


if __name__ == "__main__":
    main()
