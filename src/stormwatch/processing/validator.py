"""
Data validation module.

Validates normalized readings and enforces track invariants on adapter output.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from ..algorithms.geo import valid_coordinates
from ..models import CurrentReading, HurricaneTrack, HurricanePosition


class TrackValidator:
    """Validate readings and hurricane tracks."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize validator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_reading(self, reading: CurrentReading) -> Tuple[bool, List[str]]:
        """
        Validate that a reading is within plausible ranges.

        Args:
            reading: Normalized current reading

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if not (0 <= reading.humidity <= 100):
            errors.append(f"Invalid humidity: {reading.humidity} (must be 0-100)")

        if reading.wind_speed < 0:
            errors.append(f"Invalid wind_speed: {reading.wind_speed} (must be >= 0)")

        if not (850 < reading.pressure < 1100):
            errors.append(
                f"Suspicious pressure: {reading.pressure} mb (expected 850-1100 mb)"
            )

        if not (-80 < reading.temperature < 140):
            errors.append(f"Suspicious temperature: {reading.temperature} °F")

        is_valid = len(errors) == 0
        return is_valid, errors

    def normalize_track(self, track: HurricaneTrack) -> Optional[HurricaneTrack]:
        """
        Enforce ordering and coordinate invariants on a track.

        Positions with invalid coordinates are dropped. Historical positions
        keep only fixes strictly before the current fix, forecast positions only
        points strictly after it, both sorted chronologically.

        Args:
            track: Track as produced by a source

        Returns:
            Normalized track, or None when the current position is invalid
        """
        current = track.current_position
        if not valid_coordinates(current.lat, current.lng):
            self.logger.warning(
                f"Dropping track {track.id}: invalid position ({current.lat}, {current.lng})"
            )
            return None

        historical = self._clean(track.historical_positions)
        forecast = self._clean(track.forecast_positions)

        kept_historical = [p for p in historical if p.timestamp < current.timestamp]
        kept_forecast = [p for p in forecast if p.timestamp > current.timestamp]

        dropped = (len(historical) - len(kept_historical)) + (len(forecast) - len(kept_forecast))
        if dropped:
            self.logger.debug(f"Track {track.id}: dropped {dropped} out-of-order positions")

        return replace(
            track,
            historical_positions=kept_historical,
            forecast_positions=kept_forecast
        )

    def normalize_tracks(self, tracks: List[HurricaneTrack]) -> List[HurricaneTrack]:
        """Normalize a list of tracks, dropping invalid ones."""
        normalized = []
        for track in tracks:
            result = self.normalize_track(track)
            if result is not None:
                normalized.append(result)
        return normalized

    @staticmethod
    def _clean(positions: List[HurricanePosition]) -> List[HurricanePosition]:
        valid = [p for p in positions if valid_coordinates(p.lat, p.lng)]
        return sorted(valid, key=lambda p: p.timestamp)
