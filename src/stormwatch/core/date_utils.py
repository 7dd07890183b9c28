"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling.
Every timestamp handled by the application is a UTC-aware datetime.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import pytz


class DateUtils:
    """Utilities for date and timezone handling."""

    @staticmethod
    def now() -> datetime:
        """Get the current time as a UTC-aware datetime."""
        return datetime.now(pytz.UTC)

    @staticmethod
    def to_utc(dt: datetime) -> datetime:
        """
        Convert datetime to UTC.

        Args:
            dt: Datetime (naive datetimes are assumed to be UTC)

        Returns:
            UTC-aware datetime
        """
        if dt.tzinfo is None:
            return pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC)

    @staticmethod
    def to_iso(dt: datetime) -> str:
        """
        Convert datetime to ISO 8601 format in UTC.

        Args:
            dt: Datetime to convert

        Returns:
            ISO format string (e.g., '2025-09-10T12:00:00+00:00')
        """
        return DateUtils.to_utc(dt).isoformat()

    @staticmethod
    def parse(value: Any, default: Optional[datetime] = None) -> Optional[datetime]:
        """
        Parse an upstream timestamp.

        Accepts ISO 8601 strings (with 'Z' or offset), epoch seconds and
        datetimes. Unparseable input returns the default.

        Args:
            value: Raw timestamp
            default: Value returned when parsing fails

        Returns:
            UTC-aware datetime or default
        """
        if value is None or value == "":
            return default
        if isinstance(value, datetime):
            return DateUtils.to_utc(value)
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, pytz.UTC)
        try:
            text = str(value).strip().replace("Z", "+00:00")
            return DateUtils.to_utc(datetime.fromisoformat(text))
        except ValueError:
            return default

    @staticmethod
    def add_hours(dt: datetime, hours: float) -> datetime:
        """Shift a datetime by a number of hours."""
        return dt + timedelta(hours=hours)
