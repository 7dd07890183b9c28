"""
Exceptions raised by the upstream access layer.
"""

from typing import Optional


class SourceUnavailableError(RuntimeError):
    """An upstream source could not deliver usable data."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class RateLimitedError(SourceUnavailableError):
    """An upstream source answered HTTP 429."""

    def __init__(self, message: str, source: Optional[str] = None, retry_after: Optional[float] = None):
        super().__init__(message, source)
        self.retry_after = retry_after


class SourceNotConfiguredError(SourceUnavailableError):
    """A source requires an API key that is not configured."""
