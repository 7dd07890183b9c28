"""
Upstream access layer.

Provides the HTTP client, per-provider request queues and the response cache.
"""

from .client import APIClient
from .cache import ResponseCache
from .throttle import RequestQueue
from .exceptions import SourceUnavailableError, RateLimitedError, SourceNotConfiguredError
from . import helpers

__all__ = [
    "APIClient",
    "ResponseCache",
    "RequestQueue",
    "SourceUnavailableError",
    "RateLimitedError",
    "SourceNotConfiguredError",
    "helpers",
]
