"""
Response cache for upstream data.

One bounded TTL cache per data kind. Keys are built from the logical source
and either rounded coordinates or a fixed key such as 'active_hurricanes'.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, TYPE_CHECKING

from cachetools import TTLCache

from ..core import constants

if TYPE_CHECKING:
    from ..core.config import Config

CACHE_KINDS = ("current", "forecast", "alerts", "hurricanes", "potential", "location_key")


class ResponseCache:
    """Thread-safe TTL cache grouped by data kind."""

    def __init__(
        self,
        ttls: Optional[Dict[str, float]] = None,
        maxsize: int = constants.CACHE_MAX_ENTRIES,
        precision: int = constants.COORDINATE_PRECISION,
        timer: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize response cache.

        Args:
            ttls: Time-to-live in seconds per data kind
            maxsize: Maximum entries per data kind
            precision: Decimals kept when keying by coordinates
            timer: Clock used for expiry (injectable for tests)
            logger: Logger instance
        """
        self.precision = precision
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

        ttls = dict(ttls or {})
        defaults = {
            "current": constants.CACHE_TTL_CURRENT,
            "forecast": constants.CACHE_TTL_FORECAST,
            "alerts": constants.CACHE_TTL_ALERTS,
            "hurricanes": constants.CACHE_TTL_HURRICANES,
            "potential": constants.CACHE_TTL_POTENTIAL,
            "location_key": constants.CACHE_TTL_LOCATION_KEY,
        }
        self._caches: Dict[str, TTLCache] = {
            kind: TTLCache(maxsize=maxsize, ttl=ttls.get(kind, defaults[kind]), timer=timer)
            for kind in CACHE_KINDS
        }

    @classmethod
    def from_config(cls, config: "Config", logger: Optional[logging.Logger] = None) -> "ResponseCache":
        """Build a cache using TTLs and bounds from configuration."""
        return cls(
            ttls={kind: config.cache_ttl(kind) for kind in CACHE_KINDS},
            maxsize=config.cache_max_entries,
            precision=config.coordinate_precision,
            logger=logger
        )

    def make_key(
        self,
        source: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        key: Optional[str] = None
    ) -> Tuple[Hashable, ...]:
        """
        Build a cache key.

        Args:
            source: Logical source name
            lat: Latitude (rounded to the configured precision)
            lng: Longitude (rounded to the configured precision)
            key: Fixed key used instead of coordinates

        Returns:
            Hashable cache key
        """
        if key is not None:
            return (source, key)
        if lat is None or lng is None:
            raise ValueError("Either a fixed key or both coordinates are required")
        return (source, round(float(lat), self.precision), round(float(lng), self.precision))

    def _cache(self, kind: str) -> TTLCache:
        try:
            return self._caches[kind]
        except KeyError:
            raise ValueError(f"Unknown cache kind: {kind}")

    def get(self, kind: str, key: Hashable) -> Optional[Any]:
        """Get a fresh entry or None."""
        with self._lock:
            value = self._cache(kind).get(key)
        if value is not None:
            self.logger.debug(f"Cache hit: {kind} {key}")
        return value

    def set(self, kind: str, key: Hashable, value: Any) -> None:
        """Store an entry."""
        with self._lock:
            self._cache(kind)[key] = value

    def get_or_fetch(self, kind: str, key: Hashable, fetch: Callable[[], Any]) -> Any:
        """
        Serve a fresh entry, or call fetch and cache its result.

        Args:
            kind: Data kind
            key: Cache key
            fetch: Callable producing the value on a miss

        Returns:
            Cached or freshly fetched value
        """
        value = self.get(kind, key)
        if value is not None:
            return value
        value = fetch()
        if value is not None:
            self.set(kind, key, value)
        return value

    def size(self, kind: str) -> int:
        """Number of live entries for a data kind."""
        with self._lock:
            cache = self._cache(kind)
            cache.expire()
            return len(cache)

    def clear(self, kind: Optional[str] = None) -> None:
        """Drop all entries, or the entries of one data kind."""
        with self._lock:
            if kind is not None:
                self._cache(kind).clear()
                return
            for cache in self._caches.values():
                cache.clear()
