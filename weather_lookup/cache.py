import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .schemas import WeatherReading
from .validation import normalize_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: WeatherReading
    storedAt: float


class TTLCache:
    """TTL-backed store of formatted weather readings.

    Parameters
    ----------
    ttl_seconds : float
        Time-to-live in seconds. Entries older than this are considered expired.
    clock : Callable[[], float]
        Source of the current time in seconds. Defaults to `time.time`.

    Notes
    -----
    - Keys are normalized (trimmed, lowercased), so "Berlin" and " BERLIN " collide.
    - Expiration is lazy (on `get`); there is no background reaper.
    - No capacity bound: entries live for the process lifetime unless expired on access.
    """

    def __init__(self, ttl_seconds: float = 10 * 60, clock: Callable[[], float] = time.time):
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[WeatherReading]:
        """Return the cached reading for `key` if present and not expired.

        Parameters
        ----------
        key : str
            Location text; normalized before lookup.

        Returns
        -------
        Optional[WeatherReading]
            The stored reading, or `None` if the key is missing or the entry expired.

        Notes
        -----
        - Performs lazy eviction: if the entry is stale, it is removed and `None` is returned.
        """

        norm = normalize_key(key)
        entry = self._store.get(norm)
        if entry is None:
            logger.debug(f"Cache miss for {norm!r}")
            return None
        if self._clock() - entry.storedAt > self.ttl:
            self._store.pop(norm, None)
            logger.debug(f"Cache entry for {norm!r} expired")
            return None
        logger.debug(f"Cache hit for {norm!r}")
        return entry.value

    def put(self, key: str, value: WeatherReading) -> None:
        """Insert or replace the reading for `key`, timestamped for TTL accounting."""

        norm = normalize_key(key)
        self._store[norm] = CacheEntry(key=norm, value=value, storedAt=self._clock())
        logger.debug(f"Cached reading for {norm!r}")

    def clear(self) -> None:
        """Remove all entries from the cache.

        Useful for tests or to force a full refresh of cached data.
        """

        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
