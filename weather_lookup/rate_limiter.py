import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Global minimum-spacing throttle for outbound lookups.

    Every caller of one instance shares a single "last request" instant, so
    concurrent lookups for different cities are still spaced at least
    `min_interval` seconds apart in aggregate.

    Parameters
    ----------
    min_interval : float
        Minimum number of seconds between two granted slots.
    clock : Callable[[], float]
        Monotonic time source. Defaults to `time.monotonic`.
    sleep : Callable[[float], Awaitable[None]]
        Coroutine used to wait. Defaults to `asyncio.sleep`.

    Notes
    -----
    - The read-sleep-write sequence runs under an `asyncio.Lock`, so concurrent
      callers queue up and each gets its own slot. Spacing is strict rather
      than best-effort.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_request_at(self) -> Optional[float]:
        return self._last_request_at

    async def await_slot(self) -> None:
        """Wait until a request may be issued, then record it."""

        async with self._lock:
            if self._last_request_at is not None:
                elapsed = self._clock() - self._last_request_at
                if elapsed < self.min_interval:
                    delay = self.min_interval - elapsed
                    logger.debug(f"Rate limit: waiting {delay:.3f}s before next request")
                    await self._sleep(delay)
            self._last_request_at = self._clock()
