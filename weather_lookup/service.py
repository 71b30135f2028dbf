import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

import httpx
from pydantic import ValidationError

from .cache import TTLCache
from .errors import ErrorKind, WeatherLookupError
from .formatters import format_reading
from .http import fetch_with_timeout
from .rate_limiter import RateLimiter
from .schemas import ComparisonResult, Coordinate, ErrorDetail, LookupResult, WeatherReading
from .settings import Settings
from .settings import settings as default_settings
from .validation import validate_location

logger = logging.getLogger(__name__)

CURRENT_FIELDS = "temperature_2m,weather_code,wind_speed_10m"


class WeatherService:
    """Async current-weather lookup over Open-Meteo geocoding and forecast APIs.

    Parameters
    ----------
    settings : Optional[Settings]
        Runtime configuration. Defaults to the module-level `settings`.
    cache : Optional[TTLCache]
        Store for formatted readings. A fresh one is created when omitted.
    rate_limiter : Optional[RateLimiter]
        Spacing throttle shared by all lookups of this service.
    transport : Optional[httpx.AsyncBaseTransport]
        Transport for outbound requests; tests pass `httpx.MockTransport`.

    Notes
    -----
    - Opens a new `httpx.AsyncClient` per lookup; geocoding and the forecast
      call share it.
    - Cache and limiter are owned by the instance, so independent services do
      not interfere with each other.
    - No retries: a failed lookup raises immediately.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[TTLCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or default_settings
        self.cache = cache if cache is not None else TTLCache(self.settings.cache_ttl_weather)
        self.rate_limiter = (
            rate_limiter if rate_limiter is not None else RateLimiter(self.settings.min_request_interval)
        )
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.settings.request_timeout)

    async def _get_json(
        self, client: httpx.AsyncClient, url: str, params: Dict[str, Any], service: str
    ) -> Any:
        """Fetch `url` and return parsed JSON, mapping failures to typed errors.

        Parameters
        ----------
        client : httpx.AsyncClient
            Client for the current lookup.
        url : str
            Endpoint URL.
        params : Dict[str, Any]
            Query parameters.
        service : str
            Service name used in error messages ("geocoding" or "weather").

        Raises
        ------
        WeatherLookupError
            `timeout` past the deadline, `network` for transport failures, `api`
            for non-2xx responses and `dataFormat` for undecodable bodies.
        """

        try:
            response = await fetch_with_timeout(client, url, params, self.settings.request_timeout)
        except httpx.RequestError as exc:
            raise WeatherLookupError(f"Failed to connect to {service} service", ErrorKind.NETWORK) from exc

        if not response.is_success:
            raise WeatherLookupError(
                f"{service.capitalize()} error: {_error_reason(response)}",
                ErrorKind.API,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise WeatherLookupError(
                f"Received invalid {service} data format from the API", ErrorKind.DATA_FORMAT
            ) from exc

    async def geocode(self, client: httpx.AsyncClient, location: str) -> Coordinate:
        """Resolve a validated location name to coordinates (first match only)."""

        params = {"name": location, "count": 1, "language": "en", "format": "json"}
        data = await self._get_json(client, self.settings.geocoding_url, params, "geocoding")
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            raise WeatherLookupError(f'City "{location}" not found', ErrorKind.NOT_FOUND)
        try:
            first = results[0]
            return Coordinate(latitude=first["latitude"], longitude=first["longitude"])
        except (KeyError, TypeError, ValidationError) as exc:
            raise WeatherLookupError(
                "Received invalid geocoding data format from the API", ErrorKind.DATA_FORMAT
            ) from exc

    async def fetch_current(self, client: httpx.AsyncClient, coordinate: Coordinate) -> Dict[str, Any]:
        """Fetch the raw current-conditions payload for `coordinate`.

        Raises
        ------
        WeatherLookupError
            `dataFormat` when the payload lacks a `current` object.
        """

        params = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "current": CURRENT_FIELDS,
            "timezone": "auto",
        }
        data = await self._get_json(client, self.settings.forecast_url, params, "weather")
        if not isinstance(data, dict) or not isinstance(data.get("current"), dict):
            raise WeatherLookupError(
                "Received invalid weather data format from the API", ErrorKind.DATA_FORMAT
            )
        return data

    async def lookup(self, raw_location: Any) -> WeatherReading:
        """Return current conditions for a location.

        Steps: validate, serve from cache if fresh, otherwise wait for a
        rate-limit slot, geocode, fetch current conditions, format and cache.

        Parameters
        ----------
        raw_location : Any
            Location as supplied by the caller.

        Returns
        -------
        WeatherReading
            Formatted reading; `city` is the trimmed input text.

        Raises
        ------
        WeatherLookupError
            Always typed. Anything else is wrapped with kind `unexpected`.
        """

        try:
            location = validate_location(raw_location, self.settings.allow_digits)

            cached = self.cache.get(location)
            if cached is not None:
                return cached

            await self.rate_limiter.await_slot()
            async with self._client() as client:
                coordinate = await self.geocode(client, location)
                payload = await self.fetch_current(client, coordinate)

            reading = format_reading(payload, location, self.settings.unknown_code_format)
            self.cache.put(location, reading)
            logger.info(f"Fetched weather for {location!r}: {reading.temperature}{reading.temperatureUnit}")
            return reading
        except WeatherLookupError as exc:
            logger.warning(f"Weather lookup for {raw_location!r} failed ({exc.kind.value}): {exc.message}")
            raise
        except Exception as exc:
            logger.exception(f"Unexpected error during weather lookup for {raw_location!r}")
            raise WeatherLookupError(
                "An unexpected error occurred while fetching weather data", ErrorKind.UNEXPECTED
            ) from exc

    async def lookup_result(self, raw_location: Any) -> LookupResult:
        """Like `lookup`, but returns the error instead of raising it."""

        try:
            return LookupResult(reading=await self.lookup(raw_location))
        except WeatherLookupError as exc:
            return LookupResult(error=ErrorDetail.from_error(exc))

    async def compare_all(self, locations: Optional[Sequence[Any]]) -> ComparisonResult:
        """Look up several locations concurrently.

        Parameters
        ----------
        locations : Optional[Sequence[Any]]
            Location queries. `None` and blank entries are skipped.

        Returns
        -------
        ComparisonResult
            Readings and errors keyed by input index. A failure at one index
            never affects the others.
        """

        comparison = ComparisonResult()
        if not locations:
            return comparison

        pending = [
            (index, location)
            for index, location in enumerate(locations)
            if location is not None and not (isinstance(location, str) and not location.strip())
        ]
        outcomes = await asyncio.gather(
            *(self.lookup(location) for _, location in pending), return_exceptions=True
        )
        for (index, _), outcome in zip(pending, outcomes):
            if isinstance(outcome, WeatherLookupError):
                comparison.errors[index] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                comparison.results[index] = outcome
        return comparison


def _error_reason(response: httpx.Response) -> str:
    """Prefer the provider's `reason` field, falling back to the status text."""

    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    return response.reason_phrase or f"HTTP {response.status_code}"
