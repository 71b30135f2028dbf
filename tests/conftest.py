"""
Shared fixtures for weather lookup tests.

Provider traffic never leaves the process: `FakeOpenMeteo` is plugged into
`httpx.MockTransport` and answers both the geocoding and forecast endpoints.
"""

import asyncio
from typing import Any, Dict, List

import httpx
import pytest

from weather_lookup.service import WeatherService
from weather_lookup.settings import Settings

GEOCODING_HOST = "geocoding-api.open-meteo.com"


def weather_payload(temperature=22.5, code=1, wind=4.2) -> Dict[str, Any]:
    return {
        "latitude": 51.5,
        "longitude": -0.12,
        "timezone": "Europe/London",
        "current": {
            "time": "2026-10-17T12:00",
            "temperature_2m": temperature,
            "weather_code": code,
            "wind_speed_10m": wind,
        },
        "current_units": {"temperature_2m": "°C", "weather_code": "wmo code", "wind_speed_10m": "km/h"},
    }


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeOpenMeteo:
    """Scripted stand-in for the Open-Meteo geocoding and forecast APIs.

    `places` maps a lowercased name to its geocoding results; unknown names get
    an empty result set. `geocoding_outcome` / `weather_outcome` override the
    response for every call: an `httpx.Response`, an exception to raise, or a
    JSON-serializable body.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.places: Dict[str, List[Dict[str, Any]]] = {
            "london": [{"name": "London", "latitude": 51.5, "longitude": -0.12, "country": "United Kingdom"}],
            "berlin": [{"name": "Berlin", "latitude": 52.52, "longitude": 13.41, "country": "Germany"}],
            "new york": [{"name": "New York", "latitude": 40.7128, "longitude": -74.006, "country": "United States"}],
        }
        self.geocoding_outcome: Any = None
        self.weather_outcome: Any = weather_payload()
        self.delay: float = 0.0

    @property
    def geocoding_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == GEOCODING_HOST]

    @property
    def weather_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host != GEOCODING_HOST]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        if request.url.host == GEOCODING_HOST:
            outcome = self.geocoding_outcome
            if outcome is None:
                outcome = {"results": self.places.get(request.url.params["name"].lower(), [])}
        else:
            outcome = self.weather_outcome

        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)


@pytest.fixture
def provider() -> FakeOpenMeteo:
    return FakeOpenMeteo()


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with rate limiting disabled so tests do not sleep."""
    return Settings(min_request_interval=0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(provider, fast_settings) -> WeatherService:
    return WeatherService(fast_settings, transport=httpx.MockTransport(provider))
