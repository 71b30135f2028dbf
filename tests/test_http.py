"""Tests for the deadline-bound GET helper."""

import asyncio

import httpx
import pytest

from weather_lookup.errors import ErrorKind, WeatherLookupError
from weather_lookup.http import fetch_with_timeout


@pytest.mark.asyncio
async def test_returns_raw_response_without_status_check():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"reason": "down"}))
    async with httpx.AsyncClient(transport=transport) as client:
        response = await fetch_with_timeout(client, "https://example.test/x", {"a": 1})
    assert response.status_code == 503
    assert response.request.url.params["a"] == "1"


@pytest.mark.asyncio
async def test_deadline_cancels_slow_request():
    cancelled = asyncio.Event()

    async def slow(request):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200)

    async with httpx.AsyncClient(transport=httpx.MockTransport(slow)) as client:
        with pytest.raises(WeatherLookupError) as excinfo:
            await fetch_with_timeout(client, "https://example.test/slow", timeout=0.05)

    assert excinfo.value.kind is ErrorKind.TIMEOUT
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_transport_timeout_is_typed():
    def timeout(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(timeout)) as client:
        with pytest.raises(WeatherLookupError) as excinfo:
            await fetch_with_timeout(client, "https://example.test/x")
    assert excinfo.value.kind is ErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_other_transport_errors_propagate():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(httpx.ConnectError):
            await fetch_with_timeout(client, "https://example.test/x")
