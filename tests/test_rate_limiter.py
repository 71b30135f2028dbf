"""Tests for the global request spacing throttle."""

import asyncio

import pytest

from weather_lookup.rate_limiter import RateLimiter


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def limiter(clock, sleeps):
    async def fake_sleep(delay):
        sleeps.append(delay)
        clock.advance(delay)
        await asyncio.sleep(0)

    return RateLimiter(1.0, clock=clock, sleep=fake_sleep)


class TestRateLimiter:
    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(-1)

    @pytest.mark.asyncio
    async def test_first_slot_is_immediate(self, limiter, clock, sleeps):
        await limiter.await_slot()
        assert sleeps == []
        assert limiter.last_request_at == clock.now

    @pytest.mark.asyncio
    async def test_waits_for_remaining_interval(self, limiter, clock, sleeps):
        await limiter.await_slot()
        clock.advance(0.4)
        await limiter.await_slot()

        assert sleeps == [pytest.approx(0.6)]
        assert limiter.last_request_at == pytest.approx(1001.0)

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, limiter, clock, sleeps):
        await limiter.await_slot()
        clock.advance(2.0)
        await limiter.await_slot()
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_serialized(self, limiter, clock, sleeps):
        """Simultaneous callers each get their own slot, one interval apart"""
        granted = []

        async def take_slot():
            await limiter.await_slot()
            granted.append(clock.now)

        await asyncio.gather(*(take_slot() for _ in range(3)))

        assert sleeps == [pytest.approx(1.0), pytest.approx(1.0)]
        assert granted == [pytest.approx(1000.0), pytest.approx(1001.0), pytest.approx(1002.0)]

    @pytest.mark.asyncio
    async def test_real_sleep_spacing(self):
        limiter = RateLimiter(0.05)
        loop = asyncio.get_running_loop()
        start = loop.time()
        await limiter.await_slot()
        await limiter.await_slot()
        assert loop.time() - start >= 0.04
