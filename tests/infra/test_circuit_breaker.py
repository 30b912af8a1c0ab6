# tests/infra/test_circuit_breaker.py
"""
Тесты для circuit breaker.
"""

from __future__ import annotations

import pytest

from src.common.exceptions import CircuitOpenError
from src.infra.circuit_breaker import BreakerState, CircuitBreaker


class FakeClock:
    """Управляемые часы вместо time.monotonic."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def ok() -> str:
    return "ok"


async def fail() -> None:
    raise ConnectionError("remote down")


class TestCircuitBreaker:
    """Тесты для CircuitBreaker."""

    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    @pytest.fixture
    def breaker(self, clock: FakeClock) -> CircuitBreaker:
        return CircuitBreaker("users_service", failure_threshold=3, reset_timeout=10.0, clock=clock)

    async def trip(self, breaker: CircuitBreaker) -> None:
        for _ in range(breaker.failure_threshold):
            with pytest.raises(ConnectionError):
                await breaker.call(fail)

    @pytest.mark.asyncio
    async def test_closed_passes_calls(self, breaker: CircuitBreaker) -> None:
        """Закрытый breaker пропускает вызовы."""
        assert await breaker.call(ok) == "ok"
        assert breaker.state == BreakerState.CLOSED

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self, breaker: CircuitBreaker) -> None:
        """После N подряд ошибок breaker открывается."""
        await self.trip(breaker)

        assert breaker.state == BreakerState.OPEN
        with pytest.raises(CircuitOpenError):
            await breaker.call(ok)

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(self, breaker: CircuitBreaker) -> None:
        """Успешный вызов обнуляет счётчик ошибок."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(fail)
        await breaker.call(ok)
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(fail)

        assert breaker.state == BreakerState.CLOSED

    @pytest.mark.asyncio
    async def test_half_open_after_timeout(self, breaker: CircuitBreaker, clock: FakeClock) -> None:
        """По истечении reset_timeout breaker полуоткрыт, успешная проба закрывает его."""
        await self.trip(breaker)
        clock.advance(10.0)

        assert breaker.state == BreakerState.HALF_OPEN
        assert await breaker.call(ok) == "ok"
        assert breaker.state == BreakerState.CLOSED

    @pytest.mark.asyncio
    async def test_failed_probe_reopens(self, breaker: CircuitBreaker, clock: FakeClock) -> None:
        """Неудачная проба снова открывает breaker."""
        await self.trip(breaker)
        clock.advance(10.0)

        with pytest.raises(ConnectionError):
            await breaker.call(fail)

        assert breaker.state == BreakerState.OPEN
        with pytest.raises(CircuitOpenError):
            await breaker.call(ok)

    @pytest.mark.asyncio
    async def test_half_open_allows_single_probe(self, breaker: CircuitBreaker, clock: FakeClock) -> None:
        """Пока проба выполняется, остальные вызовы отклоняются."""
        await self.trip(breaker)
        clock.advance(10.0)

        async def probe() -> str:
            with pytest.raises(CircuitOpenError):
                await breaker.call(ok)
            return "probe"

        assert await breaker.call(probe) == "probe"
        assert breaker.state == BreakerState.CLOSED
