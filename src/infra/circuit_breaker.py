# src/infra/circuit_breaker.py
"""
Circuit breaker для межсервисных HTTP-вызовов.

closed    → вызовы проходят; после N подряд ошибок переходит в open
open      → вызовы сразу отклоняются CircuitOpenError до истечения reset_timeout
half_open → пропускается один пробный вызов: успех закрывает, ошибка снова открывает
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from src.common.constants import TypeMsg
from src.common.exceptions import CircuitOpenError
from src.common.logger import log_info

T = TypeVar("T")


class BreakerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __str__(self) -> str:
        return self.value


class CircuitBreaker:
    """Асинхронный circuit breaker. Один экземпляр на удалённый сервис."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock
        self._state = BreakerState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._probe_in_flight = False
        self._lock = asyncio.Lock()

    @property
    def state(self) -> BreakerState:
        if self._state == BreakerState.OPEN and self._clock() - self._opened_at >= self.reset_timeout:
            return BreakerState.HALF_OPEN
        return self._state

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Выполняет вызов через breaker.

        Raises:
            CircuitOpenError: breaker открыт или пробный вызов уже выполняется
        """
        await self._before_call()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            await self._on_failure()
            raise
        await self._on_success()
        return result

    async def _before_call(self) -> None:
        async with self._lock:
            state = self.state
            if state == BreakerState.OPEN:
                raise CircuitOpenError(f"Circuit breaker {self.name} is open")
            if state == BreakerState.HALF_OPEN:
                if self._probe_in_flight:
                    raise CircuitOpenError(f"Circuit breaker {self.name} is half-open")
                self._probe_in_flight = True
                await self._transition(BreakerState.HALF_OPEN)

    async def _on_success(self) -> None:
        async with self._lock:
            self._failures = 0
            self._probe_in_flight = False
            if self._state != BreakerState.CLOSED:
                await self._transition(BreakerState.CLOSED)

    async def _on_failure(self) -> None:
        async with self._lock:
            self._failures += 1
            probe_failed = self._probe_in_flight
            self._probe_in_flight = False
            if probe_failed or self._failures >= self.failure_threshold:
                self._opened_at = self._clock()
                await self._transition(BreakerState.OPEN)

    async def _transition(self, new_state: BreakerState) -> None:
        if new_state == self._state:
            return
        old_state = self._state
        self._state = new_state
        await log_info(
            f"Circuit Breaker {self.name}: {old_state} -> {new_state}",
            type_msg=TypeMsg.WARNING,
        )
