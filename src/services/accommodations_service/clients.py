# src/services/accommodations_service/clients.py
"""
HTTP-клиенты удалённых сервисов.
Каждый клиент держит свой httpx.AsyncClient и свой circuit breaker.
"""

from __future__ import annotations

from typing import Any, Iterable, List

import httpx

from src.common.exceptions import (
    CircuitOpenError,
    RemoteProfileFetchError,
    RemoteServiceError,
    UserNotFound,
)
from src.common.logger import log_error
from src.infra.circuit_breaker import CircuitBreaker
from src.shared.models.accommodation_dto import AvailabilityPeriodDTO
from src.shared.models.user_dto import UserProfile


class RemoteClient:
    """Базовый клиент: таймауты, circuit breaker, перевод ошибок httpx в RemoteServiceError."""

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float = 5.0,
        connect_timeout: float = 2.0,
        breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.breaker = breaker or CircuitBreaker(name)
        self.http = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Закрыть HTTP клиент."""
        await self.http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Выполняет запрос через circuit breaker.
        Ошибки сети и ответы 5xx считаются отказом сервиса; 4xx возвращаются вызывающему.

        Raises:
            RemoteServiceError: сервис недоступен, ответил 5xx или breaker открыт
        """
        try:
            return await self.breaker.call(self._send, method, path, **kwargs)
        except CircuitOpenError:
            raise
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                f"{self.name} responded {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            await log_error(f"{self.name} request {method} {path} failed: {e!r}")
            raise RemoteServiceError(f"{self.name} is not responding") from e

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self.http.request(method, f"{self.base_url}{path}", **kwargs)
        if response.status_code >= 500:
            response.raise_for_status()
        return response


class ReservationsClient(RemoteClient):
    """Клиент Reservations Service."""

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        super().__init__("reservations_service", base_url, **kwargs)

    async def check_availability(self, accommodation_ids: Iterable[str], dates: List[str]) -> set[str]:
        """Возвращает id размещений, у которых есть бронирование на любую из дат."""
        response = await self._request(
            "POST",
            "/reservations/availability/check",
            json={"accommodation_ids": list(accommodation_ids), "dates": list(dates)},
        )
        if response.status_code != 200:
            raise RemoteServiceError(
                f"Availability check rejected ({response.status_code}): {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteServiceError("Malformed availability response") from e

        reserved_ids = payload.get("reserved_ids", []) if isinstance(payload, dict) else None
        if not isinstance(reserved_ids, list):
            raise RemoteServiceError("Malformed availability response")
        return {str(accommodation_id) for accommodation_id in reserved_ids}

    async def register_availability(
        self,
        accommodation_id: str,
        periods: List[AvailabilityPeriodDTO],
    ) -> None:
        """Регистрирует календарь доступности размещения."""
        response = await self._request(
            "POST",
            "/reservations/availability",
            json={
                "accommodation_id": accommodation_id,
                "periods": [period.model_dump(mode="json") for period in periods],
            },
        )
        if response.status_code not in (200, 201):
            raise RemoteServiceError(
                f"Availability registration rejected ({response.status_code}): {response.text}"
            )


class UserClient(RemoteClient):
    """Клиент Users Service."""

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        super().__init__("users_service", base_url, **kwargs)

    async def get_user_by_id(self, user_id: str) -> UserProfile:
        """
        Получить профиль пользователя.

        Raises:
            UserNotFound: пользователя нет
            RemoteProfileFetchError: Users Service недоступен или вернул мусор
        """
        try:
            response = await self._request("GET", f"/users/{user_id}")
        except RemoteServiceError as e:
            raise RemoteProfileFetchError(f"Failed to fetch user {user_id}: {e.message}") from e

        if response.status_code == 404:
            raise UserNotFound(f"User {user_id} not found")
        if response.status_code != 200:
            raise RemoteProfileFetchError(f"Failed to fetch user {user_id}: status {response.status_code}")

        try:
            return UserProfile.model_validate(response.json())
        except ValueError as e:
            raise RemoteProfileFetchError(f"Malformed profile for user {user_id}") from e
