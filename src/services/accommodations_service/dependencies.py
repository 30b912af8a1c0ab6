# src/services/accommodations_service/dependencies.py
"""
Dependency Injection для Accommodations Service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infra.database import DatabaseManager
    from src.infra.event_bus import EventBus
    from src.infra.redis_client import RedisClient
    from src.services.accommodations_service.clients import ReservationsClient, UserClient
    from src.services.accommodations_service.service import AccommodationService


# Синглтоны
_reservations_client: "ReservationsClient | None" = None
_user_client: "UserClient | None" = None
_accommodation_service: "AccommodationService | None" = None


async def init_dependencies(
    db: "DatabaseManager",
    redis: "RedisClient",
    event_bus: "EventBus",
) -> None:
    """Инициализировать зависимости при старте приложения."""
    global _reservations_client, _user_client, _accommodation_service

    from src.config import settings
    from src.infra.circuit_breaker import CircuitBreaker
    from src.services.accommodations_service.clients import ReservationsClient, UserClient
    from src.services.accommodations_service.images import ImageStore
    from src.services.accommodations_service.repository import AccommodationRepository
    from src.services.accommodations_service.search import AccommodationSearchEngine
    from src.services.accommodations_service.service import AccommodationService

    remote = settings.remote
    _reservations_client = ReservationsClient(
        settings.deployment.reservations_url,
        timeout=remote.REQUEST_TIMEOUT,
        connect_timeout=remote.CONNECT_TIMEOUT,
        breaker=CircuitBreaker(
            "reservations_service",
            failure_threshold=remote.BREAKER_FAILURE_THRESHOLD,
            reset_timeout=remote.BREAKER_RESET_TIMEOUT,
        ),
    )
    _user_client = UserClient(
        settings.deployment.users_url,
        timeout=remote.REQUEST_TIMEOUT,
        connect_timeout=remote.CONNECT_TIMEOUT,
        breaker=CircuitBreaker(
            "users_service",
            failure_threshold=remote.BREAKER_FAILURE_THRESHOLD,
            reset_timeout=remote.BREAKER_RESET_TIMEOUT,
        ),
    )

    repository = AccommodationRepository(db)
    _accommodation_service = AccommodationService(
        repository=repository,
        search_engine=AccommodationSearchEngine(repository, _reservations_client, _user_client),
        reservations_client=_reservations_client,
        image_store=ImageStore(redis, settings.storage.images_path, ttl=settings.redis_ttl.IMAGE_TTL),
        event_bus=event_bus,
        max_image_bytes=settings.storage.MAX_IMAGE_BYTES,
        max_rating=settings.rating.MAX_RATING,
    )


def get_accommodation_service() -> "AccommodationService":
    """Получить сервис размещений."""
    if _accommodation_service is None:
        raise RuntimeError("AccommodationService не инициализирован. Вызовите init_dependencies()")
    return _accommodation_service


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _reservations_client, _user_client, _accommodation_service
    for client in (_reservations_client, _user_client):
        if client:
            await client.close()
    _reservations_client = None
    _user_client = None
    _accommodation_service = None
