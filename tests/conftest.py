# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("REDIS_PASSWORD", "")
os.environ.setdefault("RABBITMQ_PASSWORD", "guest")

from src.shared.models.accommodation_dto import AccommodationDTO
from src.shared.models.enums import AccommodationStatus


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "booking_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "COMPONENT_MODE": "all",
        "ACCOMMODATIONS_SERVICE_HOST": "accommodations",
        "ACCOMMODATIONS_SERVICE_PORT": 9081,
        "RESERVATIONS_SERVICE_HOST": "reservations",
        "RESERVATIONS_SERVICE_PORT": 9082,
        "USERS_SERVICE_HOST": "users",
        "USERS_SERVICE_PORT": 9083,
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "booking_test",
        "DB_USER": "postgres",
        "DB_PASSWORD": "test_password",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_NAMESPACE": "booking_test",
        "IMAGE_TTL": 60,
        "RABBITMQ_HOST": "localhost",
        "RABBITMQ_PORT": 5672,
        "RABBITMQ_EXCHANGE": "booking.test",
        "REQUEST_TIMEOUT": 1.5,
        "CONNECT_TIMEOUT": 0.5,
        "BREAKER_FAILURE_THRESHOLD": 3,
        "BREAKER_RESET_TIMEOUT": 2.0,
        "IMAGES_DIR": "/tmp/booking_images",
        "MAX_IMAGE_BYTES": 1024,
        "DISTINGUISHED_MIN_RATING": 4.5,
        "MAX_RATING": 5.0,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> MagicMock:
    """Мок менеджера базы данных с соединением внутри acquire()/transaction()."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.execute = AsyncMock(return_value="UPDATE 1")
    conn.fetchval = AsyncMock(return_value=None)

    @asynccontextmanager
    async def _connection():
        yield conn

    db = MagicMock()
    db.acquire = MagicMock(side_effect=_connection)
    db.transaction = MagicMock(side_effect=_connection)
    db.conn = conn
    return db


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Мок клиента Redis."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.get_bytes = AsyncMock(return_value=None)
    redis.set_bytes = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def mock_event_bus() -> AsyncMock:
    """Мок шины событий."""
    event_bus = AsyncMock()
    event_bus.publish = AsyncMock(return_value=None)
    event_bus.subscribe = AsyncMock(return_value=None)
    event_bus.is_connected = True
    return event_bus


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

def make_accommodation(
    name: str = "Sunny Flat",
    user_id: str = "u1",
    city: str = "Novi Sad",
    accommodation_id: UUID | None = None,
    **overrides: Any,
) -> AccommodationDTO:
    """Строит AccommodationDTO с разумными значениями по умолчанию."""
    data: dict[str, Any] = {
        "id": accommodation_id or uuid4(),
        "name": name,
        "user_id": user_id,
        "username": f"{user_id}_name",
        "email": f"{user_id}@example.com",
        "address": "Bulevar Oslobodjenja 1",
        "city": city,
        "country": "Serbia",
        "conveniences": ["wifi", "parking"],
        "min_visitors": 1,
        "max_visitors": 4,
        "price": 50.0,
        "image_ids": [],
        "rating": 0.0,
        "status": AccommodationStatus.CREATED,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return AccommodationDTO(**data)


@pytest.fixture
def accommodation_factory():
    """Фабрика размещений для тестов."""
    return make_accommodation


@pytest.fixture
def sample_accommodation_row() -> dict[str, Any]:
    """Строка accommodations_schema.accommodations, как её возвращает asyncpg."""
    return {
        "id": UUID("6f1c1e5e-3d8a-4c55-9d2b-0b7c2a4f9e11"),
        "name": "Sunny Flat",
        "user_id": "u1",
        "username": "owner",
        "email": "owner@example.com",
        "address": "Bulevar Oslobodjenja 1",
        "city": "Novi Sad",
        "country": "Serbia",
        "conveniences": ["wifi"],
        "min_visitors": 1,
        "max_visitors": 4,
        "price": 50.0,
        "image_ids": ["0f8fad5bd9cb469fa16570867728950e"],
        "rating": 4.2,
        "status": "pending",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_user_row() -> dict[str, Any]:
    """Строка users_schema.users."""
    return {
        "id": "u1",
        "username": "marko_p",
        "email": "marko@example.com",
        "first_name": "Marko",
        "last_name": "Petrovic",
        "role": "host",
        "residence": "Belgrade",
        "age": 34,
        "rating": 4.1,
        "distinguished": False,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def today() -> date:
    """Фиксированная «сегодняшняя» дата для бронирований."""
    return date(2024, 6, 1)
