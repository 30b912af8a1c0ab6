# tests/shared/test_models.py
"""
Тесты общих DTO.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from src.shared.models import AccommodationDTO, PaginatedResponse, UserDTO


class TestFromAttributes:
    """DTO строятся из объектов с атрибутами (строки asyncpg, ORM)."""

    def test_user_from_object(self, sample_user_row: dict[str, Any]) -> None:
        user = UserDTO.model_validate(SimpleNamespace(**sample_user_row))

        assert user.username == sample_user_row["username"]

    def test_accommodation_from_object(self, sample_accommodation_row: dict[str, Any]) -> None:
        accommodation = AccommodationDTO.model_validate(SimpleNamespace(**sample_accommodation_row))

        assert accommodation.id == sample_accommodation_row["id"]
        assert accommodation.conveniences == ["wifi"]


class TestPaginatedResponse:
    """Тесты для PaginatedResponse."""

    def test_total_pages(self) -> None:
        page = PaginatedResponse[str](items=["a"], total=41, page=1, size=20)

        assert page.total_pages == 3

    def test_empty(self) -> None:
        assert PaginatedResponse[str](items=[], total=0, page=1, size=20).total_pages == 0
