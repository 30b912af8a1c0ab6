# src/shared/models/common.py
"""
Общие модели для всех сервисов.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Пагинированный ответ."""

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "ok"  # ok, degraded
    dependencies: dict[str, str] = Field(default_factory=dict)
