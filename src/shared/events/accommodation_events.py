# src/shared/events/accommodation_events.py
"""
События домена размещений.
"""

from __future__ import annotations

from typing import Literal

from src.shared.events.base import DomainEvent


class AccommodationCreated(DomainEvent):
    """Событие: размещение создано и доступность зарегистрирована."""

    event_type: Literal["accommodation.created"] = "accommodation.created"

    accommodation_id: str
    user_id: str
    name: str
    city: str
    country: str


class AccommodationDeleted(DomainEvent):
    """Событие: размещение удалено (владельцем или компенсацией)."""

    event_type: Literal["accommodation.deleted"] = "accommodation.deleted"

    accommodation_id: str
    user_id: str | None = None
