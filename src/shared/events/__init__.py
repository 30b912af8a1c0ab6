# src/shared/events/__init__.py
"""
Схемы событий для RabbitMQ.

События разделены по доменам:
- accommodation_events: создание и удаление размещений
- reservation_events: создание и отмена бронирований
- user_events: удаление пользователя, смена статуса distinguished

Все события содержат event_id для дедупликации.
"""

from src.shared.events.base import DomainEvent, EventMetadata
from src.shared.events.accommodation_events import AccommodationCreated, AccommodationDeleted
from src.shared.events.reservation_events import ReservationCreated, ReservationCancelled
from src.shared.events.user_events import UserDeleted, UserDistinguishedChanged

__all__ = [
    "DomainEvent",
    "EventMetadata",
    "AccommodationCreated",
    "AccommodationDeleted",
    "ReservationCreated",
    "ReservationCancelled",
    "UserDeleted",
    "UserDistinguishedChanged",
]
