# src/shared/events/reservation_events.py
"""
События домена бронирований.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from src.shared.events.base import DomainEvent


class ReservationCreated(DomainEvent):
    """Событие: бронирование создано."""

    event_type: Literal["reservation.created"] = "reservation.created"

    reservation_id: str
    accommodation_id: str
    guest_id: str
    start_date: date
    end_date: date


class ReservationCancelled(DomainEvent):
    """Событие: бронирование отменено гостем."""

    event_type: Literal["reservation.cancelled"] = "reservation.cancelled"

    reservation_id: str
    accommodation_id: str
    guest_id: str
