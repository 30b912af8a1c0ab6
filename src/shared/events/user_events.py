# src/shared/events/user_events.py
"""
События домена пользователей.
"""

from __future__ import annotations

from typing import Literal

from src.shared.events.base import DomainEvent


class UserDeleted(DomainEvent):
    """Событие: пользователь удалён. Его размещения удаляются следом."""

    event_type: Literal["user.deleted"] = "user.deleted"

    user_id: str


class UserDistinguishedChanged(DomainEvent):
    """Событие: пользователь получил или потерял статус distinguished."""

    event_type: Literal["user.distinguished_changed"] = "user.distinguished_changed"

    user_id: str
    distinguished: bool
    rating: float
