from enum import Enum

class AccommodationStatus(str, Enum):
    """Статусы размещения."""
    PENDING = "pending"
    CREATED = "created"

    def __str__(self) -> str:
        return self.value

class ReservationStatus(str, Enum):
    """Статусы бронирования."""
    ACTIVE = "active"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value

class UserRole(str, Enum):
    """Роли пользователей."""
    HOST = "host"
    GUEST = "guest"
    ADMIN = "admin"

    def __str__(self) -> str:
        return self.value
