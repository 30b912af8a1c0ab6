# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели для межсервисного взаимодействия.
"""

from src.shared.models.enums import AccommodationStatus, ReservationStatus, UserRole
from src.shared.models.accommodation_dto import (
    AccommodationDTO,
    AccommodationIdsRequest,
    AvailabilityPeriodDTO,
    CreateAccommodationRequest,
    UpdateAccommodationRequest,
    RatingRequest,
    SearchCriteria,
)
from src.shared.models.reservation_dto import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    RegisterAvailabilityRequest,
    ReservationDTO,
)
from src.shared.models.user_dto import UserDTO, UserProfile
from src.shared.models.common import PaginatedResponse, HealthStatus

__all__ = [
    # Enums
    "AccommodationStatus",
    "ReservationStatus",
    "UserRole",
    # Accommodation
    "AccommodationDTO",
    "AccommodationIdsRequest",
    "AvailabilityPeriodDTO",
    "CreateAccommodationRequest",
    "UpdateAccommodationRequest",
    "RatingRequest",
    "SearchCriteria",
    # Reservation
    "AvailabilityCheckRequest",
    "AvailabilityCheckResponse",
    "RegisterAvailabilityRequest",
    "ReservationDTO",
    # User
    "UserDTO",
    "UserProfile",
    # Common
    "PaginatedResponse",
    "HealthStatus",
]
