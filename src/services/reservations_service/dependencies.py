from src.infra.database import DatabaseManager
from src.infra.event_bus import get_event_bus
from src.services.reservations_service.repository import ReservationRepository
from src.services.reservations_service.service import ReservationService


def get_reservation_repository() -> ReservationRepository:
    return ReservationRepository(DatabaseManager())


def get_reservation_service() -> ReservationService:
    repository = get_reservation_repository()
    event_bus = get_event_bus()
    return ReservationService(repository, event_bus)
