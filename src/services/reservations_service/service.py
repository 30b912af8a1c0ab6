from datetime import date
from typing import Callable, List
from uuid import UUID

from src.common.exceptions import (
    ReservationConflict,
    ReservationNotFound,
    ValidationError,
    ValidationIssue,
)
from src.common.logger import log_info, TypeMsg
from src.infra.event_bus import EventBus
from src.services.reservations_service.repository import ReservationRepository
from src.shared.events.accommodation_events import AccommodationDeleted
from src.shared.events.base import DomainEvent
from src.shared.events.reservation_events import ReservationCancelled, ReservationCreated
from src.shared.models.accommodation_dto import AvailabilityPeriodDTO
from src.shared.models.enums import ReservationStatus
from src.shared.models.reservation_dto import (
    AvailabilityDTO,
    CreateReservationRequest,
    RegisterAvailabilityRequest,
    ReservationDTO,
)


def periods_overlap(a: AvailabilityPeriodDTO, b: AvailabilityPeriodDTO) -> bool:
    return a.start_date <= b.end_date and b.start_date <= a.end_date


def calculate_total_price(period: AvailabilityPeriodDTO, request: CreateReservationRequest) -> float:
    """Both ends of a stay are charged days."""
    days = (request.end_date - request.start_date).days + 1
    guests = request.num_of_guests if period.price_per_guest else 1
    return round(period.price * days * guests, 2)


class ReservationService:
    def __init__(
        self,
        repository: ReservationRepository,
        event_bus: EventBus,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.event_bus = event_bus
        self.today = today

    async def register_availability(self, request: RegisterAvailabilityRequest) -> List[AvailabilityDTO]:
        """Adds availability periods. Periods may not overlap each other or the existing calendar."""
        issues: List[ValidationIssue] = []
        if not request.accommodation_id.strip():
            issues.append(ValidationIssue("accommodation_id", "Accommodation is required"))
        for index, period in enumerate(request.periods):
            if period.end_date < period.start_date:
                issues.append(ValidationIssue(
                    f"periods[{index}]", "Availability end date cannot precede its start date",
                ))
        if issues:
            raise ValidationError(issues)

        async with self.repository.transaction() as conn:
            await self.repository.lock_accommodation(conn, request.accommodation_id)
            calendar = list(await self.repository.get_periods(request.accommodation_id, conn=conn))

            for index, period in enumerate(request.periods):
                if any(periods_overlap(period, existing) for existing in calendar):
                    issues.append(ValidationIssue(
                        f"periods[{index}]", f"Period {period.start_date} - {period.end_date} overlaps another period",
                    ))
                calendar.append(period)
            if issues:
                raise ValidationError(issues)

            created = await self.repository.add_periods(conn, request.accommodation_id, request.periods)

        await log_info(
            f"Registered {len(created)} availability periods for {request.accommodation_id}",
            type_msg=TypeMsg.INFO,
        )
        return created

    async def get_availability(self, accommodation_id: str) -> List[AvailabilityDTO]:
        return await self.repository.get_periods(accommodation_id)

    async def check_availability(self, accommodation_ids: List[str], dates: List[date]) -> List[str]:
        """Returns the ids among accommodation_ids that are reserved on any of the dates."""
        if not accommodation_ids or not dates:
            return []
        return await self.repository.find_reserved_ids(accommodation_ids, dates)

    async def create_reservation(self, request: CreateReservationRequest) -> ReservationDTO:
        issues: List[ValidationIssue] = []
        if request.end_date < request.start_date:
            issues.append(ValidationIssue("end_date", "End date cannot precede start date"))
        if request.start_date < self.today():
            issues.append(ValidationIssue("start_date", "Reservation cannot start in the past"))
        if request.num_of_guests < 1:
            issues.append(ValidationIssue("num_of_guests", "Number of guests must be at least 1"))
        if issues:
            raise ValidationError(issues)

        async with self.repository.transaction() as conn:
            await self.repository.lock_accommodation(conn, request.accommodation_id)

            period = await self.repository.find_covering_period(
                conn, request.accommodation_id, request.start_date, request.end_date,
            )
            if not period:
                raise ReservationConflict("Accommodation is not available for the requested dates")

            if await self.repository.has_overlap(
                conn, request.accommodation_id, request.start_date, request.end_date,
            ):
                raise ReservationConflict("Accommodation is already reserved for the requested dates")

            reservation = await self.repository.insert_reservation(
                conn, request, calculate_total_price(period, request),
            )

        await self.event_bus.publish(ReservationCreated(
            reservation_id=str(reservation.id),
            accommodation_id=reservation.accommodation_id,
            guest_id=reservation.guest_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
        ))
        await log_info(f"Reservation {reservation.id} created", type_msg=TypeMsg.INFO)
        return reservation

    async def get_reservations_by_accommodation(self, accommodation_id: str) -> List[ReservationDTO]:
        return await self.repository.get_by_accommodation(accommodation_id)

    async def cancel_reservation(self, reservation_id: UUID) -> ReservationDTO:
        reservation = await self.repository.get_reservation(reservation_id)
        if not reservation:
            raise ReservationNotFound("Reservation not found")
        if reservation.status == ReservationStatus.CANCELLED:
            raise ReservationConflict("Reservation is already cancelled")
        if reservation.start_date <= self.today():
            raise ReservationConflict("Reservation has already started")

        cancelled = await self.repository.cancel_reservation(reservation_id)
        if not cancelled:
            raise ReservationNotFound("Reservation not found")

        await self.event_bus.publish(ReservationCancelled(
            reservation_id=str(cancelled.id),
            accommodation_id=cancelled.accommodation_id,
            guest_id=cancelled.guest_id,
        ))
        return cancelled

    async def handle_accommodation_deleted(self, event: DomainEvent) -> None:
        """Consumer of accommodation.deleted."""
        if not isinstance(event, AccommodationDeleted):
            return
        await self.repository.delete_by_accommodation(event.accommodation_id)
        await log_info(
            f"Availability and reservations of {event.accommodation_id} removed",
            type_msg=TypeMsg.INFO,
        )
