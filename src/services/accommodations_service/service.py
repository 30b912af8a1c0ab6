from typing import List
from uuid import UUID

from src.common.exceptions import (
    AccommodationNotFound,
    AccommodationSaveFailed,
    AvailabilityRegistrationFailed,
    RemoteServiceError,
    ValidationError,
    ValidationIssue,
)
from src.common.logger import log_error, log_info, TypeMsg
from src.infra.event_bus import EventBus
from src.services.accommodations_service.clients import ReservationsClient
from src.services.accommodations_service.images import ImageStore
from src.services.accommodations_service.repository import AccommodationRepository
from src.services.accommodations_service.search import AccommodationSearchEngine
from src.services.accommodations_service.state_machine import AccommodationStateMachine
from src.services.accommodations_service.validation import validate_accommodation, validate_image
from src.shared.events.accommodation_events import AccommodationCreated, AccommodationDeleted
from src.shared.events.base import DomainEvent
from src.shared.events.user_events import UserDeleted
from src.shared.models.accommodation_dto import (
    AccommodationDTO,
    CreateAccommodationRequest,
    SearchCriteria,
    UpdateAccommodationRequest,
)
from src.shared.models.enums import AccommodationStatus


class AccommodationService:
    def __init__(
        self,
        repository: AccommodationRepository,
        search_engine: AccommodationSearchEngine,
        reservations_client: ReservationsClient,
        image_store: ImageStore,
        event_bus: EventBus,
        max_image_bytes: int = 5 * 1024 * 1024,
        max_rating: float = 5.0,
    ):
        self.repository = repository
        self.search_engine = search_engine
        self.reservations_client = reservations_client
        self.image_store = image_store
        self.event_bus = event_bus
        self.max_image_bytes = max_image_bytes
        self.max_rating = max_rating

    async def search_accommodations(self, criteria: SearchCriteria) -> List[AccommodationDTO]:
        return await self.search_engine.search(criteria)

    async def create_accommodation(self, request: CreateAccommodationRequest, image: bytes) -> AccommodationDTO:
        """
        Two-phase create: the accommodation is saved as pending, then its
        availability is registered remotely. A failed registration deletes
        the pending record again.
        """
        # 1. Validate
        issues = validate_accommodation(request) + validate_image(image, self.max_image_bytes)
        if issues:
            raise ValidationError(issues)

        # 2. Store the image
        image_id = await self.image_store.save(image)

        # 3. Save as pending
        try:
            accommodation = await self.repository.save(request, [image_id], AccommodationStatus.PENDING)
        except Exception as e:
            await log_error(f"Failed to save accommodation {request.name!r}: {e}", exc_info=True)
            await self._discard_image(image_id)
            raise AccommodationSaveFailed("Failed to save accommodation") from e
        await log_info(f"Accommodation {accommodation.id} saved as pending", type_msg=TypeMsg.INFO)

        # 4. Register availability, compensate on failure
        try:
            await self.reservations_client.register_availability(str(accommodation.id), request.availability)
        except RemoteServiceError as e:
            await log_error(f"Availability registration failed for {accommodation.id}: {e}")
            await self._compensate(accommodation)
            raise AvailabilityRegistrationFailed("Service is not responding correctly") from e

        # 5. pending -> created
        if not AccommodationStateMachine.can_transition(accommodation.status, AccommodationStatus.CREATED):
            raise ValueError(f"Invalid transition from {accommodation.status} to {AccommodationStatus.CREATED}")
        await self.repository.update_status(accommodation.id, AccommodationStatus.CREATED)
        accommodation = accommodation.model_copy(update={"status": AccommodationStatus.CREATED})

        event = AccommodationCreated(
            accommodation_id=str(accommodation.id),
            user_id=accommodation.user_id,
            name=accommodation.name,
            city=accommodation.city,
            country=accommodation.country,
        )
        await self.event_bus.publish(event)

        return accommodation

    async def _compensate(self, accommodation: AccommodationDTO) -> None:
        """Best-effort undo of a half-created accommodation. Failures are only logged."""
        try:
            await self.repository.delete(accommodation.id)
        except Exception as e:
            await log_error(f"Compensating delete of {accommodation.id} failed: {e}", exc_info=True)
            return

        for image_id in accommodation.image_ids:
            await self._discard_image(image_id)

        await log_info(f"Accommodation {accommodation.id} removed after failed registration", type_msg=TypeMsg.WARNING)

    async def _discard_image(self, image_id: str) -> None:
        try:
            await self.image_store.delete(image_id)
        except Exception as e:
            await log_error(f"Failed to remove image {image_id}: {e}")

    async def get_image(self, image_id: str) -> bytes:
        return await self.image_store.get(image_id)

    async def get_all_accommodations(self) -> List[AccommodationDTO]:
        return await self.repository.get_all()

    async def get_accommodation(self, accommodation_id: UUID) -> AccommodationDTO:
        accommodation = await self.repository.get_by_id(accommodation_id)
        if not accommodation:
            raise AccommodationNotFound("Accommodation not found")
        return accommodation

    async def find_accommodations_by_ids(self, ids: List[str]) -> List[AccommodationDTO]:
        if not ids:
            return []
        return await self.repository.find_by_ids(ids)

    async def update_accommodation(
        self,
        accommodation_id: UUID,
        request: UpdateAccommodationRequest,
    ) -> AccommodationDTO:
        issues = validate_accommodation(request)
        if issues:
            raise ValidationError(issues)

        accommodation = await self.repository.update(accommodation_id, request)
        if not accommodation:
            raise AccommodationNotFound("Accommodation not found")
        return accommodation

    async def delete_accommodation(self, accommodation_id: UUID) -> AccommodationDTO:
        accommodation = await self.repository.delete(accommodation_id)
        if not accommodation:
            raise AccommodationNotFound("Accommodation not found")

        await self.event_bus.publish(AccommodationDeleted(
            accommodation_id=str(accommodation.id),
            user_id=accommodation.user_id,
        ))
        return accommodation

    async def delete_accommodations_by_user(self, user_id: str) -> List[AccommodationDTO]:
        deleted = await self.repository.delete_by_user(user_id)
        for accommodation in deleted:
            await self.event_bus.publish(AccommodationDeleted(
                accommodation_id=str(accommodation.id),
                user_id=user_id,
            ))
        await log_info(f"Deleted {len(deleted)} accommodations of user {user_id}", type_msg=TypeMsg.INFO)
        return deleted

    async def put_accommodation_rating(self, accommodation_id: UUID, rating: float) -> None:
        if not 0 <= rating <= self.max_rating:
            raise ValidationError([
                ValidationIssue("rating", f"Rating must be between 0 and {self.max_rating}"),
            ])
        if not await self.repository.update_rating(accommodation_id, rating):
            raise AccommodationNotFound("Accommodation not found")

    async def handle_user_deleted(self, event: DomainEvent) -> None:
        """Consumer of user.deleted: the owner is gone, so are the listings."""
        if not isinstance(event, UserDeleted):
            return
        await self.delete_accommodations_by_user(event.user_id)
