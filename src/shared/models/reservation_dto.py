from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from src.shared.models.enums import ReservationStatus
from src.shared.models.accommodation_dto import AvailabilityPeriodDTO

class RegisterAvailabilityRequest(BaseModel):
    accommodation_id: str
    periods: List[AvailabilityPeriodDTO] = Field(default_factory=list)

class AvailabilityDTO(AvailabilityPeriodDTO):
    id: UUID
    accommodation_id: str

    model_config = ConfigDict(from_attributes=True)

class AvailabilityCheckRequest(BaseModel):
    accommodation_ids: List[str] = Field(default_factory=list)
    dates: List[date] = Field(default_factory=list)

class AvailabilityCheckResponse(BaseModel):
    reserved_ids: List[str] = Field(default_factory=list)

class CreateReservationRequest(BaseModel):
    accommodation_id: str
    guest_id: str
    start_date: date
    end_date: date
    num_of_guests: int = 1

class ReservationDTO(BaseModel):
    id: UUID
    accommodation_id: str
    guest_id: str
    start_date: date
    end_date: date
    num_of_guests: int = 1
    total_price: float = 0.0
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime
    cancelled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
