from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from src.shared.models.enums import AccommodationStatus

class AvailabilityPeriodDTO(BaseModel):
    start_date: date
    end_date: date
    price: float = 0.0
    price_per_guest: bool = False

class AccommodationDTO(BaseModel):
    id: UUID
    name: str
    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None

    address: str
    city: str
    country: str

    conveniences: List[str] = Field(default_factory=list)
    min_visitors: int
    max_visitors: int
    price: float = 0.0

    image_ids: List[str] = Field(default_factory=list)
    rating: float = 0.0
    status: AccommodationStatus = AccommodationStatus.PENDING

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CreateAccommodationRequest(BaseModel):
    # Constraints are checked by validate_accommodation so that all violations
    # are reported together instead of pydantic failing on the first one.
    name: str = ""
    user_id: str = ""
    username: Optional[str] = None
    email: Optional[str] = None
    address: str = ""
    city: str = ""
    country: str = ""
    conveniences: List[str] = Field(default_factory=list)
    min_visitors: int = 0
    max_visitors: int = 0
    price: float = 0.0
    availability: List[AvailabilityPeriodDTO] = Field(default_factory=list)

class UpdateAccommodationRequest(BaseModel):
    name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    conveniences: List[str] = Field(default_factory=list)
    min_visitors: int = 0
    max_visitors: int = 0
    price: float = 0.0

class RatingRequest(BaseModel):
    rating: float

class SearchCriteria(BaseModel):
    """Search query as received from the HTTP layer. Dates stay raw strings until expanded."""
    city: str = ""
    country: str = ""
    num_of_visitors: int = 0
    start_date: str = ""
    end_date: str = ""
    max_price: float = 0.0
    conveniences: List[str] = Field(default_factory=list)
    distinguished: bool = False

    @property
    def has_dates(self) -> bool:
        return bool(self.start_date or self.end_date)

    @property
    def has_price_ceiling(self) -> bool:
        return self.max_price > 0


class AccommodationIdsRequest(BaseModel):
    ids: List[str] = Field(default_factory=list)
