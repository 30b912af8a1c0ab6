from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from src.shared.models.enums import UserRole

class UserDTO(BaseModel):
    id: str
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.GUEST
    residence: Optional[str] = None
    age: Optional[int] = None
    rating: float = 0.0
    distinguished: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserProfile(BaseModel):
    """Partial view of a user consumed by other services."""
    id: str
    distinguished: bool = False

class CreateUserRequest(BaseModel):
    id: Optional[str] = None
    username: str = ""
    email: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.GUEST
    residence: Optional[str] = None
    age: Optional[int] = None

class UserRatingRequest(BaseModel):
    rating: float
