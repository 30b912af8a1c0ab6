from src.config import settings
from src.infra.database import DatabaseManager
from src.infra.event_bus import get_event_bus
from src.services.users_service.repository import UserRepository
from src.services.users_service.service import UserService


def get_database() -> DatabaseManager:
    return DatabaseManager()


def get_user_repository() -> UserRepository:
    db = get_database()
    return UserRepository(db)


def get_user_service() -> UserService:
    repo = get_user_repository()
    return UserService(
        repo,
        get_event_bus(),
        distinguished_min_rating=settings.rating.DISTINGUISHED_MIN_RATING,
        max_rating=settings.rating.MAX_RATING,
    )
