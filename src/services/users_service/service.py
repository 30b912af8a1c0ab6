from uuid import uuid4

import asyncpg

from src.common.exceptions import UserAlreadyExists, UserNotFound, ValidationError, ValidationIssue
from src.common.logger import log_info, TypeMsg
from src.infra.event_bus import EventBus
from src.services.users_service.repository import UserRepository
from src.services.users_service.validation import validate_user
from src.shared.events.user_events import UserDeleted, UserDistinguishedChanged
from src.shared.models.common import PaginatedResponse
from src.shared.models.user_dto import CreateUserRequest, UserDTO


class UserService:
    def __init__(
        self,
        repository: UserRepository,
        event_bus: EventBus,
        distinguished_min_rating: float = 4.7,
        max_rating: float = 5.0,
    ):
        self.repository = repository
        self.event_bus = event_bus
        self.distinguished_min_rating = distinguished_min_rating
        self.max_rating = max_rating

    async def get_user(self, user_id: str) -> UserDTO:
        user = await self.repository.get_user_by_id(user_id)
        if not user:
            raise UserNotFound("User not found")
        return user

    async def create_user(self, user_data: CreateUserRequest) -> UserDTO:
        issues = validate_user(user_data)
        if issues:
            raise ValidationError(issues)

        user_id = user_data.id or uuid4().hex
        try:
            user = await self.repository.create_user(user_id, user_data)
        except asyncpg.UniqueViolationError:
            raise UserAlreadyExists("User with this id, username or email already exists")

        await log_info(f"Регистрация нового пользователя {user.id}", type_msg=TypeMsg.INFO)
        return user

    async def update_user(self, user_id: str, user_data: CreateUserRequest) -> UserDTO:
        issues = validate_user(user_data)
        if issues:
            raise ValidationError(issues)

        try:
            user = await self.repository.update_user(user_id, user_data)
        except asyncpg.UniqueViolationError:
            raise UserAlreadyExists("Username or email already taken")
        if not user:
            raise UserNotFound("User not found")

        await log_info(f"Обновление пользователя {user_id}", type_msg=TypeMsg.INFO)
        return user

    async def update_rating(self, user_id: str, rating: float) -> UserDTO:
        """Sets the rating and recomputes the distinguished flag from it."""
        if not 0 <= rating <= self.max_rating:
            raise ValidationError([
                ValidationIssue("rating", f"Rating must be between 0 and {self.max_rating}"),
            ])

        current = await self.get_user(user_id)
        distinguished = rating >= self.distinguished_min_rating

        user = await self.repository.update_rating(user_id, rating, distinguished)
        if not user:
            raise UserNotFound("User not found")

        if current.distinguished != distinguished:
            await self.event_bus.publish(UserDistinguishedChanged(
                user_id=user_id,
                distinguished=distinguished,
                rating=rating,
            ))
            await log_info(f"Пользователь {user_id}: distinguished={distinguished}", type_msg=TypeMsg.INFO)

        return user

    async def delete_user(self, user_id: str) -> None:
        if not await self.repository.delete_user(user_id):
            raise UserNotFound("User not found")

        await self.event_bus.publish(UserDeleted(user_id=user_id))
        await log_info(f"Пользователь {user_id} удалён", type_msg=TypeMsg.INFO)

    async def get_all_users(self, page: int, size: int) -> PaginatedResponse[UserDTO]:
        """Возвращает список пользователей с пагинацией."""
        offset = (page - 1) * size
        users = await self.repository.get_all_users(limit=size, offset=offset)
        total = await self.repository.count_users()

        return PaginatedResponse[UserDTO](items=users, total=total, page=page, size=size)
