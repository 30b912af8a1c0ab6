from typing import List, Optional

from src.infra.database import DatabaseManager
from src.shared.models.user_dto import CreateUserRequest, UserDTO

_COLUMNS = """
    id, username, email, first_name, last_name, role, residence, age,
    rating, distinguished, created_at, updated_at
"""


class UserRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_user_by_id(self, user_id: str) -> Optional[UserDTO]:
        """Получает пользователя по ID."""
        query = f"SELECT {_COLUMNS} FROM users_schema.users WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, user_id)
            if record:
                return UserDTO(**dict(record))
            return None

    async def create_user(self, user_id: str, user: CreateUserRequest) -> UserDTO:
        """Создает пользователя. Конфликт username/email пробрасывается как UniqueViolationError."""
        query = f"""
            INSERT INTO users_schema.users (
                id, username, email, first_name, last_name, role, residence, age
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                user_id,
                user.username,
                user.email,
                user.first_name,
                user.last_name,
                user.role.value,
                user.residence,
                user.age,
            )
            return UserDTO(**dict(record))

    async def update_user(self, user_id: str, user: CreateUserRequest) -> Optional[UserDTO]:
        """Обновляет профиль. Рейтинг и distinguished меняются только через update_rating."""
        query = f"""
            UPDATE users_schema.users
            SET username = $2, email = $3, first_name = $4, last_name = $5,
                role = $6, residence = $7, age = $8, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                user_id,
                user.username,
                user.email,
                user.first_name,
                user.last_name,
                user.role.value,
                user.residence,
                user.age,
            )
            if record:
                return UserDTO(**dict(record))
            return None

    async def update_rating(self, user_id: str, rating: float, distinguished: bool) -> Optional[UserDTO]:
        query = f"""
            UPDATE users_schema.users
            SET rating = $2, distinguished = $3, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, user_id, rating, distinguished)
            if record:
                return UserDTO(**dict(record))
            return None

    async def delete_user(self, user_id: str) -> bool:
        async with self.db.acquire() as conn:
            result = await conn.execute("DELETE FROM users_schema.users WHERE id = $1", user_id)
            return result != "DELETE 0"

    async def get_all_users(self, limit: int, offset: int) -> List[UserDTO]:
        """Получает список пользователей с пагинацией."""
        query = f"""
            SELECT {_COLUMNS} FROM users_schema.users
            ORDER BY created_at DESC
            LIMIT $1 OFFSET $2
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, limit, offset)
            return [UserDTO(**dict(record)) for record in records]

    async def count_users(self) -> int:
        """Возвращает общее количество пользователей."""
        query = "SELECT COUNT(*) FROM users_schema.users"
        async with self.db.acquire() as conn:
            return await conn.fetchval(query)
