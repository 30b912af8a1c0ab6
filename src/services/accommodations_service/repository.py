from typing import List, Optional
from uuid import UUID

from src.infra.database import DatabaseManager
from src.shared.models.accommodation_dto import (
    AccommodationDTO,
    CreateAccommodationRequest,
    UpdateAccommodationRequest,
)
from src.shared.models.enums import AccommodationStatus

_COLUMNS = """
    id, name, user_id, username, email, address, city, country,
    conveniences, min_visitors, max_visitors, price, image_ids,
    rating, status, created_at, updated_at
"""

# Store order; every search filter keeps it
_ORDER_BY = "ORDER BY city, name, id"


class AccommodationRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def search(
        self,
        city: str = "",
        country: str = "",
        num_of_visitors: int = 0,
        max_price: float = 0.0,
        conveniences: Optional[List[str]] = None,
    ) -> List[AccommodationDTO]:
        """Structural filters only. Empty values do not filter."""
        conditions: List[str] = []
        args: list = []

        if city:
            args.append(city)
            conditions.append(f"city = ${len(args)}")
        if country:
            args.append(country)
            conditions.append(f"country = ${len(args)}")
        if num_of_visitors > 0:
            args.append(num_of_visitors)
            conditions.append(f"min_visitors <= ${len(args)} AND max_visitors >= ${len(args)}")
        if max_price > 0:
            args.append(max_price)
            conditions.append(f"price <= ${len(args)}")
        if conveniences:
            args.append(list(conveniences))
            conditions.append(f"conveniences @> ${len(args)}::text[]")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"SELECT {_COLUMNS} FROM accommodations_schema.accommodations {where} {_ORDER_BY}"

        async with self.db.acquire() as conn:
            records = await conn.fetch(query, *args)
            return [AccommodationDTO(**dict(record)) for record in records]

    async def save(
        self,
        request: CreateAccommodationRequest,
        image_ids: List[str],
        status: AccommodationStatus = AccommodationStatus.PENDING,
    ) -> AccommodationDTO:
        """Inserts a new accommodation and returns it with the generated id."""
        query = f"""
            INSERT INTO accommodations_schema.accommodations (
                name, user_id, username, email, address, city, country,
                conveniences, min_visitors, max_visitors, price, image_ids, status
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                request.name,
                request.user_id,
                request.username,
                request.email,
                request.address,
                request.city,
                request.country,
                list(request.conveniences),
                request.min_visitors,
                request.max_visitors,
                request.price,
                list(image_ids),
                status.value,
            )
            return AccommodationDTO(**dict(record))

    async def get_by_id(self, accommodation_id: UUID) -> Optional[AccommodationDTO]:
        query = f"SELECT {_COLUMNS} FROM accommodations_schema.accommodations WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, accommodation_id)
            if record:
                return AccommodationDTO(**dict(record))
            return None

    async def get_all(self) -> List[AccommodationDTO]:
        query = f"SELECT {_COLUMNS} FROM accommodations_schema.accommodations {_ORDER_BY}"
        async with self.db.acquire() as conn:
            records = await conn.fetch(query)
            return [AccommodationDTO(**dict(record)) for record in records]

    async def find_by_ids(self, ids: List[str]) -> List[AccommodationDTO]:
        """Ids that are not UUIDs simply match nothing."""
        query = f"""
            SELECT {_COLUMNS} FROM accommodations_schema.accommodations
            WHERE id::text = ANY($1::text[])
            {_ORDER_BY}
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, list(ids))
            return [AccommodationDTO(**dict(record)) for record in records]

    async def update(
        self,
        accommodation_id: UUID,
        request: UpdateAccommodationRequest,
    ) -> Optional[AccommodationDTO]:
        """Updates descriptive fields. Status, rating, owner and images stay as they are."""
        query = f"""
            UPDATE accommodations_schema.accommodations
            SET name = $2, address = $3, city = $4, country = $5,
                conveniences = $6, min_visitors = $7, max_visitors = $8,
                price = $9, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(
                query,
                accommodation_id,
                request.name,
                request.address,
                request.city,
                request.country,
                list(request.conveniences),
                request.min_visitors,
                request.max_visitors,
                request.price,
            )
            if record:
                return AccommodationDTO(**dict(record))
            return None

    async def update_status(self, accommodation_id: UUID, status: AccommodationStatus) -> None:
        query = """
            UPDATE accommodations_schema.accommodations
            SET status = $2, updated_at = NOW()
            WHERE id = $1
        """
        async with self.db.acquire() as conn:
            await conn.execute(query, accommodation_id, status.value)

    async def update_rating(self, accommodation_id: UUID, rating: float) -> bool:
        """Returns False when the accommodation does not exist."""
        query = """
            UPDATE accommodations_schema.accommodations
            SET rating = $2, updated_at = NOW()
            WHERE id = $1
        """
        async with self.db.acquire() as conn:
            result = await conn.execute(query, accommodation_id, rating)
            return result != "UPDATE 0"

    async def delete(self, accommodation_id: UUID) -> Optional[AccommodationDTO]:
        """Deletes an accommodation and returns the removed row."""
        query = f"""
            DELETE FROM accommodations_schema.accommodations
            WHERE id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, accommodation_id)
            if record:
                return AccommodationDTO(**dict(record))
            return None

    async def delete_by_user(self, user_id: str) -> List[AccommodationDTO]:
        query = f"""
            DELETE FROM accommodations_schema.accommodations
            WHERE user_id = $1
            RETURNING {_COLUMNS}
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, user_id)
            return [AccommodationDTO(**dict(record)) for record in records]
