from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncGenerator, List, Optional
from uuid import UUID

from asyncpg import Connection

from src.infra.database import DatabaseManager
from src.shared.models.accommodation_dto import AvailabilityPeriodDTO
from src.shared.models.enums import ReservationStatus
from src.shared.models.reservation_dto import AvailabilityDTO, CreateReservationRequest, ReservationDTO

_PERIOD_COLUMNS = "id, accommodation_id, start_date, end_date, price, price_per_guest"
_RESERVATION_COLUMNS = """
    id, accommodation_id, guest_id, start_date, end_date,
    num_of_guests, total_price, status, created_at, cancelled_at
"""


class ReservationRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Connection, None]:
        async with self.db.transaction() as conn:
            yield conn

    async def lock_accommodation(self, conn: Connection, accommodation_id: str) -> None:
        """Serializes writers of one accommodation until the transaction ends."""
        await conn.execute("SELECT pg_advisory_xact_lock(hashtext($1))", accommodation_id)

    # =========================================================================
    # AVAILABILITY
    # =========================================================================

    async def add_periods(
        self,
        conn: Connection,
        accommodation_id: str,
        periods: List[AvailabilityPeriodDTO],
    ) -> List[AvailabilityDTO]:
        query = f"""
            INSERT INTO reservations_schema.availability_periods (
                accommodation_id, start_date, end_date, price, price_per_guest
            )
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_PERIOD_COLUMNS}
        """
        created = []
        for period in periods:
            record = await conn.fetchrow(
                query,
                accommodation_id,
                period.start_date,
                period.end_date,
                period.price,
                period.price_per_guest,
            )
            created.append(AvailabilityDTO(**dict(record)))
        return created

    async def get_periods(self, accommodation_id: str, conn: Optional[Connection] = None) -> List[AvailabilityDTO]:
        query = f"""
            SELECT {_PERIOD_COLUMNS} FROM reservations_schema.availability_periods
            WHERE accommodation_id = $1
            ORDER BY start_date
        """
        if conn is not None:
            records = await conn.fetch(query, accommodation_id)
        else:
            async with self.db.acquire() as conn:
                records = await conn.fetch(query, accommodation_id)
        return [AvailabilityDTO(**dict(record)) for record in records]

    async def find_covering_period(
        self,
        conn: Connection,
        accommodation_id: str,
        start_date: date,
        end_date: date,
    ) -> Optional[AvailabilityDTO]:
        """Availability period containing the whole stay, if any."""
        query = f"""
            SELECT {_PERIOD_COLUMNS} FROM reservations_schema.availability_periods
            WHERE accommodation_id = $1 AND start_date <= $2 AND end_date >= $3
            ORDER BY start_date
            LIMIT 1
        """
        record = await conn.fetchrow(query, accommodation_id, start_date, end_date)
        if record:
            return AvailabilityDTO(**dict(record))
        return None

    async def find_reserved_ids(self, accommodation_ids: List[str], dates: List[date]) -> List[str]:
        """Accommodations with an active reservation covering at least one of the dates."""
        query = """
            SELECT DISTINCT r.accommodation_id
            FROM reservations_schema.reservations r
            WHERE r.status = $3
              AND r.accommodation_id = ANY($1::text[])
              AND EXISTS (
                  SELECT 1 FROM unnest($2::date[]) AS d(day)
                  WHERE d.day BETWEEN r.start_date AND r.end_date
              )
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, accommodation_ids, dates, ReservationStatus.ACTIVE.value)
            return [record["accommodation_id"] for record in records]

    async def delete_by_accommodation(self, accommodation_id: str) -> None:
        """Removes the calendar and every reservation of an accommodation."""
        async with self.db.transaction() as conn:
            await conn.execute(
                "DELETE FROM reservations_schema.reservations WHERE accommodation_id = $1",
                accommodation_id,
            )
            await conn.execute(
                "DELETE FROM reservations_schema.availability_periods WHERE accommodation_id = $1",
                accommodation_id,
            )

    # =========================================================================
    # RESERVATIONS
    # =========================================================================

    async def has_overlap(
        self,
        conn: Connection,
        accommodation_id: str,
        start_date: date,
        end_date: date,
    ) -> bool:
        query = """
            SELECT EXISTS (
                SELECT 1 FROM reservations_schema.reservations
                WHERE accommodation_id = $1 AND status = $4
                  AND start_date <= $3 AND end_date >= $2
            )
        """
        return await conn.fetchval(
            query, accommodation_id, start_date, end_date, ReservationStatus.ACTIVE.value,
        )

    async def insert_reservation(
        self,
        conn: Connection,
        request: CreateReservationRequest,
        total_price: float,
    ) -> ReservationDTO:
        query = f"""
            INSERT INTO reservations_schema.reservations (
                accommodation_id, guest_id, start_date, end_date, num_of_guests, total_price, status
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {_RESERVATION_COLUMNS}
        """
        record = await conn.fetchrow(
            query,
            request.accommodation_id,
            request.guest_id,
            request.start_date,
            request.end_date,
            request.num_of_guests,
            total_price,
            ReservationStatus.ACTIVE.value,
        )
        return ReservationDTO(**dict(record))

    async def get_reservation(self, reservation_id: UUID) -> Optional[ReservationDTO]:
        query = f"SELECT {_RESERVATION_COLUMNS} FROM reservations_schema.reservations WHERE id = $1"
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, reservation_id)
            if record:
                return ReservationDTO(**dict(record))
            return None

    async def get_by_accommodation(self, accommodation_id: str) -> List[ReservationDTO]:
        query = f"""
            SELECT {_RESERVATION_COLUMNS} FROM reservations_schema.reservations
            WHERE accommodation_id = $1
            ORDER BY start_date
        """
        async with self.db.acquire() as conn:
            records = await conn.fetch(query, accommodation_id)
            return [ReservationDTO(**dict(record)) for record in records]

    async def cancel_reservation(self, reservation_id: UUID) -> Optional[ReservationDTO]:
        query = f"""
            UPDATE reservations_schema.reservations
            SET status = $2, cancelled_at = NOW()
            WHERE id = $1
            RETURNING {_RESERVATION_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, reservation_id, ReservationStatus.CANCELLED.value)
            if record:
                return ReservationDTO(**dict(record))
            return None
