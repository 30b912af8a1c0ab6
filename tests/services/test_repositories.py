import pytest
from datetime import date
from uuid import uuid4

from src.services.accommodations_service.repository import AccommodationRepository
from src.services.reservations_service.repository import ReservationRepository
from src.shared.models.enums import AccommodationStatus


@pytest.mark.asyncio
async def test_search_without_filters(mock_db, sample_accommodation_row):
    mock_db.conn.fetch.return_value = [sample_accommodation_row]

    result = await AccommodationRepository(mock_db).search()

    query = mock_db.conn.fetch.call_args[0][0]
    assert "WHERE" not in query
    assert query.rstrip().endswith("ORDER BY city, name, id")
    assert result[0].status == AccommodationStatus.PENDING


@pytest.mark.asyncio
async def test_search_builds_positional_filters(mock_db):
    await AccommodationRepository(mock_db).search(
        city="Novi Sad", num_of_visitors=3, conveniences=["wifi", "parking"],
    )

    query, *args = mock_db.conn.fetch.call_args[0]
    assert "city = $1" in query
    assert "min_visitors <= $2 AND max_visitors >= $2" in query
    assert "conveniences @> $3::text[]" in query
    assert "country" not in query.split("WHERE")[1]
    assert args == ["Novi Sad", 3, ["wifi", "parking"]]


@pytest.mark.asyncio
async def test_update_rating_reports_missing_row(mock_db):
    mock_db.conn.execute.return_value = "UPDATE 0"

    assert await AccommodationRepository(mock_db).update_rating(uuid4(), 4.0) is False


@pytest.mark.asyncio
async def test_delete_returns_removed_row(mock_db, sample_accommodation_row):
    mock_db.conn.fetchrow.return_value = sample_accommodation_row

    deleted = await AccommodationRepository(mock_db).delete(sample_accommodation_row["id"])

    assert deleted.id == sample_accommodation_row["id"]


@pytest.mark.asyncio
async def test_lock_accommodation_uses_advisory_lock(mock_db):
    await ReservationRepository(mock_db).lock_accommodation(mock_db.conn, "a1")

    query, key = mock_db.conn.execute.call_args[0]
    assert "pg_advisory_xact_lock" in query
    assert key == "a1"


@pytest.mark.asyncio
async def test_find_reserved_ids(mock_db):
    mock_db.conn.fetch.return_value = [{"accommodation_id": "a2"}]
    dates = [date(2024, 7, 1)]

    result = await ReservationRepository(mock_db).find_reserved_ids(["a1", "a2"], dates)

    assert result == ["a2"]
    _, ids, passed_dates, status = mock_db.conn.fetch.call_args[0]
    assert ids == ["a1", "a2"]
    assert passed_dates == dates
    assert status == "active"


@pytest.mark.asyncio
async def test_delete_by_accommodation_runs_in_transaction(mock_db):
    await ReservationRepository(mock_db).delete_by_accommodation("a1")

    mock_db.transaction.assert_called_once()
    assert mock_db.conn.execute.call_count == 2
