import pytest
from unittest.mock import AsyncMock

from src.common.exceptions import (
    AvailabilityCheckFailed,
    InvalidDateFormat,
    RemoteProfileFetchError,
    RemoteServiceError,
    SearchFailed,
    UnsupportedSearchCriteria,
    UserNotFound,
)
from src.services.accommodations_service.search import (
    AccommodationSearchEngine,
    CriteriaKind,
    generate_date_range,
    remove_accommodations,
    resolve_criteria_kind,
)
from src.shared.models.accommodation_dto import SearchCriteria
from src.shared.models.user_dto import UserProfile


@pytest.fixture
def candidates(accommodation_factory):
    return [
        accommodation_factory(name="A", user_id="u1"),
        accommodation_factory(name="B", user_id="u2"),
        accommodation_factory(name="C", user_id="u1"),
        accommodation_factory(name="D", user_id="u3"),
    ]


@pytest.fixture
def mock_repo(candidates):
    repo = AsyncMock()
    repo.search.return_value = candidates
    return repo


@pytest.fixture
def mock_reservations():
    client = AsyncMock()
    client.check_availability.return_value = set()
    return client


@pytest.fixture
def mock_users():
    profiles = {
        "u1": UserProfile(id="u1", distinguished=True),
        "u2": UserProfile(id="u2", distinguished=False),
        "u3": UserProfile(id="u3", distinguished=True),
    }

    async def get_user_by_id(user_id):
        return profiles[user_id]

    client = AsyncMock()
    client.get_user_by_id.side_effect = get_user_by_id
    return client


@pytest.fixture
def engine(mock_repo, mock_reservations, mock_users):
    return AccommodationSearchEngine(mock_repo, mock_reservations, mock_users)


# --- generate_date_range ---

def test_generate_date_range_inclusive():
    assert generate_date_range("2024-01-01", "2024-01-03") == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_generate_date_range_single_day():
    assert generate_date_range("2024-02-29", "2024-02-29") == ["2024-02-29"]


def test_generate_date_range_reversed_is_empty():
    assert generate_date_range("2024-01-03", "2024-01-01") == []


def test_generate_date_range_crosses_month_boundary():
    assert generate_date_range("2024-01-31", "2024-02-01") == ["2024-01-31", "2024-02-01"]


@pytest.mark.parametrize("start, end", [
    ("2024-13-01", "2024-01-03"),
    ("2024-01-01", "03.01.2024"),
    ("", "2024-01-03"),
    ("2024-01-01", ""),
])
def test_generate_date_range_invalid(start, end):
    with pytest.raises(InvalidDateFormat):
        generate_date_range(start, end)


# --- remove_accommodations ---

def test_remove_accommodations_keeps_order(candidates):
    reserved = {str(candidates[0].id), str(candidates[2].id)}

    result = remove_accommodations(candidates, reserved)

    assert [a.name for a in result] == ["B", "D"]


def test_remove_accommodations_ignores_unknown_ids(candidates):
    result = remove_accommodations(candidates, {"not-a-candidate"})

    assert result == candidates


def test_remove_accommodations_all_reserved(candidates):
    assert remove_accommodations(candidates, [str(a.id) for a in candidates]) == []


# --- resolve_criteria_kind ---

@pytest.mark.parametrize("criteria, expected", [
    (SearchCriteria(), CriteriaKind.UNFILTERED),
    (SearchCriteria(city="Novi Sad", num_of_visitors=2, conveniences=["wifi"]), CriteriaKind.UNFILTERED),
    (SearchCriteria(start_date="2024-01-01", end_date="2024-01-02"), CriteriaKind.DATE_ONLY),
    (SearchCriteria(start_date="2024-01-01"), CriteriaKind.DATE_ONLY),
    (SearchCriteria(start_date="2024-01-01", end_date="2024-01-02", distinguished=True),
     CriteriaKind.DATE_AND_DISTINGUISHED),
    (SearchCriteria(distinguished=True), CriteriaKind.DISTINGUISHED_ONLY),
    (SearchCriteria(max_price=100), CriteriaKind.UNSUPPORTED),
    (SearchCriteria(max_price=100, start_date="2024-01-01", end_date="2024-01-02"), CriteriaKind.UNSUPPORTED),
    (SearchCriteria(max_price=100, distinguished=True), CriteriaKind.UNSUPPORTED),
])
def test_resolve_criteria_kind(criteria, expected):
    assert resolve_criteria_kind(criteria) == expected


# --- search ---

@pytest.mark.asyncio
async def test_search_unfiltered_returns_store_output(engine, mock_repo, mock_reservations, mock_users, candidates):
    criteria = SearchCriteria(city="Novi Sad", country="Serbia", num_of_visitors=2, conveniences=["wifi"])

    result = await engine.search(criteria)

    assert result == candidates
    mock_repo.search.assert_called_once_with(
        city="Novi Sad", country="Serbia", num_of_visitors=2, max_price=0.0, conveniences=["wifi"],
    )
    mock_reservations.check_availability.assert_not_called()
    mock_users.get_user_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_search_date_only_removes_reserved(engine, mock_reservations, candidates):
    mock_reservations.check_availability.return_value = {str(candidates[1].id)}
    criteria = SearchCriteria(start_date="2024-01-01", end_date="2024-01-03")

    result = await engine.search(criteria)

    assert [a.name for a in result] == ["A", "C", "D"]
    ids, dates = mock_reservations.check_availability.call_args[0]
    assert ids == [str(a.id) for a in candidates]
    assert dates == ["2024-01-01", "2024-01-02", "2024-01-03"]


@pytest.mark.asyncio
async def test_search_reversed_dates_yield_nothing(engine, mock_reservations):
    criteria = SearchCriteria(start_date="2024-01-03", end_date="2024-01-01")

    result = await engine.search(criteria)

    assert result == []
    mock_reservations.check_availability.assert_not_called()


@pytest.mark.asyncio
async def test_search_missing_end_date_is_invalid(engine):
    with pytest.raises(InvalidDateFormat):
        await engine.search(SearchCriteria(start_date="2024-01-01"))


@pytest.mark.asyncio
async def test_search_no_candidates_skips_remote_calls(engine, mock_repo, mock_reservations):
    mock_repo.search.return_value = []

    result = await engine.search(SearchCriteria(start_date="2024-01-01", end_date="2024-01-02"))

    assert result == []
    mock_reservations.check_availability.assert_not_called()


@pytest.mark.asyncio
async def test_search_availability_failure_aborts(engine, mock_reservations):
    mock_reservations.check_availability.side_effect = RemoteServiceError("reservations down")

    with pytest.raises(AvailabilityCheckFailed):
        await engine.search(SearchCriteria(start_date="2024-01-01", end_date="2024-01-02"))


@pytest.mark.asyncio
async def test_search_availability_failure_is_a_search_failure(engine, mock_reservations):
    mock_reservations.check_availability.side_effect = RemoteServiceError("reservations down")

    with pytest.raises(SearchFailed):
        await engine.search(SearchCriteria(start_date="2024-01-01", end_date="2024-01-02"))


@pytest.mark.asyncio
async def test_search_store_failure(engine, mock_repo):
    mock_repo.search.side_effect = ConnectionRefusedError("postgres down")

    with pytest.raises(SearchFailed):
        await engine.search(SearchCriteria())


@pytest.mark.asyncio
async def test_search_distinguished_only(engine, mock_reservations, mock_users):
    result = await engine.search(SearchCriteria(distinguished=True))

    assert [a.name for a in result] == ["A", "C", "D"]
    mock_reservations.check_availability.assert_not_called()
    # One lookup per distinct owner
    assert sorted(c[0][0] for c in mock_users.get_user_by_id.call_args_list) == ["u1", "u2", "u3"]


@pytest.mark.asyncio
async def test_search_distinguished_tolerates_failing_owner(engine, mock_users, accommodation_factory, mock_repo):
    mock_repo.search.return_value = [
        accommodation_factory(name="Owned by u1", user_id="u1"),
        accommodation_factory(name="Owned by u2", user_id="u2"),
    ]

    async def get_user_by_id(user_id):
        if user_id == "u2":
            raise RemoteProfileFetchError("users service timeout")
        return UserProfile(id=user_id, distinguished=True)

    mock_users.get_user_by_id.side_effect = get_user_by_id

    result = await engine.search(SearchCriteria(distinguished=True))

    assert [a.name for a in result] == ["Owned by u1"]


@pytest.mark.asyncio
async def test_search_distinguished_excludes_missing_owner(engine, mock_users):
    async def get_user_by_id(user_id):
        if user_id == "u3":
            raise UserNotFound("gone")
        return UserProfile(id=user_id, distinguished=True)

    mock_users.get_user_by_id.side_effect = get_user_by_id

    result = await engine.search(SearchCriteria(distinguished=True))

    assert [a.name for a in result] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_search_dates_and_distinguished(engine, mock_reservations, mock_users, candidates):
    mock_reservations.check_availability.return_value = {str(candidates[0].id)}

    result = await engine.search(
        SearchCriteria(start_date="2024-01-01", end_date="2024-01-02", distinguished=True)
    )

    assert [a.name for a in result] == ["C", "D"]
    # Owners are looked up only for accommodations that survived the availability filter
    looked_up = sorted(c[0][0] for c in mock_users.get_user_by_id.call_args_list)
    assert looked_up == ["u1", "u2", "u3"]


@pytest.mark.asyncio
async def test_search_dates_and_distinguished_all_reserved(engine, mock_reservations, mock_users, candidates):
    mock_reservations.check_availability.return_value = {str(a.id) for a in candidates}

    result = await engine.search(
        SearchCriteria(start_date="2024-01-01", end_date="2024-01-02", distinguished=True)
    )

    assert result == []
    mock_users.get_user_by_id.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("criteria", [
    SearchCriteria(max_price=80),
    SearchCriteria(max_price=80, start_date="2024-01-01", end_date="2024-01-02"),
    SearchCriteria(max_price=80, distinguished=True),
])
async def test_search_unsupported_combinations(engine, mock_reservations, criteria):
    with pytest.raises(UnsupportedSearchCriteria):
        await engine.search(criteria)
    mock_reservations.check_availability.assert_not_called()


@pytest.mark.asyncio
async def test_search_is_idempotent(engine, mock_reservations, candidates):
    mock_reservations.check_availability.return_value = {str(candidates[3].id)}
    criteria = SearchCriteria(start_date="2024-01-01", end_date="2024-01-05", distinguished=True)

    first = await engine.search(criteria)
    second = await engine.search(criteria)

    assert first == second
