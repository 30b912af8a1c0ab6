# src/services/accommodations_service/search.py
"""
Search filter engine for accommodations.

Candidates come from the local store; the engine then removes listings
reserved for the requested dates (Reservations Service) and, when asked,
listings whose owner is not distinguished (Users Service).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from src.common.constants import DATE_FORMAT, TypeMsg
from src.common.exceptions import (
    AvailabilityCheckFailed,
    InvalidDateFormat,
    RemoteServiceError,
    SearchFailed,
    UnsupportedSearchCriteria,
)
from src.common.logger import log_error, log_info
from src.services.accommodations_service.clients import ReservationsClient, UserClient
from src.services.accommodations_service.repository import AccommodationRepository
from src.shared.models.accommodation_dto import AccommodationDTO, SearchCriteria
from src.shared.models.user_dto import UserProfile


class CriteriaKind(str, Enum):
    UNFILTERED = "unfiltered"
    DATE_ONLY = "date_only"
    DATE_AND_DISTINGUISHED = "date_and_distinguished"
    DISTINGUISHED_ONLY = "distinguished_only"
    UNSUPPORTED = "unsupported"

    def __str__(self) -> str:
        return self.value


def resolve_criteria_kind(criteria: SearchCriteria) -> CriteriaKind:
    """Maps a combination of search filters onto the branch that serves it."""
    if criteria.has_price_ceiling:
        # Price ceiling is never combined with remote filters, not even alone
        return CriteriaKind.UNSUPPORTED
    if criteria.has_dates and criteria.distinguished:
        return CriteriaKind.DATE_AND_DISTINGUISHED
    if criteria.has_dates:
        return CriteriaKind.DATE_ONLY
    if criteria.distinguished:
        return CriteriaKind.DISTINGUISHED_ONLY
    return CriteriaKind.UNFILTERED


def generate_date_range(start_date: str, end_date: str) -> List[str]:
    """
    Expands an inclusive date range into YYYY-MM-DD strings.

    An end date before the start date yields an empty list.

    Raises:
        InvalidDateFormat: a bound is missing or is not a calendar date
    """
    try:
        start = datetime.strptime(start_date, DATE_FORMAT).date()
        end = datetime.strptime(end_date, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise InvalidDateFormat(f"Invalid date range {start_date!r} - {end_date!r}: expected YYYY-MM-DD") from e

    days = (end - start).days
    return [(start + timedelta(days=offset)).strftime(DATE_FORMAT) for offset in range(days + 1)]


def remove_accommodations(
    accommodations: Iterable[AccommodationDTO],
    reserved_ids: Iterable[str],
) -> List[AccommodationDTO]:
    """Drops accommodations whose id is reserved, keeping the order of the rest."""
    excluded = {str(reserved_id) for reserved_id in reserved_ids}
    return [accommodation for accommodation in accommodations if str(accommodation.id) not in excluded]


class AccommodationSearchEngine:
    def __init__(
        self,
        repository: AccommodationRepository,
        reservations_client: ReservationsClient,
        user_client: UserClient,
    ):
        self.repository = repository
        self.reservations_client = reservations_client
        self.user_client = user_client

    async def search(self, criteria: SearchCriteria) -> List[AccommodationDTO]:
        """
        Runs a search.

        Raises:
            SearchFailed: the store query failed
            InvalidDateFormat: the date range cannot be parsed
            AvailabilityCheckFailed: the Reservations Service call failed
            UnsupportedSearchCriteria: the filter combination has no branch
        """
        kind = resolve_criteria_kind(criteria)

        try:
            candidates = await self.repository.search(
                city=criteria.city,
                country=criteria.country,
                num_of_visitors=criteria.num_of_visitors,
                max_price=criteria.max_price,
                conveniences=criteria.conveniences,
            )
        except Exception as e:
            await log_error(f"Accommodation store query failed: {e}")
            raise SearchFailed("Failed to find accommodations") from e

        await log_info(f"Search [{kind}]: {len(candidates)} candidates", type_msg=TypeMsg.DEBUG)

        match kind:
            case CriteriaKind.UNFILTERED:
                return candidates
            case CriteriaKind.DATE_ONLY:
                return await self._filter_available(candidates, criteria)
            case CriteriaKind.DATE_AND_DISTINGUISHED:
                available = await self._filter_available(candidates, criteria)
                return await self._filter_distinguished(available)
            case CriteriaKind.DISTINGUISHED_ONLY:
                return await self._filter_distinguished(candidates)
            case _:
                raise UnsupportedSearchCriteria(
                    "Price ceiling cannot be combined with date or distinguished filters"
                )

    async def _filter_available(
        self,
        candidates: List[AccommodationDTO],
        criteria: SearchCriteria,
    ) -> List[AccommodationDTO]:
        dates = generate_date_range(criteria.start_date, criteria.end_date)
        if not dates or not candidates:
            return []

        ids = [str(accommodation.id) for accommodation in candidates]
        try:
            reserved_ids = await self.reservations_client.check_availability(ids, dates)
        except RemoteServiceError as e:
            await log_error(f"Availability check failed: {e}")
            raise AvailabilityCheckFailed("Failed to get reserved ids") from e

        return remove_accommodations(candidates, reserved_ids)

    async def _filter_distinguished(self, candidates: List[AccommodationDTO]) -> List[AccommodationDTO]:
        """Keeps accommodations whose owner is distinguished. Owners that cannot be fetched are excluded."""
        owner_ids = list(dict.fromkeys(accommodation.user_id for accommodation in candidates))
        if not owner_ids:
            return []

        results = await asyncio.gather(
            *(self.user_client.get_user_by_id(owner_id) for owner_id in owner_ids),
            return_exceptions=True,
        )

        distinguished: dict[str, bool] = {}
        for owner_id, result in zip(owner_ids, results):
            if isinstance(result, BaseException):
                await log_error(f"Failed to fetch owner {owner_id}: {result}")
                continue
            distinguished[owner_id] = self._is_distinguished(result)

        return [accommodation for accommodation in candidates if distinguished.get(accommodation.user_id, False)]

    @staticmethod
    def _is_distinguished(profile: Optional[UserProfile]) -> bool:
        return profile is not None and profile.distinguished
