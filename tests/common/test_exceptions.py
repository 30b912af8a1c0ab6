# tests/common/test_exceptions.py
"""
Тесты иерархии исключений и HTTP-статусов.
"""

import pytest

from src.common.exceptions import (
    AccommodationNotFound,
    AccommodationSaveFailed,
    AvailabilityCheckFailed,
    AvailabilityRegistrationFailed,
    CircuitOpenError,
    InvalidDateFormat,
    RemoteProfileFetchError,
    RemoteServiceError,
    ReservationConflict,
    SearchFailed,
    ServiceError,
    UnsupportedSearchCriteria,
    UserAlreadyExists,
    ValidationError,
    ValidationIssue,
)


class TestStatusCodes:
    """Каждое исключение переводится в свой HTTP-статус."""

    @pytest.mark.parametrize("exc_class, status_code", [
        (InvalidDateFormat, 400),
        (SearchFailed, 500),
        (AvailabilityCheckFailed, 500),
        (UnsupportedSearchCriteria, 501),
        (AvailabilityRegistrationFailed, 500),
        (AccommodationSaveFailed, 500),
        (AccommodationNotFound, 404),
        (UserAlreadyExists, 409),
        (ReservationConflict, 409),
        (RemoteServiceError, 502),
        (CircuitOpenError, 503),
    ])
    def test_default_status(self, exc_class: type[ServiceError], status_code: int) -> None:
        assert exc_class("message").status_code == status_code

    def test_status_override(self) -> None:
        assert ServiceError("teapot", status_code=418).status_code == 418

    def test_search_failures_share_base(self) -> None:
        """Любая ошибка поиска ловится как SearchFailed."""
        assert issubclass(AvailabilityCheckFailed, SearchFailed)
        assert issubclass(UnsupportedSearchCriteria, SearchFailed)
        assert issubclass(RemoteProfileFetchError, RemoteServiceError)


class TestValidationError:
    """Тесты для ValidationError."""

    def test_message_joins_issues(self) -> None:
        error = ValidationError([
            ValidationIssue("name", "Name is required"),
            ValidationIssue("price", "Price cannot be negative"),
        ])

        assert error.message == "Name is required\nPrice cannot be negative"
        assert error.status_code == 400
        assert [issue.field for issue in error.issues] == ["name", "price"]
