# src/common/exceptions.py
"""
Иерархия исключений сервисов.
Каждое исключение несёт HTTP-статус, в который его переводят роутеры.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """Базовая ошибка бизнес-логики."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================

@dataclass(frozen=True)
class ValidationIssue:
    """Одно нарушенное правило валидации."""
    field: str
    message: str


class ValidationError(ServiceError):
    """Некорректные входные данные. Содержит все нарушенные правила."""

    status_code = 400

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        super().__init__("\n".join(issue.message for issue in self.issues))


class InvalidDateFormat(ServiceError):
    """Дата не соответствует формату YYYY-MM-DD."""

    status_code = 400


# =============================================================================
# ПОИСК
# =============================================================================

class SearchFailed(ServiceError):
    """Поиск прерван целиком."""

    status_code = 500


class AvailabilityCheckFailed(SearchFailed):
    """Reservations Service не ответил на проверку доступности."""


class UnsupportedSearchCriteria(SearchFailed):
    """Комбинация фильтров, которую поиск пока не поддерживает."""

    status_code = 501


# =============================================================================
# ЖИЗНЕННЫЙ ЦИКЛ
# =============================================================================

class AvailabilityRegistrationFailed(ServiceError):
    """Не удалось зарегистрировать календарь доступности размещения."""

    status_code = 500


class AccommodationSaveFailed(ServiceError):
    """Не удалось сохранить размещение в хранилище."""

    status_code = 500


class NotFoundError(ServiceError):
    """Сущность не найдена."""

    status_code = 404


class AccommodationNotFound(NotFoundError):
    pass


class ImageNotFound(NotFoundError):
    pass


class UserNotFound(NotFoundError):
    pass


class ReservationNotFound(NotFoundError):
    pass


class UserAlreadyExists(ServiceError):
    """Имя пользователя или email уже заняты."""

    status_code = 409


class ReservationConflict(ServiceError):
    """Даты бронирования пересекаются или выходят за доступность."""

    status_code = 409


# =============================================================================
# МЕЖСЕРВИСНЫЕ ВЫЗОВЫ
# =============================================================================

class RemoteServiceError(ServiceError):
    """Удалённый сервис недоступен или ответил ошибкой."""

    status_code = 502


class RemoteProfileFetchError(RemoteServiceError):
    """Не удалось получить профиль владельца из Users Service."""


class CircuitOpenError(RemoteServiceError):
    """Circuit breaker открыт, вызов не выполнялся."""

    status_code = 503
