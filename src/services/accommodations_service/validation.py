# src/services/accommodations_service/validation.py
"""
Правила валидации размещений.
Функции чистые: возвращают все нарушенные правила, ничего не бросают.
"""

from __future__ import annotations

from typing import List, Union

from src.common.exceptions import ValidationIssue
from src.shared.models.accommodation_dto import (
    AvailabilityPeriodDTO,
    CreateAccommodationRequest,
    UpdateAccommodationRequest,
)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100


def validate_accommodation(
    accommodation: Union[CreateAccommodationRequest, UpdateAccommodationRequest],
) -> List[ValidationIssue]:
    """Проверяет поля размещения. Для запроса на создание также владельца и календарь."""
    issues: List[ValidationIssue] = []

    name = accommodation.name.strip()
    if not name:
        issues.append(ValidationIssue("name", "Name is required"))
    elif not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        issues.append(ValidationIssue(
            "name", f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
        ))

    for field in ("address", "city", "country"):
        if not getattr(accommodation, field).strip():
            issues.append(ValidationIssue(field, f"{field.capitalize()} is required"))

    if accommodation.min_visitors < 1:
        issues.append(ValidationIssue("min_visitors", "Minimum number of visitors must be at least 1"))
    if accommodation.max_visitors < accommodation.min_visitors:
        issues.append(ValidationIssue(
            "max_visitors", "Maximum number of visitors cannot be lower than the minimum",
        ))

    if accommodation.price < 0:
        issues.append(ValidationIssue("price", "Price cannot be negative"))

    if any(not convenience.strip() for convenience in accommodation.conveniences):
        issues.append(ValidationIssue("conveniences", "Conveniences cannot contain empty values"))

    if isinstance(accommodation, CreateAccommodationRequest):
        if not accommodation.user_id.strip():
            issues.append(ValidationIssue("user_id", "Owner is required"))
        if accommodation.email is not None and "@" not in accommodation.email:
            issues.append(ValidationIssue("email", "Email is not valid"))
        issues.extend(validate_availability(accommodation.availability))

    return issues


def validate_availability(periods: List[AvailabilityPeriodDTO]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for index, period in enumerate(periods):
        if period.end_date < period.start_date:
            issues.append(ValidationIssue(
                f"availability[{index}]", "Availability end date cannot precede its start date",
            ))
        if period.price < 0:
            issues.append(ValidationIssue(f"availability[{index}]", "Availability price cannot be negative"))
    return issues


def validate_image(content: bytes, max_bytes: int) -> List[ValidationIssue]:
    if not content:
        return [ValidationIssue("image", "Image is required")]
    if len(content) > max_bytes:
        return [ValidationIssue("image", f"Image exceeds {max_bytes} bytes")]
    return []
