# src/services/users_service/validation.py
"""
Правила валидации профиля пользователя.
"""

from __future__ import annotations

import re
from typing import List

from src.common.exceptions import ValidationIssue
from src.shared.models.user_dto import CreateUserRequest

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,30}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_AGE = 18


def validate_user(user: CreateUserRequest) -> List[ValidationIssue]:
    """Возвращает все нарушенные правила."""
    issues: List[ValidationIssue] = []

    if not USERNAME_PATTERN.match(user.username):
        issues.append(ValidationIssue(
            "username", "Username must be 3-30 characters: letters, digits, '_' or '.'",
        ))
    if not EMAIL_PATTERN.match(user.email):
        issues.append(ValidationIssue("email", "Email is not valid"))
    for field in ("first_name", "last_name", "residence"):
        value = getattr(user, field)
        if value is not None and not value.strip():
            issues.append(ValidationIssue(field, f"{field.replace('_', ' ').capitalize()} cannot be blank"))
    if user.age is not None and user.age < MIN_AGE:
        issues.append(ValidationIssue("age", f"User must be at least {MIN_AGE} years old"))

    return issues
