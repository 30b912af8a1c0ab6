# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Формат календарных дат во всех межсервисных запросах
DATE_FORMAT = "%Y-%m-%d"

# Значение query-параметра distinguished, включающее фильтр
DISTINGUISHED_TRUE = "true"
