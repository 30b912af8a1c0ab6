# src/services/__init__.py
"""
Микросервисы приложения.

Архитектура:
- Каждый сервис — независимое FastAPI-приложение
- Общая PostgreSQL с логическим разделением по схемам
- Коммуникация через HTTP (синхронно, за circuit breaker) и RabbitMQ (события)
- Redis для кэширования изображений

Сервисы:
- accommodations_service: размещения, поиск с фильтрацией по доступности и владельцам
- reservations_service: календари доступности и бронирования
- users_service: профили пользователей, рейтинг и статус distinguished
"""

__all__: list[str] = []
