# src/services/users_service/__init__.py
"""
Users Service: профили пользователей, рейтинг и статус distinguished.
"""
