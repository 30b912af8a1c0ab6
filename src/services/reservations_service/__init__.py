# src/services/reservations_service/__init__.py
"""
Reservations Service: календари доступности и бронирования размещений.
"""
