# src/services/accommodations_service/__init__.py
"""
Accommodations Service: размещения, поиск с фильтрами доступности
и distinguished-владельцев, изображения.
"""
