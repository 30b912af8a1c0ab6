# src/services/accommodations_service/images.py
"""
Хранилище изображений размещений.
Файлы лежат в IMAGES_DIR, горячие изображения кэшируются в Redis.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from uuid import UUID, uuid4

from src.common.constants import TypeMsg
from src.common.exceptions import ImageNotFound
from src.common.logger import log_error, log_info
from src.infra.redis_client import RedisClient


class ImageStore:
    """Файловое хранилище с кэшем в Redis."""

    def __init__(self, redis: RedisClient, images_dir: Path, ttl: int = 3600) -> None:
        self.redis = redis
        self.images_dir = Path(images_dir)
        self.ttl = ttl

    @staticmethod
    def _cache_key(image_id: str) -> str:
        return f"image:{image_id}"

    def _path(self, image_id: str) -> Path:
        # id генерируется как uuid4().hex, всё остальное не может быть файлом хранилища
        try:
            file_name = UUID(hex=image_id).hex
        except ValueError:
            raise ImageNotFound(f"Image {image_id} not found")
        return self.images_dir / file_name

    async def save(self, content: bytes) -> str:
        """Сохраняет изображение и возвращает его id."""
        image_id = uuid4().hex
        path = self._path(image_id)

        await asyncio.to_thread(self._write, path, content)
        await self._cache(image_id, content)

        await log_info(f"Изображение сохранено: {image_id} ({len(content)} байт)", type_msg=TypeMsg.DEBUG)
        return image_id

    async def get(self, image_id: str) -> bytes:
        """
        Возвращает изображение: сначала из кэша, затем из файла (с прогревом кэша).

        Raises:
            ImageNotFound: изображения нет ни в кэше, ни в хранилище
        """
        path = self._path(image_id)

        try:
            cached = await self.redis.get_bytes(self._cache_key(image_id))
        except Exception as e:
            await log_error(f"Ошибка чтения изображения {image_id} из кэша: {e}")
            cached = None
        if cached is not None:
            return cached

        try:
            content = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise ImageNotFound(f"Image {image_id} not found")

        await self._cache(image_id, content)
        return content

    async def delete(self, image_id: str) -> None:
        path = self._path(image_id)
        await asyncio.to_thread(path.unlink, True)
        await self.redis.delete(self._cache_key(image_id))

    async def _cache(self, image_id: str, content: bytes) -> None:
        """Кэш не обязателен: ошибка Redis только логируется."""
        try:
            await self.redis.set_bytes(self._cache_key(image_id), content, ttl=self.ttl)
        except Exception as e:
            await log_error(f"Ошибка записи изображения {image_id} в кэш: {e}")

    @staticmethod
    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
