#!/usr/bin/env python3
# entrypoint_accommodations_service.py
"""
Точка входа для Accommodations Service.
Порт: 8081
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию в путь
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

import uvicorn

from src.config import settings
from src.common.logger import log_info, setup_logging
from src.common.constants import TypeMsg


async def main() -> None:
    """Запуск Accommodations Service."""
    setup_logging()
    await log_info(
        f"Запуск Accommodations Service на порту {settings.deployment.ACCOMMODATIONS_SERVICE_PORT}",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.accommodations_service.app:app",
        host="0.0.0.0",
        port=settings.deployment.ACCOMMODATIONS_SERVICE_PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
