#!/usr/bin/env python3
# main.py
"""
Главная точка входа booking services.
Запускает один микросервис или все сразу в зависимости от COMPONENT_MODE.
Подключения к PostgreSQL, Redis и RabbitMQ открывает lifespan каждого сервиса.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Callable

from src.config import settings
from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import TypeMsg


# Глобальный флаг для graceful shutdown
_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        """Обработчик сигналов SIGINT и SIGTERM."""
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


async def serve(title: str, app_path: str, port: int) -> None:
    """Запускает FastAPI приложение сервиса через uvicorn."""
    import uvicorn

    await log_info(f"Запуск {title} на порту {port}...", type_msg=TypeMsg.INFO)

    config = uvicorn.Config(
        app_path,
        host="0.0.0.0",
        port=port,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info(f"{title}: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_accommodations_service() -> None:
    """Запускает Accommodations Service (размещения, поиск)."""
    await serve(
        "Accommodations Service",
        "src.services.accommodations_service.app:app",
        settings.deployment.ACCOMMODATIONS_SERVICE_PORT,
    )


async def run_reservations_service() -> None:
    """Запускает Reservations Service (доступность, бронирования)."""
    await serve(
        "Reservations Service",
        "src.services.reservations_service.app:app",
        settings.deployment.RESERVATIONS_SERVICE_PORT,
    )


async def run_users_service() -> None:
    """Запускает Users Service (профили, рейтинг)."""
    await serve(
        "Users Service",
        "src.services.users_service.app:app",
        settings.deployment.USERS_SERVICE_PORT,
    )


RUNNERS: dict[str, Callable[[], object]] = {
    "accommodations_service": run_accommodations_service,
    "reservations_service": run_reservations_service,
    "users_service": run_users_service,
}


async def run_all() -> None:
    """Запускает все микросервисы параллельно в одном процессе."""
    global _running_tasks

    await log_info("Запуск всех микросервисов (accommodations, reservations, users)...", type_msg=TypeMsg.INFO)
    _running_tasks = [asyncio.create_task(runner()) for runner in RUNNERS.values()]

    try:
        await asyncio.gather(*_running_tasks, return_exceptions=True)
    except asyncio.CancelledError:
        await log_info("Отмена всех микросервисов...", type_msg=TypeMsg.INFO)
        for task in _running_tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*_running_tasks, return_exceptions=True)
        raise


async def main(mode: str | None = None) -> None:
    """
    Главная функция запуска.

    Args:
        mode: Имя сервиса или "all". Если None, берётся из COMPONENT_MODE.
    """
    setup_logging()
    setup_signal_handlers()

    mode = mode or settings.system.COMPONENT_MODE

    await log_info(
        f"Booking services v{settings.system.VERSION}: запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO
    )

    if mode == "all":
        await run_all()
    elif mode in RUNNERS:
        await RUNNERS[mode]()
    else:
        await log_error(f"Неизвестный режим: {mode}. Доступны: all, {', '.join(RUNNERS)}")


def print_usage() -> None:
    print("Использование: python main.py [all | " + " | ".join(RUNNERS) + "]")
    print("Без аргумента режим берётся из COMPONENT_MODE (config/config.json или окружение).")


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg == "all" or arg in RUNNERS:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
