# src/services/accommodations_service/app.py
"""
FastAPI приложение Accommodations Service.

Endpoints:
- GET /api/v1/accommodations/search - поиск с фильтрами
- GET /api/v1/accommodations/ - все размещения
- POST /api/v1/accommodations/ - создать (multipart: accommodation + image)
- POST /api/v1/accommodations/find - размещения по списку id
- GET /api/v1/accommodations/images/{image_id} - изображение
- GET/PUT/DELETE /api/v1/accommodations/{id}
- PUT /api/v1/accommodations/{id}/rating - рейтинг
- DELETE /api/v1/accommodations/user/{user_id} - размещения владельца
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.logger import log_info, TypeMsg
from src.config import settings
from src.infra.database import close_db, get_db, init_db
from src.infra.event_bus import close_event_bus, get_event_bus, init_event_bus
from src.infra.redis_client import close_redis, get_redis, init_redis
from src.services.accommodations_service.dependencies import (
    cleanup_dependencies,
    get_accommodation_service,
    init_dependencies,
)
from src.services.accommodations_service.routes import router
from src.shared.models.common import HealthStatus

SERVICE_NAME = "accommodations_service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.environ.setdefault("SERVICE_NAME", SERVICE_NAME)
    await log_info("Starting Accommodations Service...", type_msg=TypeMsg.INFO)

    await init_db()
    await init_redis()
    await init_event_bus(SERVICE_NAME)
    await init_dependencies(get_db(), get_redis(), get_event_bus())

    await get_event_bus().subscribe(
        "user.deleted",
        get_accommodation_service().handle_user_deleted,
        queue_name="accommodations.user_deleted",
    )

    yield

    await log_info("Shutting down Accommodations Service...", type_msg=TypeMsg.INFO)
    await cleanup_dependencies()
    await close_event_bus()
    await close_redis()
    await close_db()


app = FastAPI(
    title="Accommodations Service",
    description="Accommodations, search and availability filtering",
    version=settings.system.VERSION,
    lifespan=lifespan
)

app.include_router(router, prefix="/api/v1")


@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    dependencies = {
        "postgres": "ok" if await get_db().health_check() else "down",
        "redis": "ok" if await get_redis().health_check() else "down",
        "rabbitmq": "ok" if await get_event_bus().health_check() else "down",
    }
    overall = "ok" if all(value == "ok" for value in dependencies.values()) else "degraded"
    return HealthStatus(service=SERVICE_NAME, status=overall, dependencies=dependencies)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.services.accommodations_service.app:app",
        host="0.0.0.0",
        port=settings.deployment.ACCOMMODATIONS_SERVICE_PORT,
        reload=True
    )
