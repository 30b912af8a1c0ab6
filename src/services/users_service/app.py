import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.logger import log_info, TypeMsg
from src.config import settings
from src.infra.database import close_db, get_db, init_db
from src.infra.event_bus import close_event_bus, get_event_bus, init_event_bus
from src.services.users_service.routes import router
from src.shared.models.common import HealthStatus

SERVICE_NAME = "users_service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    os.environ.setdefault("SERVICE_NAME", SERVICE_NAME)
    await log_info("Starting Users Service...", type_msg=TypeMsg.INFO)
    await init_db()
    await init_event_bus(SERVICE_NAME)

    yield

    # Shutdown
    await log_info("Shutting down Users Service...", type_msg=TypeMsg.INFO)
    await close_event_bus()
    await close_db()


app = FastAPI(
    title="Users Service",
    description="Microservice for managing user profiles and ratings",
    version=settings.system.VERSION,
    lifespan=lifespan
)

app.include_router(router, prefix="/api/v1")


@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    dependencies = {
        "postgres": "ok" if await get_db().health_check() else "down",
        "rabbitmq": "ok" if await get_event_bus().health_check() else "down",
    }
    overall = "ok" if all(value == "ok" for value in dependencies.values()) else "degraded"
    return HealthStatus(service=SERVICE_NAME, status=overall, dependencies=dependencies)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.services.users_service.app:app",
        host="0.0.0.0",
        port=settings.deployment.USERS_SERVICE_PORT,
        reload=True
    )
