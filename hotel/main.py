"""FastAPI application bootstrap and lifecycle wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from hotel.controllers.room_controller import health_router
from hotel.controllers.room_controller import router as room_router
from hotel.repository.room_repository import RoomRepository
from hotel.services.room_service import RoomRegistryService
from hotel.utils.config import Settings, get_settings
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app with its repository and registry service on ``app.state``."""
    settings = settings or get_settings()
    repository = RoomRepository(settings)
    room_service = RoomRegistryService(repository=repository, settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(room_router)
    app.include_router(health_router)

    app.state.settings = settings
    app.state.repository = repository
    app.state.room_service = room_service

    return app


def startup(app: FastAPI) -> None:
    """Create the room table; safe to repeat on every restart."""
    repository: RoomRepository = app.state.repository
    repository.initialize_database()
    logger.info("Startup complete; %s rooms stored", repository.count_rooms())


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "hotel.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
