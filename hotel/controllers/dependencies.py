"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import Header, HTTPException, Request, status

from hotel.services.room_service import RoomRegistryService
from hotel.utils.config import get_settings


CALLER_HEADER = "X-Caller-Id"


def get_room_service(request: Request) -> RoomRegistryService:
    service = getattr(request.app.state, "room_service", None)
    if service is None:
        repository = getattr(request.app.state, "repository", None)
        if repository is not None:
            settings = getattr(request.app.state, "settings", None) or get_settings()
            service = RoomRegistryService(repository=repository, settings=settings)
            request.app.state.room_service = service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Room service is not initialized",
        )
    return service


async def get_caller_identity(
    x_caller_id: str | None = Header(default=None, alias=CALLER_HEADER),
) -> str:
    """Resolve the calling tenant from the identity header."""
    if x_caller_id is None or not x_caller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{CALLER_HEADER} header is required",
        )
    return x_caller_id.strip()
