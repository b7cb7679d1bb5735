"""HTTP controller layer for single-room operations."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import BaseModel, ConfigDict, Field

from hotel.controllers.dependencies import get_caller_identity, get_room_service
from hotel.domain.constraints import U64_MAX
from hotel.domain.errors import (
    InvalidUpdateError,
    RoomAlreadyBookedError,
    RoomError,
    RoomFullError,
    RoomNotBookedError,
)
from hotel.domain.models import Occupant, Room
from hotel.repository.room_codec import RoomCodecError, RoomTooLargeError
from hotel.services.room_service import (
    InvalidPriceError,
    NotRoomOwnerError,
    RegistryError,
    RoomAlreadyExistsError,
    RoomNotFoundError,
    RoomRegistryService,
)
from hotel.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    RoomNotFoundError: status.HTTP_404_NOT_FOUND,
    RoomAlreadyExistsError: status.HTTP_409_CONFLICT,
    RoomFullError: status.HTTP_409_CONFLICT,
    RoomAlreadyBookedError: status.HTTP_409_CONFLICT,
    RoomNotBookedError: status.HTTP_409_CONFLICT,
    InvalidPriceError: status.HTTP_400_BAD_REQUEST,
    InvalidUpdateError: status.HTTP_400_BAD_REQUEST,
    NotRoomOwnerError: status.HTTP_403_FORBIDDEN,
    RoomTooLargeError: status.HTTP_413_CONTENT_TOO_LARGE,
}


class CreateRoomRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    number: int = Field(ge=0, le=U64_MAX)
    capacity: int = Field(ge=1, le=U64_MAX)
    price_per_occupant: int = Field(ge=0, le=U64_MAX)


class BookRoomRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    price: int = Field(ge=0, le=U64_MAX)


class UpdateRoomRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    # Range checks beyond sign are left to the room so they surface as InvalidUpdate.
    capacity: Optional[int] = Field(default=None, ge=0, le=U64_MAX)
    price_per_occupant: Optional[int] = Field(default=None, ge=0, le=U64_MAX)


class OccupantResponse(BaseModel):
    identity: str
    start_time: int
    end_time: int

    @classmethod
    def from_occupant(cls, occupant: Occupant) -> "OccupantResponse":
        return cls(
            identity=occupant.identity,
            start_time=occupant.start_time,
            end_time=occupant.end_time,
        )


class RoomResponse(BaseModel):
    number: int
    state: str
    capacity: int
    price_per_occupant: int
    owner: OccupantResponse
    occupants: list[OccupantResponse]

    @classmethod
    def from_room(cls, room: Room) -> "RoomResponse":
        return cls(
            number=room.number,
            state=room.state.value,
            capacity=room.capacity,
            price_per_occupant=room.price_per_occupant,
            owner=OccupantResponse.from_occupant(room.owner),
            occupants=[OccupantResponse.from_occupant(item) for item in room.occupants],
        )


class RoomOperationResponse(BaseModel):
    message: str
    room: RoomResponse


class DeleteRoomResponse(BaseModel):
    number: int
    deleted: bool


def _http_error(exc: Exception) -> HTTPException:
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    kind = getattr(exc, "kind", type(exc).__name__.removesuffix("Error"))
    return HTTPException(
        status_code=status_code,
        detail={"error": kind, "message": str(exc)},
    )


RoomNumber = Annotated[int, Path(ge=0, le=U64_MAX, description="Room number")]


@router.post(
    "",
    response_model=RoomOperationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_room(
    payload: CreateRoomRequest,
    caller: str = Depends(get_caller_identity),
    service: RoomRegistryService = Depends(get_room_service),
) -> RoomOperationResponse:
    try:
        room = service.create_room(
            number=payload.number,
            capacity=payload.capacity,
            price_per_occupant=payload.price_per_occupant,
            caller=caller,
        )
        return RoomOperationResponse(
            message="Room created successfully!",
            room=RoomResponse.from_room(room),
        )
    except (RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "InvalidRoom", "message": str(exc)},
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure creating room %s", payload.number)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create room",
        ) from exc


@router.get("/{number}", response_model=RoomResponse)
async def get_room(
    number: RoomNumber,
    service: RoomRegistryService = Depends(get_room_service),
) -> RoomResponse:
    try:
        return RoomResponse.from_room(service.get_room(number))
    except (RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc


@router.post("/{number}/book", response_model=RoomOperationResponse)
async def book_room(
    payload: BookRoomRequest,
    number: RoomNumber,
    caller: str = Depends(get_caller_identity),
    service: RoomRegistryService = Depends(get_room_service),
) -> RoomOperationResponse:
    try:
        room = service.book_room(number=number, price=payload.price, caller=caller)
        return RoomOperationResponse(
            message="Room successfully booked",
            room=RoomResponse.from_room(room),
        )
    except (RoomError, RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure booking room %s", number)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to book room",
        ) from exc


@router.post("/{number}/unbook", response_model=RoomOperationResponse)
async def unbook_room(
    number: RoomNumber,
    caller: str = Depends(get_caller_identity),
    service: RoomRegistryService = Depends(get_room_service),
) -> RoomOperationResponse:
    try:
        room = service.unbook_room(number=number, caller=caller)
        return RoomOperationResponse(
            message="Room unbooked successfully!",
            room=RoomResponse.from_room(room),
        )
    except (RoomError, RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure unbooking room %s", number)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unbook room",
        ) from exc


@router.patch("/{number}", response_model=RoomOperationResponse)
async def update_room(
    payload: UpdateRoomRequest,
    number: RoomNumber,
    caller: str = Depends(get_caller_identity),
    service: RoomRegistryService = Depends(get_room_service),
) -> RoomOperationResponse:
    try:
        room = service.update_room(
            number=number,
            caller=caller,
            capacity=payload.capacity,
            price_per_occupant=payload.price_per_occupant,
        )
        return RoomOperationResponse(
            message="Room updated successfully!",
            room=RoomResponse.from_room(room),
        )
    except (RoomError, RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected failure updating room %s", number)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update room",
        ) from exc


@router.delete("/{number}", response_model=DeleteRoomResponse)
async def delete_room(
    number: RoomNumber,
    caller: str = Depends(get_caller_identity),
    service: RoomRegistryService = Depends(get_room_service),
) -> DeleteRoomResponse:
    try:
        deleted = service.delete_room(number=number, caller=caller)
    except (RegistryError, RoomCodecError) as exc:
        raise _http_error(exc) from exc
    return DeleteRoomResponse(number=number, deleted=deleted)


class HealthResponse(BaseModel):
    status: str
    rooms: int = Field(ge=0)


health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
async def health(
    service: RoomRegistryService = Depends(get_room_service),
) -> HealthResponse:
    try:
        return HealthResponse(status="ok", rooms=service.count_rooms())
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Room store health check failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Room store is unavailable",
        ) from exc
