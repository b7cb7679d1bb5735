"""Byte-level storage format for rooms."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hotel.domain.constraints import U64_MAX
from hotel.domain.models import Occupant, Room, RoomState


DEFAULT_MAX_ROOM_BYTES = 1000


class RoomCodecError(Exception):
    """Base exception for room encoding failures."""


class RoomDecodeError(RoomCodecError):
    """Raised when stored bytes do not describe a valid room."""


class RoomTooLargeError(RoomCodecError):
    """Raised when an encoded room exceeds the storage size bound."""

    def __init__(self, number: int, size: int, limit: int) -> None:
        super().__init__(
            f"Room {number} encodes to {size} bytes, above the {limit} byte limit"
        )
        self.number = number
        self.size = size
        self.limit = limit


class OccupantPayload(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    identity: str = Field(min_length=1)
    start_time: int = Field(ge=0, le=U64_MAX)
    end_time: int = Field(ge=0, le=U64_MAX)

    @classmethod
    def from_occupant(cls, occupant: Occupant) -> "OccupantPayload":
        return cls(
            identity=occupant.identity,
            start_time=occupant.start_time,
            end_time=occupant.end_time,
        )

    def to_occupant(self) -> Occupant:
        return Occupant(self.identity, self.start_time, self.end_time)


class RoomPayload(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    number: int = Field(ge=0, le=U64_MAX)
    capacity: int = Field(ge=1, le=U64_MAX)
    price_per_occupant: int = Field(ge=0, le=U64_MAX)
    state: str
    owner: OccupantPayload
    occupants: list[OccupantPayload]

    @classmethod
    def from_room(cls, room: Room) -> "RoomPayload":
        return cls(
            number=room.number,
            capacity=room.capacity,
            price_per_occupant=room.price_per_occupant,
            state=room.state.value,
            owner=OccupantPayload.from_occupant(room.owner),
            occupants=[OccupantPayload.from_occupant(item) for item in room.occupants],
        )

    def to_room(self) -> Room:
        room = Room(
            number=self.number,
            capacity=self.capacity,
            price_per_occupant=self.price_per_occupant,
            owner=self.owner.to_occupant(),
            occupants=[item.to_occupant() for item in self.occupants],
        )
        if room.state is not RoomState(self.state):
            raise ValueError(
                f"stored state {self.state} does not match {room.state.value} "
                f"implied by {len(room.occupants)}/{room.capacity} occupants"
            )
        return room


def encode_room(room: Room) -> bytes:
    return RoomPayload.from_room(room).model_dump_json().encode("utf-8")


def decode_room(data: bytes) -> Room:
    try:
        return RoomPayload.model_validate_json(data).to_room()
    except (ValidationError, ValueError) as exc:
        raise RoomDecodeError(f"Stored room payload is invalid: {exc}") from exc


def encode_bounded(room: Room, max_bytes: int = DEFAULT_MAX_ROOM_BYTES) -> bytes:
    """Encode ``room`` and reject payloads above ``max_bytes``."""
    data = encode_room(room)
    if len(data) > max_bytes:
        raise RoomTooLargeError(room.number, len(data), max_bytes)
    return data
