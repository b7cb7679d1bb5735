"""Domain models for shared-room occupancy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hotel.domain.constraints import validate_capacity, validate_identity, validate_u64
from hotel.domain.errors import (
    InvalidOccupancyWindowError,
    InvalidUpdateError,
    RoomAlreadyBookedError,
    RoomFullError,
    RoomNotBookedError,
)


@dataclass(frozen=True)
class Occupant:
    """One tenant's claim on a room.

    Two occupants are equal when their identities match; the time window is
    carried along but plays no part in equality or hashing.
    """

    identity: str
    start_time: int = field(compare=False)
    end_time: int = field(compare=False)

    def __post_init__(self) -> None:
        validate_identity(self.identity)
        validate_u64("start_time", self.start_time)
        validate_u64("end_time", self.end_time)
        if self.end_time <= self.start_time:
            raise InvalidOccupancyWindowError(
                f"end_time ({self.end_time}) must be greater than start_time ({self.start_time})"
            )


class RoomState(str, Enum):
    TOTALLY_VACANT = "TotallyVacant"
    PARTIALLY_OCCUPIED = "PartiallyOccupied"
    FULL = "Full"


@dataclass
class Room:
    number: int
    capacity: int
    price_per_occupant: int
    owner: Occupant
    occupants: list[Occupant] = field(default_factory=list)

    def __post_init__(self) -> None:
        validate_u64("number", self.number)
        validate_capacity(self.capacity)
        validate_u64("price_per_occupant", self.price_per_occupant)
        if len(self.occupants) > self.capacity:
            raise ValueError(
                f"room {self.number} holds {len(self.occupants)} occupants "
                f"but capacity is {self.capacity}"
            )
        if len(set(self.occupants)) != len(self.occupants):
            raise ValueError(f"room {self.number} has duplicate occupant identities")

    @classmethod
    def create(
        cls,
        number: int,
        capacity: int,
        price_per_occupant: int,
        owner: Occupant,
    ) -> "Room":
        return cls(
            number=number,
            capacity=capacity,
            price_per_occupant=price_per_occupant,
            owner=owner,
        )

    @property
    def state(self) -> RoomState:
        count = len(self.occupants)
        if count == 0:
            return RoomState.TOTALLY_VACANT
        if count == self.capacity:
            return RoomState.FULL
        return RoomState.PARTIALLY_OCCUPIED

    def add_occupant(self, occupant: Occupant) -> None:
        # Capacity exhaustion is reported ahead of a duplicate identity.
        if self.is_full():
            raise RoomFullError(f"Room {self.number} is full")
        if self.has_occupant(occupant) is not None:
            raise RoomAlreadyBookedError(
                f"Room {self.number} is already booked by {occupant.identity}"
            )
        self.occupants.append(occupant)

    def remove_occupant(self, occupant: Occupant) -> None:
        index = self.has_occupant(occupant)
        if index is None:
            raise RoomNotBookedError(f"Room {self.number} is not booked by {occupant.identity}")
        del self.occupants[index]

    def update(
        self,
        new_capacity: Optional[int] = None,
        new_price_per_occupant: Optional[int] = None,
    ) -> None:
        """Apply both fields or neither."""
        if new_capacity is not None:
            try:
                validate_capacity(new_capacity)
            except ValueError as exc:
                raise InvalidUpdateError(str(exc)) from exc
            if new_capacity < len(self.occupants):
                raise InvalidUpdateError(
                    f"capacity {new_capacity} is below the {len(self.occupants)} "
                    f"current occupants of room {self.number}"
                )
        if new_price_per_occupant is not None:
            try:
                validate_u64("price_per_occupant", new_price_per_occupant)
            except ValueError as exc:
                raise InvalidUpdateError(str(exc)) from exc

        if new_capacity is not None:
            self.capacity = new_capacity
        if new_price_per_occupant is not None:
            self.price_per_occupant = new_price_per_occupant

    def price_check(self, price: int) -> bool:
        return price == self.price_per_occupant

    def is_full(self) -> bool:
        return self.state is RoomState.FULL

    def has_occupant(self, occupant: Occupant) -> Optional[int]:
        """Return the position of the occupant with the same identity, if any."""
        for index, current in enumerate(self.occupants):
            if current.identity == occupant.identity:
                return index
        return None

    def is_owner(self, occupant: Occupant) -> bool:
        return self.owner.identity == occupant.identity
