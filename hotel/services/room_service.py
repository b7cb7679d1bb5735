"""Business logic for the room registry request handlers."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Optional

from hotel.domain.constraints import U64_MAX
from hotel.domain.errors import RoomError, RoomFullError
from hotel.domain.models import Occupant, Room
from hotel.repository.room_repository import RoomRepository
from hotel.utils.config import Settings, get_settings
from hotel.utils.logger import get_logger


logger = get_logger(__name__)

Clock = Callable[[], int]


class RegistryError(Exception):
    """Base exception for registry-level failures."""

    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Error")


class RoomNotFoundError(RegistryError):
    """Raised when no room is stored under the requested number."""

    def __init__(self, number: int) -> None:
        super().__init__(f"Room {number} not found")
        self.number = number


class RoomAlreadyExistsError(RegistryError):
    """Raised when creating a room whose number is already taken."""

    def __init__(self, number: int) -> None:
        super().__init__(f"Room {number} already exists")
        self.number = number


class InvalidPriceError(RegistryError):
    """Raised when the offered price differs from the room's price."""


class NotRoomOwnerError(RegistryError):
    """Raised when ownership is enforced and the caller did not create the room."""


@dataclass
class _RoomLock:
    lock: RLock = field(default_factory=RLock)
    holders: int = 0


class RoomRegistryService:
    """Dispatches single-room operations against the room store.

    Each room number has its own lock, and every mutation runs as
    load, mutate, save while holding it. A mutation rejected by the room or by
    the storage size bound is never written back.
    """

    def __init__(
        self,
        repository: Optional[RoomRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or RoomRepository(self._settings)
        self._clock: Clock = clock or time.time_ns
        self._locks: dict[int, _RoomLock] = {}
        self._locks_guard = Lock()

    @property
    def repository(self) -> RoomRepository:
        return self._repository

    @property
    def active_lock_count(self) -> int:
        with self._locks_guard:
            return len(self._locks)

    @contextmanager
    def _exclusive(self, number: int) -> Iterator[None]:
        # Entries live only while some request holds or waits on them.
        with self._locks_guard:
            entry = self._locks.get(number)
            if entry is None:
                entry = self._locks[number] = _RoomLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[number]

    def occupant_for(self, caller: str) -> Occupant:
        """Build the caller's occupancy window starting now."""
        start = self._clock()
        end = min(start + self._settings.default_stay_nanoseconds, U64_MAX)
        return Occupant(caller, start, end)

    def _load(self, number: int) -> Room:
        room = self._repository.get_room(number)
        if room is None:
            raise RoomNotFoundError(number)
        return room

    def _store(self, room: Room) -> None:
        if not self._repository.save_room(room):
            raise RoomNotFoundError(room.number)

    def _check_owner(self, room: Room, caller: Occupant) -> None:
        if self._settings.enforce_room_ownership and not room.is_owner(caller):
            raise NotRoomOwnerError(f"{caller.identity} does not own room {room.number}")

    def create_room(
        self,
        number: int,
        capacity: int,
        price_per_occupant: int,
        caller: str,
    ) -> Room:
        room = Room.create(number, capacity, price_per_occupant, self.occupant_for(caller))
        with self._exclusive(number):
            if not self._repository.insert_room(room):
                logger.info("Creation of room %s by %s rejected: RoomAlreadyExists", number, caller)
                raise RoomAlreadyExistsError(number)
        logger.info("Room %s created by %s (capacity=%s)", number, caller, capacity)
        return room

    def get_room(self, number: int) -> Room:
        with self._exclusive(number):
            return self._load(number)

    def book_room(self, number: int, price: int, caller: str) -> Room:
        occupant = self.occupant_for(caller)
        with self._exclusive(number):
            room = self._load(number)
            try:
                if room.is_full():
                    raise RoomFullError(f"Room {number} is full")
                if not room.price_check(price):
                    raise InvalidPriceError(
                        f"Offered price {price} does not match room {number} "
                        f"price {room.price_per_occupant}"
                    )
                room.add_occupant(occupant)
            except (RoomError, RegistryError) as exc:
                logger.info("Booking of room %s by %s rejected: %s", number, caller, exc.kind)
                raise
            self._store(room)
        logger.info("Room %s booked by %s (state=%s)", number, caller, room.state.value)
        return room

    def unbook_room(self, number: int, caller: str) -> Room:
        occupant = self.occupant_for(caller)
        with self._exclusive(number):
            room = self._load(number)
            try:
                room.remove_occupant(occupant)
            except RoomError as exc:
                logger.info("Unbooking of room %s by %s rejected: %s", number, caller, exc.kind)
                raise
            self._store(room)
        logger.info("Room %s unbooked by %s (state=%s)", number, caller, room.state.value)
        return room

    def update_room(
        self,
        number: int,
        caller: str,
        capacity: Optional[int] = None,
        price_per_occupant: Optional[int] = None,
    ) -> Room:
        with self._exclusive(number):
            room = self._load(number)
            try:
                self._check_owner(room, self.occupant_for(caller))
                room.update(new_capacity=capacity, new_price_per_occupant=price_per_occupant)
            except (RoomError, RegistryError) as exc:
                logger.info("Update of room %s by %s rejected: %s", number, caller, exc.kind)
                raise
            self._store(room)
        logger.info(
            "Room %s updated by %s (capacity=%s, price_per_occupant=%s)",
            number,
            caller,
            room.capacity,
            room.price_per_occupant,
        )
        return room

    def delete_room(self, number: int, caller: str) -> bool:
        """Remove the room; returns False when nothing was stored under ``number``."""
        with self._exclusive(number):
            if self._settings.enforce_room_ownership:
                room = self._repository.get_room(number)
                if room is None:
                    return False
                self._check_owner(room, self.occupant_for(caller))
            deleted = self._repository.delete_room(number)
        if deleted:
            logger.info("Room %s deleted by %s", number, caller)
        return deleted

    def count_rooms(self) -> int:
        return self._repository.count_rooms()
