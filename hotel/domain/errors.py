"""Failures reported by room state transitions."""

from __future__ import annotations


class RoomError(Exception):
    """Base exception for rejected room operations."""

    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Error")


class RoomFullError(RoomError):
    """Raised when a booking is attempted on a room at capacity."""


class RoomAlreadyBookedError(RoomError):
    """Raised when the occupant identity already holds a slot."""


class RoomNotBookedError(RoomError):
    """Raised when the occupant identity holds no slot."""


class InvalidUpdateError(RoomError):
    """Raised when an update would break the capacity invariant."""


class InvalidOccupancyWindowError(ValueError):
    """Raised when an occupancy window does not end after it starts."""
