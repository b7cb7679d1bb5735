"""Domain-level validation rules for room and occupant fields."""

from __future__ import annotations


U64_MAX = 2**64 - 1


def validate_u64(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must be between 0 and {U64_MAX}")


def validate_capacity(capacity: object) -> None:
    validate_u64("capacity", capacity)
    if capacity < 1:  # type: ignore[operator]
        raise ValueError("capacity must be >= 1")


def validate_identity(identity: object) -> None:
    if not isinstance(identity, str) or not identity.strip():
        raise ValueError("identity must be a non-empty string")
