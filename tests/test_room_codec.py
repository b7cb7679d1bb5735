"""Tests for the room storage encoding."""

from __future__ import annotations

import json

import pytest

from hotel.domain.constraints import U64_MAX
from hotel.domain.models import Occupant, Room, RoomState
from hotel.repository.room_codec import (
    RoomDecodeError,
    RoomTooLargeError,
    decode_room,
    encode_bounded,
    encode_room,
)


def _room_with_guests() -> Room:
    room = Room.create(7, 3, 100, Occupant("owner", 10, 20))
    room.add_occupant(Occupant("guest-b", 30, 40))
    room.add_occupant(Occupant("guest-a", 50, 60))
    return room


def _snapshot(room: Room) -> tuple:
    return (
        room.number,
        room.capacity,
        room.price_per_occupant,
        room.state,
        (room.owner.identity, room.owner.start_time, room.owner.end_time),
        [(item.identity, item.start_time, item.end_time) for item in room.occupants],
    )


def test_round_trip_preserves_every_field() -> None:
    room = _room_with_guests()
    restored = decode_room(encode_room(room))
    assert _snapshot(restored) == _snapshot(room)
    assert restored == room


def test_round_trip_at_u64_limits() -> None:
    room = Room.create(U64_MAX, U64_MAX, U64_MAX, Occupant("owner", 0, U64_MAX))
    restored = decode_room(encode_room(room))
    assert _snapshot(restored) == _snapshot(room)


def test_encoded_form_is_json_with_derived_state() -> None:
    document = json.loads(encode_room(_room_with_guests()))
    assert document["state"] == RoomState.PARTIALLY_OCCUPIED.value
    assert [item["identity"] for item in document["occupants"]] == ["guest-b", "guest-a"]


def _tamper(**changes) -> bytes:
    document = json.loads(encode_room(_room_with_guests()))
    document.update(changes)
    return json.dumps(document).encode("utf-8")


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"{}",
        _tamper(capacity=1),
        _tamper(state="Full"),
        _tamper(state="Overbooked"),
        _tamper(capacity="3"),
        _tamper(price_per_occupant=-1),
        _tamper(unexpected=True),
        _tamper(owner={"identity": "owner", "start_time": 20, "end_time": 10}),
        _tamper(
            occupants=[
                {"identity": "dup", "start_time": 1, "end_time": 2},
                {"identity": "dup", "start_time": 3, "end_time": 4},
            ]
        ),
    ],
)
def test_invalid_payloads_raise_decode_error(payload: bytes) -> None:
    with pytest.raises(RoomDecodeError):
        decode_room(payload)


def test_encode_bounded_rejects_large_rooms() -> None:
    room = Room.create(1, 20, 5, Occupant("owner", 1, 2))
    for index in range(20):
        room.add_occupant(Occupant(f"guest-{index:02d}", 1_000_000, 2_000_000))
    size = len(encode_room(room))
    with pytest.raises(RoomTooLargeError) as excinfo:
        encode_bounded(room, max_bytes=size - 1)
    assert excinfo.value.size == size
    assert excinfo.value.limit == size - 1
    assert encode_bounded(room, max_bytes=size) == encode_room(room)


def test_default_bound_is_one_thousand_bytes() -> None:
    room = Room.create(1, 100, 5, Occupant("owner", 1, 2))
    for index in range(30):
        room.add_occupant(Occupant(f"guest-{index:02d}", 1_000_000, 2_000_000))
    assert len(encode_room(room)) > 1000
    with pytest.raises(RoomTooLargeError):
        encode_bounded(room)
