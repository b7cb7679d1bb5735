"""Tests for room occupancy transitions and their invariants."""

from __future__ import annotations

import pytest

from hotel.domain.errors import (
    InvalidUpdateError,
    RoomAlreadyBookedError,
    RoomFullError,
    RoomNotBookedError,
)
from hotel.domain.models import Occupant, Room, RoomState


def occupant(identity: str, start_time: int = 1_000, end_time: int = 2_000) -> Occupant:
    return Occupant(identity, start_time, end_time)


def new_room(capacity: int = 2, number: int = 7, price: int = 100) -> Room:
    return Room.create(number, capacity, price, occupant("owner"))


def assert_invariants(room: Room) -> None:
    count = len(room.occupants)
    assert count <= room.capacity
    assert len({item.identity for item in room.occupants}) == count
    if count == 0:
        assert room.state is RoomState.TOTALLY_VACANT
    elif count == room.capacity:
        assert room.state is RoomState.FULL
    else:
        assert room.state is RoomState.PARTIALLY_OCCUPIED


def test_new_room_is_vacant() -> None:
    room = new_room()
    assert room.state is RoomState.TOTALLY_VACANT
    assert room.occupants == []
    assert room.owner.identity == "owner"
    assert not room.is_full()


def test_scenario_fill_reject_and_release() -> None:
    room = new_room(capacity=2)

    room.add_occupant(occupant("A"))
    assert room.state is RoomState.PARTIALLY_OCCUPIED

    room.add_occupant(occupant("B"))
    assert room.state is RoomState.FULL

    with pytest.raises(RoomFullError):
        room.add_occupant(occupant("C"))

    room.remove_occupant(occupant("A"))
    assert room.state is RoomState.PARTIALLY_OCCUPIED
    assert [item.identity for item in room.occupants] == ["B"]


def test_capacity_one_goes_straight_to_full() -> None:
    room = new_room(capacity=1)
    room.add_occupant(occupant("A"))
    assert room.state is RoomState.FULL
    assert room.is_full()


def test_capacity_boundary_accepts_exactly_capacity() -> None:
    room = new_room(capacity=2)
    room.add_occupant(occupant("A"))
    room.add_occupant(occupant("B"))
    assert room.state is RoomState.FULL
    with pytest.raises(RoomFullError):
        room.add_occupant(occupant("C"))
    assert len(room.occupants) == 2


def test_duplicate_identity_is_rejected_without_change() -> None:
    room = new_room(capacity=3)
    room.add_occupant(occupant("A", 1, 2))
    with pytest.raises(RoomAlreadyBookedError):
        room.add_occupant(occupant("A", 50, 60))
    assert len(room.occupants) == 1
    assert room.occupants[0].start_time == 1


def test_full_is_reported_before_duplicate() -> None:
    room = new_room(capacity=1)
    room.add_occupant(occupant("A"))
    with pytest.raises(RoomFullError):
        room.add_occupant(occupant("A"))


def test_occupants_keep_booking_order() -> None:
    room = new_room(capacity=4)
    for identity in ["C", "A", "D", "B"]:
        room.add_occupant(occupant(identity))
    assert [item.identity for item in room.occupants] == ["C", "A", "D", "B"]


def test_removal_boundary() -> None:
    room = new_room(capacity=2)
    room.add_occupant(occupant("A"))
    room.remove_occupant(occupant("A", 9_000, 9_999))
    assert room.state is RoomState.TOTALLY_VACANT
    assert room.occupants == []
    with pytest.raises(RoomNotBookedError):
        room.remove_occupant(occupant("A"))


def test_remove_from_full_room_becomes_partial() -> None:
    room = new_room(capacity=2)
    room.add_occupant(occupant("A"))
    room.add_occupant(occupant("B"))
    room.remove_occupant(occupant("B"))
    assert room.state is RoomState.PARTIALLY_OCCUPIED


def test_remove_unknown_identity_is_rejected() -> None:
    room = new_room()
    room.add_occupant(occupant("A"))
    with pytest.raises(RoomNotBookedError):
        room.remove_occupant(occupant("Z"))
    assert len(room.occupants) == 1


def test_update_guard() -> None:
    room = new_room(capacity=3)
    for identity in ["A", "B", "C"]:
        room.add_occupant(occupant(identity))

    with pytest.raises(InvalidUpdateError):
        room.update(new_capacity=2)
    assert room.capacity == 3

    room.update(new_capacity=5)
    assert room.capacity == 5
    assert room.state is RoomState.PARTIALLY_OCCUPIED


def test_update_is_atomic() -> None:
    room = new_room(capacity=2, price=100)
    room.add_occupant(occupant("A"))
    room.add_occupant(occupant("B"))
    with pytest.raises(InvalidUpdateError):
        room.update(new_capacity=1, new_price_per_occupant=250)
    assert room.capacity == 2
    assert room.price_per_occupant == 100


def test_update_price_only() -> None:
    room = new_room(price=100)
    room.update(new_price_per_occupant=120)
    assert room.price_per_occupant == 120
    assert room.capacity == 2


def test_update_with_no_fields_changes_nothing() -> None:
    room = new_room(capacity=2, price=100)
    room.update()
    assert (room.capacity, room.price_per_occupant) == (2, 100)


def test_update_to_exact_occupant_count_makes_room_full() -> None:
    room = new_room(capacity=4)
    room.add_occupant(occupant("A"))
    room.add_occupant(occupant("B"))
    room.update(new_capacity=2)
    assert room.state is RoomState.FULL


@pytest.mark.parametrize("capacity", [0, -1])
def test_update_rejects_capacity_below_one(capacity: int) -> None:
    room = new_room()
    with pytest.raises(InvalidUpdateError):
        room.update(new_capacity=capacity)
    assert room.capacity == 2


def test_update_rejects_negative_price() -> None:
    room = new_room(price=100)
    with pytest.raises(InvalidUpdateError):
        room.update(new_price_per_occupant=-5)
    assert room.price_per_occupant == 100


def test_create_rejects_zero_capacity() -> None:
    with pytest.raises(ValueError):
        new_room(capacity=0)


def test_price_check() -> None:
    room = new_room(price=100)
    assert room.price_check(100)
    assert not room.price_check(99)


def test_has_occupant_returns_position() -> None:
    room = new_room(capacity=3)
    room.add_occupant(occupant("A"))
    room.add_occupant(occupant("B"))
    assert room.has_occupant(occupant("B", 7, 8)) == 1
    assert room.has_occupant(occupant("A")) == 0
    assert room.has_occupant(occupant("Z")) is None


def test_is_owner_matches_identity_regardless_of_window() -> None:
    room = new_room()
    assert room.is_owner(occupant("owner", 50_000, 60_000))
    assert not room.is_owner(occupant("someone-else"))


def test_invariants_hold_through_mixed_sequence() -> None:
    room = new_room(capacity=3)
    steps = [
        ("add", "A"), ("add", "B"), ("add", "A"), ("add", "C"), ("add", "D"),
        ("remove", "B"), ("remove", "B"), ("add", "D"), ("remove", "A"),
        ("remove", "C"), ("remove", "D"), ("remove", "D"),
    ]
    for action, identity in steps:
        try:
            if action == "add":
                room.add_occupant(occupant(identity))
            else:
                room.remove_occupant(occupant(identity))
        except (RoomFullError, RoomAlreadyBookedError, RoomNotBookedError):
            pass
        assert_invariants(room)
    assert room.state is RoomState.TOTALLY_VACANT


def test_error_kinds() -> None:
    assert RoomFullError().kind == "RoomFull"
    assert RoomAlreadyBookedError().kind == "RoomAlreadyBooked"
    assert RoomNotBookedError().kind == "RoomNotBooked"
    assert InvalidUpdateError().kind == "InvalidUpdate"


def test_constructor_rejects_overbooked_room() -> None:
    with pytest.raises(ValueError):
        Room(1, 1, 10, occupant("owner"), [occupant("A"), occupant("B")])


def test_constructor_rejects_duplicate_identities() -> None:
    with pytest.raises(ValueError):
        Room(1, 3, 10, occupant("owner"), [occupant("A"), occupant("A", 5, 6)])
