"""Unit tests for the room registry."""

from __future__ import annotations

from relay.room import Room, RoomRegistry

from conftest import FakeConnection


def test_get_or_create_returns_same_room() -> None:
    registry = RoomRegistry()
    first = registry.get_or_create("abc")
    assert registry.get_or_create("abc") is first
    assert len(registry) == 1
    assert "abc" in registry


def test_get_missing_room_is_none() -> None:
    assert RoomRegistry().get("nope") is None


def test_remove_is_idempotent() -> None:
    registry = RoomRegistry()
    registry.get_or_create("abc")
    registry.remove("abc")
    registry.remove("abc")
    assert len(registry) == 0


def test_discard_if_empty_keeps_occupied_rooms() -> None:
    registry = RoomRegistry()
    room = registry.get_or_create("abc")
    room.controller = FakeConnection("ctrl")
    assert registry.discard_if_empty("abc") is False
    room.controller = None
    assert registry.discard_if_empty("abc") is True
    assert registry.room_ids() == []


def test_remove_target_by_identity_preserves_others() -> None:
    room = Room("abc")
    a, b, c = FakeConnection("a"), FakeConnection("b"), FakeConnection("c")
    for target in (a, b, c):
        room.add_target(target)

    assert room.remove_target(b) is True
    assert room.targets == [a, c]
    assert room.remove_target(b) is False
    assert room.target_count == 2


def test_room_is_empty() -> None:
    room = Room("abc")
    assert room.is_empty()
    room.add_target(FakeConnection("t"))
    assert not room.is_empty()
