"""Shared fakes for relay tests."""

from __future__ import annotations

from typing import Any

import pytest

from relay.room import RoomRegistry
from relay.session import SessionHandler

ROOM = "R"


class FakeConnection:
    """Records every frame sent to it; optionally fails on send."""

    def __init__(self, name: str, *, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    async def send_json(self, data: Any, mode: str = "text") -> None:
        if self.fail:
            raise ConnectionResetError(f"{self.name} is gone")
        self.sent.append(data)

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]

    def last(self) -> dict[str, Any]:
        return self.sent[-1]

    def clear(self) -> None:
        self.sent.clear()

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


def assert_registry_invariant(registry: RoomRegistry) -> None:
    for room in registry:
        assert not room.is_empty(), f"{room!r} should have been removed"


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def handler(registry: RoomRegistry) -> SessionHandler:
    return SessionHandler(registry, ROOM)
