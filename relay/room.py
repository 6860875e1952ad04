from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .transport import Connection

# NOTE: rooms only hold borrowed references to connections. The websocket
# endpoint owns each connection and is the only place that closes it.


class Room:
    """One controller slot plus the targets that joined, in join order."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.controller: Optional[Connection] = None
        self.targets: List[Connection] = []

    # -------------------- Membership -------------------- #

    def add_target(self, ws: Connection) -> int:
        """Append *ws* and return the new target count."""
        self.targets.append(ws)
        return len(self.targets)

    def remove_target(self, ws: Connection) -> bool:
        """Drop *ws* by identity; positions of the other targets are irrelevant."""
        for idx, existing in enumerate(self.targets):
            if existing is ws:
                del self.targets[idx]
                return True
        return False

    @property
    def target_count(self) -> int:
        return len(self.targets)

    def is_empty(self) -> bool:
        return self.controller is None and not self.targets

    def __repr__(self) -> str:
        return (
            f"Room({self.room_id!r}, controller={self.controller is not None}, "
            f"targets={len(self.targets)})"
        )


class RoomRegistry:
    """In-memory map of room id → :class:`Room`.

    Not thread-safe. It is owned by one event loop, and callers finish each
    read-modify-write sequence before their first ``await``, so no other
    event observes a half-applied change.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}

    def get_or_create(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id)
            self._rooms[room_id] = room
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def remove(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)

    def discard_if_empty(self, room_id: str) -> bool:
        """Remove the room when it has neither controller nor targets."""
        room = self._rooms.get(room_id)
        if room is not None and room.is_empty():
            del self._rooms[room_id]
            return True
        return False

    def room_ids(self) -> List[str]:
        return list(self._rooms)

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))


__all__ = ["Room", "RoomRegistry"]
