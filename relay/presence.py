"""Target presence notifications pushed to a room's controller."""
from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel

from .constants import TARGET_COUNT
from .room import RoomRegistry
from .schemas import Notice
from .transport import Connection, send_message


def target_count_frames(
    registry: RoomRegistry, room_id: str, *followups: BaseModel
) -> Tuple[Optional[Connection], List[BaseModel]]:
    """Snapshot the controller of *room_id* and the frames announcing its current target count.

    Returns ``(None, [])`` when the room or its controller is gone.
    """
    room = registry.get(room_id)
    if room is None or room.controller is None:
        return None, []
    return room.controller, [Notice(type=TARGET_COUNT, count=room.target_count), *followups]


async def broadcast_target_count(registry: RoomRegistry, room_id: str, *followups: BaseModel) -> None:
    """Tell the controller of *room_id* how many targets are connected.

    *followups* go out right behind the count to the same controller.
    Silently does nothing when the room or its controller is gone.
    """
    controller, frames = target_count_frames(registry, room_id, *followups)
    if controller is None:
        return
    await send_message(controller, *frames)


__all__ = ["target_count_frames", "broadcast_target_count"]
