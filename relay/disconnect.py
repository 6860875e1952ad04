"""Room bookkeeping after a connection goes away."""
from __future__ import annotations

import logging

from . import constants as c
from .presence import broadcast_target_count
from .room import RoomRegistry
from .schemas import Notice
from .session import Role, Session
from .transport import Connection, broadcast

logger = logging.getLogger(__name__)


async def reconcile_disconnect(registry: RoomRegistry, ws: Connection, session: Session) -> None:
    """Detach *ws* from its room, drop the room if that emptied it, then notify the other side.

    Called exactly once per closed connection. Sessions that never joined
    have nothing to undo. All registry changes happen before the first
    ``await``.
    """
    if not session.joined or session.room_id is None:
        return

    room_id = session.room_id
    room = registry.get(room_id)
    if room is None:
        return

    if session.role is Role.CONTROLLER:
        if room.controller is not ws:
            # A newer controller took over; this one was already orphaned.
            logger.info("Orphaned controller %s left room %s", session.peer, room_id)
            return
        room.controller = None
        targets = list(room.targets)
        logger.info("Controller %s left room %s", session.peer, room_id)
        if registry.discard_if_empty(room_id):
            logger.info("Cleaned up empty room %s", room_id)
        await broadcast(targets, Notice(
            type=c.CONTROLLER_DISCONNECTED,
            message="Controller disconnected - entering standby mode",
        ))

    elif session.role is Role.TARGET:
        if not room.remove_target(ws):
            return
        count = room.target_count
        logger.info("Target %s left room %s (%d remaining)", session.peer, room_id, count)
        if count:
            followup = Notice(type=c.TARGET_UPDATE, count=count)
        else:
            followup = Notice(type=c.TARGET_LOST, message="Target disconnected - waiting for reconnection...")
        if registry.discard_if_empty(room_id):
            logger.info("Cleaned up empty room %s", room_id)
        await broadcast_target_count(registry, room_id, followup)


__all__ = ["reconcile_disconnect"]
