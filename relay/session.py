"""Per-connection protocol state machine.

A connection starts :attr:`Role.UNJOINED` and may join exactly once, either
as the room's controller or as one of its targets. Everything after that is
dispatched on the session's role. The handler never raises for protocol
problems: rejections go back to the offending socket as ``error`` frames and
malformed frames are dropped.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from . import constants as c
from .messages import MalformedMessage, parse_message
from .presence import broadcast_target_count, target_count_frames
from .room import RoomRegistry
from .schemas import (
    DeliveryReceipt,
    ErrorMessage,
    JoinRequest,
    Notice,
    RelayedPayload,
    RelayRequest,
)
from .transport import Connection, broadcast, send_message

logger = logging.getLogger(__name__)


class Role(str, Enum):
    UNJOINED = "unjoined"
    CONTROLLER = "controller"
    TARGET = "target"


@dataclass
class Session:
    """Role and room of one live connection."""

    peer: str = "unknown"
    role: Role = Role.UNJOINED
    room_id: Optional[str] = None

    @property
    def joined(self) -> bool:
        return self.role is not Role.UNJOINED

    def bind(self, role: Role, room_id: str) -> None:
        if self.joined:
            raise RuntimeError(f"session already joined as {self.role.value}")
        self.role = role
        self.room_id = room_id


@dataclass
class DeliveryOutcome:
    index: int
    ok: bool
    error: Optional[str] = None


@dataclass
class FanOutResult:
    outcomes: List[DeliveryOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def delivered(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)


async def send_error(ws: Connection, error_code: str, message: str) -> None:
    await send_message(ws, ErrorMessage(error_code=error_code, message=message))


class SessionHandler:
    """Dispatches inbound frames against a shared :class:`RoomRegistry`."""

    def __init__(self, registry: RoomRegistry, room_code: str):
        self.registry = registry
        self.room_code = room_code
        self._routes = {
            c.CONTROLLER_JOIN: self.handle_controller_join,
            c.TARGET_JOIN: self.handle_target_join,
            c.RELAY_MESSAGE: self.handle_relay,
            c.PING: self.handle_ping,
        }

    # ---------------------------------------------------------------------
    # Entry points
    # ---------------------------------------------------------------------

    async def handle_raw(self, ws: Connection, session: Session, raw: str) -> None:
        """Parse one text frame and dispatch it; malformed frames are dropped."""
        try:
            message = parse_message(raw)
        except MalformedMessage as exc:
            logger.debug("Discarding malformed frame from %s: %s", session.peer, exc)
            return
        await self.dispatch(ws, session, message)

    async def dispatch(self, ws: Connection, session: Session, message: Dict[str, Any]) -> None:
        """Route *message* to its handler.

        Handlers apply their registry changes before their first ``await``, so
        on a single event loop each change lands in one piece. Sends happen
        afterwards and only ever wait on the peer they are addressed to.
        """
        kind = message.get("type")
        logger.info("Received %s from %s", kind, session.peer)
        route = self._routes.get(kind)
        if route is None:
            logger.warning("Unknown message type %r from %s", kind, session.peer)
            return
        await route(ws, session, message)

    # ---------------------------------------------------------------------
    # Joins
    # ---------------------------------------------------------------------

    async def _check_join(self, ws: Connection, session: Session, message: Dict[str, Any]) -> Optional[str]:
        """Return the validated room code, or ``None`` after replying with an error."""
        if session.joined:
            logger.warning("%s tried to join again (already %s)", session.peer, session.role.value)
            await send_error(ws, c.ALREADY_JOINED, f"Already joined as {session.role.value}")
            return None
        try:
            room_code = JoinRequest.model_validate(message).roomCode
        except ValidationError:
            room_code = None
        if room_code is None or room_code != self.room_code:
            logger.warning("Rejected %s from %s: invalid room code", message.get("type"), session.peer)
            await send_error(ws, c.INVALID_ROOM_CODE, "Invalid room code")
            return None
        return room_code

    async def handle_controller_join(self, ws: Connection, session: Session, message: Dict[str, Any]) -> None:
        room_id = await self._check_join(ws, session, message)
        if room_id is None:
            return

        room = self.registry.get_or_create(room_id)
        if room.controller is not None and room.controller is not ws:
            # Last joiner wins; the previous socket stays open but is no longer routed to.
            logger.info("Replacing controller of room %s", room_id)
        room.controller = ws
        session.bind(Role.CONTROLLER, room_id)
        count = room.target_count
        logger.info("Controller %s joined room %s (%d targets)", session.peer, room_id, count)

        if count:
            followup = Notice(type=c.TARGET_ACQUIRED, count=count, message="Target is online and ready!")
        else:
            followup = Notice(type=c.WAITING_FOR_TARGET, message="Waiting for target to come online...")
        await broadcast_target_count(self.registry, room_id, followup)

    async def handle_target_join(self, ws: Connection, session: Session, message: Dict[str, Any]) -> None:
        room_id = await self._check_join(ws, session, message)
        if room_id is None:
            return

        room = self.registry.get_or_create(room_id)
        count = room.add_target(ws)
        session.bind(Role.TARGET, room_id)
        logger.info("Target %s joined room %s (%d targets)", session.peer, room_id, count)

        controller, frames = target_count_frames(
            self.registry,
            room_id,
            Notice(type=c.TARGET_ACQUIRED, count=count, message="Target acquired!"),
        )
        sends = [send_message(ws, Notice(type=c.CONNECTED, message="Connected to relay server"))]
        if controller is not None:
            sends.append(send_message(controller, *frames))
        # A slow controller must not hold back this target's confirmation.
        await asyncio.gather(*sends)

    # ---------------------------------------------------------------------
    # Relay
    # ---------------------------------------------------------------------

    async def handle_relay(self, ws: Connection, session: Session, message: Dict[str, Any]) -> None:
        if session.role is not Role.CONTROLLER:
            await send_error(ws, c.NOT_CONTROLLER, "Only controllers may relay messages")
            return

        room = self.registry.get(session.room_id) if session.room_id else None
        if room is not None and room.controller is not ws:
            await send_error(ws, c.NOT_CONTROLLER, "Another controller has taken over this room")
            return
        if room is None or not room.targets:
            await send_error(ws, c.NO_TARGETS, "No targets connected")
            return

        try:
            request = RelayRequest.model_validate(message)
        except ValidationError:
            logger.warning("Discarding relay_message without payload from %s", session.peer)
            return

        payload_kind = request.payload.get("type") if isinstance(request.payload, dict) else None
        logger.info("Forwarding %s to %d targets in room %s", payload_kind, room.target_count, room.room_id)

        # Snapshot the targets now; joins and leaves during the fan-out do not change the total.
        result = await self.fan_out(list(room.targets), RelayedPayload(payload=request.payload))
        await send_message(ws, DeliveryReceipt(
            delivered=result.delivered,
            total=result.total,
            message=f"Delivered to {result.delivered}/{result.total} targets",
        ))

    async def fan_out(self, recipients: List[Connection], frame: RelayedPayload) -> FanOutResult:
        """Send *frame* to every recipient concurrently; one failure never stops the rest."""
        errors = await broadcast(recipients, frame.model_dump())
        result = FanOutResult()
        for idx, error in enumerate(errors):
            if error is None:
                result.outcomes.append(DeliveryOutcome(index=idx, ok=True))
            else:
                result.outcomes.append(DeliveryOutcome(index=idx, ok=False, error=str(error)))
        return result

    # ---------------------------------------------------------------------
    # Keep-alive
    # ---------------------------------------------------------------------

    async def handle_ping(self, ws: Connection, session: Session, message: Dict[str, Any]) -> None:
        await send_message(ws, {"type": c.PONG})


__all__ = [
    "Role",
    "Session",
    "DeliveryOutcome",
    "FanOutResult",
    "SessionHandler",
    "send_error",
]
