"""The slice of a WebSocket the relay core depends on."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Protocol
from weakref import WeakKeyDictionary

from fastapi import WebSocketDisconnect
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Anything that can push a JSON frame to one peer (``fastapi.WebSocket`` does)."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


# One lock per peer keeps frames to that peer in the order they were produced,
# while a slow peer only ever holds up senders that target it.
_send_locks: "WeakKeyDictionary[Any, asyncio.Lock]" = WeakKeyDictionary()


def _send_lock(ws: Connection) -> asyncio.Lock:
    lock = _send_locks.get(ws)
    if lock is None:
        lock = _send_locks[ws] = asyncio.Lock()
    return lock


def _as_data(message: BaseModel | dict) -> dict:
    return message.model_dump(exclude_none=True) if isinstance(message, BaseModel) else message


async def deliver(ws: Connection, data: dict) -> None:
    """Send *data* to *ws* after any frames already queued for it; raises on failure."""
    async with _send_lock(ws):
        await ws.send_json(data)


async def send_message(ws: Connection, *messages: BaseModel | dict) -> bool:
    """Send *messages* to *ws* back to back, returning ``False`` instead of raising on failure."""
    frames = [_as_data(m) for m in messages]
    try:
        async with _send_lock(ws):
            for data in frames:
                await ws.send_json(data)
    except Exception as exc:
        logger.warning("Failed to send %s: %s", ", ".join(f.get("type", "?") for f in frames), exc)
        return False
    return True


async def broadcast(recipients: Iterable[Connection], message: BaseModel | dict) -> List[Optional[BaseException]]:
    """Send *message* to all *recipients* concurrently.

    Returns one entry per recipient in order: ``None`` on success, the raised
    exception otherwise. Nothing propagates.
    """
    data = _as_data(message)
    results = await asyncio.gather(
        *(deliver(ws, data) for ws in recipients),
        return_exceptions=True,
    )
    errors: List[Optional[BaseException]] = []
    for result in results:
        if isinstance(result, BaseException):
            logger.warning("Failed to send %s: %s", data.get("type", "?"), result)
            errors.append(result)
        else:
            errors.append(None)
    return errors


_DISCONNECT_ERRORS = (ConnectionResetError, BrokenPipeError, EOFError)
_DISCONNECT_FRAGMENTS = (
    "websocket is not connected",
    'cannot call "receive" once a disconnect message has been received',
)


def is_expected_disconnect(exc: BaseException) -> bool:
    """Return True when *exc* is ordinary transport teardown rather than a bug."""
    if isinstance(exc, (WebSocketDisconnect, *_DISCONNECT_ERRORS)):
        return True
    if isinstance(exc, RuntimeError):
        text = str(exc).lower()
        return any(fragment in text for fragment in _DISCONNECT_FRAGMENTS)
    return False


__all__ = ["Connection", "deliver", "send_message", "broadcast", "is_expected_disconnect"]
