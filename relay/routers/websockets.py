from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..disconnect import reconcile_disconnect
from ..session import Session, SessionHandler
from ..state import get_ws_registry
from ..transport import is_expected_disconnect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


def _peer(ws: WebSocket) -> str:
    client = ws.client
    return f"{client.host}:{client.port}" if client else "unknown"


async def _receive_frame(ws: WebSocket) -> Optional[str]:
    """Return the next text frame, or ``None`` for binary frames that are not UTF-8."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000), reason=message.get("reason"))
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


@router.websocket("/")
@router.websocket("/ws")
async def relay_ws_endpoint(ws: WebSocket):
    await ws.accept()
    registry = get_ws_registry(ws)
    handler: SessionHandler = ws.app.state.session_handler
    session = Session(peer=_peer(ws))
    logger.info("New connection from %s", session.peer)

    try:
        while True:
            raw = await _receive_frame(ws)
            if raw is None:
                logger.debug("Discarding undecodable frame from %s", session.peer)
                continue
            await handler.handle_raw(ws, session, raw)
    except WebSocketDisconnect:
        logger.info("Connection closed from %s", session.peer)
    except Exception as exc:
        if is_expected_disconnect(exc):
            logger.info("Connection from %s dropped: %s", session.peer, exc)
        else:
            logger.exception("WebSocket error from %s", session.peer)
    finally:
        await reconcile_disconnect(registry, ws, session)
