"""Runtime state owned by the application.

The registry is created once per app (see ``relay.app``) and stored on
``app.state.registry``. Routers fetch it from there and hand it to the
protocol handlers explicitly instead of importing a module-level singleton.
"""
from __future__ import annotations

from fastapi import Request, WebSocket

from .room import RoomRegistry


def create_registry() -> RoomRegistry:
    return RoomRegistry()


def get_registry(request: Request) -> RoomRegistry:
    return request.app.state.registry


def get_ws_registry(ws: WebSocket) -> RoomRegistry:
    return ws.app.state.registry


__all__ = ["create_registry", "get_registry", "get_ws_registry"]
