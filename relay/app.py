from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .routers import status as status_router
from .routers import websockets as ws_router
from .session import SessionHandler
from .state import create_registry

logger = logging.getLogger(__name__)


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 4)


def create_app(room_code: Optional[str] = None) -> FastAPI:
    """Build the relay application; *room_code* overrides ``RELAY_ROOM_CODE``."""
    secret = config.ROOM_CODE if room_code is None else room_code

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        registry = create_registry()
        app.state.registry = registry
        app.state.session_handler = SessionHandler(registry, secret)
        logger.info("Prank Relay Server starting (room code %s)", _mask(secret))
        yield
        logger.info("Shutting down relay server with %d active rooms", len(registry))

    app = FastAPI(title="Prank Relay Server", lifespan=lifespan)

    # Relay clients are native apps and browser pages on arbitrary origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(status_router.router)
    app.include_router(ws_router.router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
