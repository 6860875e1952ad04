"""Runtime configuration read from the environment.

Everything here is resolved once at import time. ``create_app`` accepts an
explicit ``room_code`` override so tests do not need to touch the
environment.
"""
from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_ROOM_CODE = "PRANK_ROOM_XYZ123_SECRET"


def _read_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid PORT=%r, using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 0 < port < 65536:
        logger.warning("PORT=%d out of range, using %d", port, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


HOST = os.getenv("HOST", "0.0.0.0")
PORT = _read_port(os.getenv("PORT"))

# Shared secret every join message must carry in ``roomCode``.
ROOM_CODE = os.getenv("RELAY_ROOM_CODE", DEFAULT_ROOM_CODE)

LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE") or None
LOG_FORMAT = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s - %(levelname)s - [%(name)s] %(message)s",
)

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_ROOM_CODE",
    "HOST",
    "PORT",
    "ROOM_CODE",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_FORMAT",
]
