"""Process entry point: ``python -m relay.main`` or the ``prank-relay`` script."""
from __future__ import annotations

import logging

import uvicorn

from . import config
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE)
    logger.info("Starting relay on %s:%d", config.HOST, config.PORT)
    logger.info("WebSocket endpoint: ws://localhost:%d", config.PORT)
    try:
        # uvicorn stops accepting on SIGTERM/SIGINT and exits once open connections drain.
        uvicorn.run("relay.app:app", host=config.HOST, port=config.PORT, log_config=None)
    except SystemExit as exc:
        # uvicorn reports startup failures such as an unbindable port via sys.exit(1).
        if exc.code not in (None, 0):
            logger.exception("Relay server failed to start (exit code %s)", exc.code)
        raise
    except Exception:
        logger.exception("Relay server failed to start or crashed")
        raise
    logger.info("Server shut down gracefully")


if __name__ == "__main__":
    main()
