from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers and the level they are pinned to
_LIBRARY_LEVELS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "fastapi": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def setup_logging(level: str | None = None) -> None:
    """Configure root logging to stdout.

    ``level`` defaults to the server's ``APP_LOG_LEVEL``; the board client
    passes its own so it never needs server settings.
    """
    if level is None:
        from stickyboard.config import settings

        level = settings.log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    for name, lib_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(lib_level)

    logging.info("Logging configured", extra={"level": level})


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
