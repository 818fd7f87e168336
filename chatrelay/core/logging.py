# chatrelay/core/logging.py

import logging
import os
import sys


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging() -> None:
    """
    Send relay logs (joins, leaves, name clashes, protocol errors) to stdout.

    LOG_LEVEL picks the level, INFO when unset. When the relay runs under
    ``uvicorn`` the root logger already has handlers, so only the level is
    applied and no second handler is stacked on top.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    # One access line per static asset and per /ws upgrade is noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger for a relay module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
