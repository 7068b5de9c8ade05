"""Logging setup for pagewith.

Every module logs through ``logging.getLogger(__name__)``; this module only
installs a handler on the ``pagewith`` root logger so debug output can be
switched on with ``PAGEWITH_DEBUG=1``.
"""

import logging
import os
import sys

LOGGER_NAME = "pagewith"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: logging.Handler | None = None


def is_debug_env() -> bool:
    """Check if debug output was requested through the environment."""
    return os.environ.get("PAGEWITH_DEBUG", "").lower() in ("1", "true", "yes", "on")


def setup_logging(debug: bool | None = None, stream=None) -> logging.Logger:
    """Configure the ``pagewith`` logger.

    Calling it again only adjusts the level, it never stacks handlers.

    Args:
        debug: Log at DEBUG level. Reads ``PAGEWITH_DEBUG`` when omitted.
        stream: Stream for the handler (stderr by default).

    Returns:
        The package root logger.
    """
    global _handler

    if debug is None:
        debug = is_debug_env()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if _handler is None:
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the ``pagewith`` namespace."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
