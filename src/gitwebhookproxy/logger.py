"""
Logging configuration for the application.
"""
import logging
import sys
from typing import Optional

from .config import settings


def setup_logging(debug: Optional[bool] = None) -> logging.Logger:
    """Configure the package logger, DEBUG level when debug (or settings.debug) is set."""
    if debug is None:
        debug = settings.debug

    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger("gitwebhookproxy")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(handler)

    return logger


logger = setup_logging()
