"""Shared logger for LayerLine"""

import logging
import sys

from config import settings

LOGGER_NAME = "layerline"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the package logger with a console handler."""
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not log.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%H:%M:%S'
        ))
        log.addHandler(console_handler)

    return log


logger = setup_logging(settings.LOG_LEVEL)
