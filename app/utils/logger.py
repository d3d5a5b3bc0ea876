"""
Centralised logging configuration for the entire application.
Logs to console and, unless LOG_TO_FILE is off, to a rotating file in /logs/.

Components tag their messages so one grep isolates a subsystem:
[LEDGER] [POLICY] [DISPATCH] [COMPLIANCE] [ONBOARDING] [NOTIFY] [EMAIL]
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def _file_handler(fmt: logging.Formatter) -> logging.Handler:
    os.makedirs(LOG_DIR, exist_ok=True)
    # Keeps last 10 × 5MB log files
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, settings.LOG_FILE_NAME),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(fmt)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(fmt))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
