"""General utilities for the alert_storage package."""

from __future__ import annotations

import os
import sys

from loguru import logger

_LOGGER_CONFIGURED = False


def configure_logging(*, force: bool = False) -> None:
    """Set up the global Loguru logger with application defaults."""
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    log_level = os.getenv("ALERT_STORAGE_LOG_LEVEL", "INFO")
    diagnose = os.getenv("ALERT_STORAGE_LOG_DIAGNOSE", "false").lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        backtrace=False,
        diagnose=diagnose,
        enqueue=False,
        colorize=True,
    )

    _LOGGER_CONFIGURED = True


__all__ = ["configure_logging", "logger"]
