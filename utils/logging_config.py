"""Logging setup: console output mirrored into a rotating log file."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FILE_PREFIX = "card_browser"


def configure_logging(logs_dir: Path, level: str = "INFO", *, console: bool = True) -> Path | None:
    """
    Route loguru output to stderr (optional) and a rotating file under ``logs_dir``.

    Returns the log file in use, or None when the directory is not writable.
    """
    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, backtrace=True, diagnose=False)

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / f"{LOG_FILE_PREFIX}_{datetime.now():%Y%m%d_%H%M%S}.log"
        logger.add(log_file, level=level, rotation="5 MB", retention=5, backtrace=True)
    except OSError as exc:
        logger.warning(f"File logging disabled; unable to write to {logs_dir}: {exc}")
        return None
    return log_file
