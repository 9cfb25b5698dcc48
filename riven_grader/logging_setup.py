"""
Logging setup for the CLI.

The library only creates module loggers; handlers are installed here, once,
by the command-line entry point.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from riven_grader.constants import APP_DIR_NAME, LOG_FILE_NAME

FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
CONSOLE_LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"

LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> Path:
    """
    Configure application-wide logging.

    - Logs to ~/.riven_grader/riven_grader.log (rotating, max ~1 MB, 3 backups)
    - Also logs to console (stderr) for interactive runs

    Returns:
        Path of the log file.
    """
    log_dir = Path(log_dir) if log_dir is not None else Path.home() / APP_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level = logging.DEBUG if debug else logging.INFO

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace any handlers from a previous call
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # File handler with rotation
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)

    # Console handler (simple readable format)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    root_logger.debug(f"Logging initialized, log file: {log_file}")
    return log_file
