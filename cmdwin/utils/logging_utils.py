"""Logging setup for cmdwin.

Standard Logger Initialization Pattern
--------------------------------------
Modules use the standard Python pattern:

    import logging
    logger = logging.getLogger(__name__)

setup_logging() is called once by the CLI. It logs to a rotating file
instead of stderr so the palette's terminal UI is left alone.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from cmdwin.config.constants import CMDWIN_CONFIG_DIR, LOG_FILENAME

# Max log file size: 1MB, keep 2 backups
_MAX_LOG_BYTES = 1024 * 1024
_BACKUP_COUNT = 2

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_path() -> Path:
    return CMDWIN_CONFIG_DIR / LOG_FILENAME


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the cmdwin logger.

    Args:
        verbose: Log DEBUG instead of INFO
        log_file: Override the log file location

    Returns:
        The package logger
    """
    logger = logging.getLogger("cmdwin")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Only configure once
    if not any(getattr(h, "_cmdwin_handler", False) for h in logger.handlers):
        log_file = log_file or get_log_path()
        log_file.parent.mkdir(parents=True, exist_ok=True)

        handler = RotatingFileHandler(
            log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
        )
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        handler._cmdwin_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(logger.level)

    # Keep third-party noise out of our log
    logging.getLogger("textual").setLevel(logging.WARNING)
    return logger
