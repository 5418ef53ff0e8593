"""Opt-in debug log for the hook.

The logger is chosen once at startup: a file-appending logger when the
debug flag is on, otherwise one with a NullHandler. Everything else in the
package takes the logger as an argument and never checks the flag itself.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from skill_activation import config

LOGGER_NAME = "skill_activation"
LOG_FILE_NAME = "skill-activation.log"
LOG_FORMAT = "[%(asctime)s] [pid %(process)d] %(levelname)s %(message)s"


def null_logger() -> logging.Logger:
    """Logger that discards everything."""
    logger = logging.getLogger(f"{LOGGER_NAME}.null")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def file_logger(log_dir: Path) -> logging.Logger:
    """Logger appending to <log_dir>/skill-activation.log.

    Each record is a single short line written in append mode, so
    overlapping hook processes interleave whole lines.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    log_path = log_dir / LOG_FILE_NAME
    for handler in list(logger.handlers):
        if getattr(handler, "baseFilename", None) == os.path.abspath(log_path):
            return logger
        logger.removeHandler(handler)
        handler.close()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        # Debug logging failure is non-fatal
        print(f"skill-activation: debug log unavailable: {e}", file=sys.stderr)
        return null_logger()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def get_debug_logger(enabled: Optional[bool] = None,
                     log_dir: Optional[Path] = None) -> logging.Logger:
    """Pick the logger for this process.

    Args:
        enabled: Force the debug log on/off (default: config.debug_enabled())
        log_dir: Directory for the log file (default: config.log_dir())
    """
    if enabled is None:
        enabled = config.debug_enabled()
    if not enabled:
        return null_logger()
    return file_logger(log_dir or config.log_dir())


def debug_log_path(log_dir: Optional[Path] = None) -> Path:
    """Where the debug log is written when enabled."""
    return (log_dir or config.log_dir()) / LOG_FILE_NAME

