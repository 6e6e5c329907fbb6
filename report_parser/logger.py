#!/usr/bin/env python3
"""
Logger setup for the service report parser

Handlers are attached to the package logger ("report_parser") so every
module logger below it writes to the same log file and to stdout.
Calling setup_logger again replaces the handlers instead of stacking them.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_LOG_DIR, LOG_FILE_NAME, LOG_FORMAT

PACKAGE_LOGGER = 'report_parser'


def setup_logger(
    log_level: str = 'INFO',
    log_dir: Optional[Path] = None,
    log_file: str = LOG_FILE_NAME,
) -> logging.Logger:
    """
    Setup logging configuration for the package

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (defaults to 'logs/')
        log_file: Name of the log file inside log_dir

    Returns:
        The configured package logger
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.FileHandler(log_dir / log_file, encoding='utf-8'), logging.StreamHandler(sys.stdout)):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)

    return package_logger
