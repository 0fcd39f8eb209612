"""Centralized logging configuration for the TACE survival calculator."""

from __future__ import annotations

import io
import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = "hcc_tace"
CONSOLE_PATTERN = "%(levelname)-8s | %(message)s"
FILE_PATTERN = "%(levelname)-8s | %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chinese labels need a UTF-8 capable console on Windows.
# Skip this under pytest so output capture keeps working.
if sys.platform == "win32" and "pytest" not in sys.modules and not os.environ.get("PYTEST_CURRENT_TEST"):
    try:
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")
    except (AttributeError, ValueError):
        # Already wrapped or in a non-standard environment
        pass


def _build_formatter(pattern: str, include_timestamp: bool) -> logging.Formatter:
    if include_timestamp:
        return logging.Formatter("%(asctime)s | " + pattern, datefmt=TIMESTAMP_FORMAT)
    return logging.Formatter(pattern)


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    include_timestamp: bool = False,
) -> logging.Logger:
    """
    Configure the calculator logger.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to also write logs to
        include_timestamp: Prefix records with a timestamp. Off by default so
            that projection logs of identical inputs are identical.

    Returns:
        The configured ``hcc_tace`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(_build_formatter(CONSOLE_PATTERN, include_timestamp))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(_build_formatter(FILE_PATTERN, include_timestamp))
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the calculator logger (configured or not)."""
    return logging.getLogger(LOGGER_NAME)
