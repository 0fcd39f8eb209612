"""Tests for logging configuration module."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from utils.logging_config import CONSOLE_PATTERN, LOGGER_NAME, get_logger, setup_logging


def _close_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        handler.flush()
        handler.close()
    logger.handlers.clear()


class TestSetupLogging:
    """Test logging setup functionality."""

    def test_setup_logging_returns_named_logger(self):
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == LOGGER_NAME == "hcc_tace"

    @pytest.mark.parametrize("level", [logging.DEBUG, logging.INFO, logging.WARNING])
    def test_setup_logging_level(self, level):
        logger = setup_logging(level=level)
        assert logger.level == level
        assert logger.handlers[0].level == level

    def test_setup_logging_replaces_handlers(self):
        """Repeated setup must not stack console handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_console_format_without_timestamp(self):
        logger = setup_logging(include_timestamp=False)
        assert logger.handlers[0].formatter._fmt == CONSOLE_PATTERN

    def test_console_format_with_timestamp(self):
        logger = setup_logging(include_timestamp=True)
        formatter = logger.handlers[0].formatter
        assert formatter._fmt.startswith("%(asctime)s | ")
        assert formatter.datefmt == "%Y-%m-%d %H:%M:%S"

    def test_setup_logging_with_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "projection.log"
            logger = setup_logging(log_file=log_file)
            assert len(logger.handlers) == 2

            logger.info("Net benefit: +13.2")
            logger.info("净获益")
            _close_handlers(logger)

            content = log_file.read_text(encoding="utf-8")
            assert "INFO     | hcc_tace | Net benefit: +13.2" in content
            assert "净获益" in content

    def test_file_format_with_timestamp(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "projection.log"
            logger = setup_logging(log_file=log_file, include_timestamp=True)
            logger.warning("Cohort file not found")
            _close_handlers(logger)

            line = log_file.read_text(encoding="utf-8").strip()
            # "YYYY-MM-DD HH:MM:SS | WARNING  | hcc_tace | ..."
            assert line[4] == "-" and line[13] == ":"
            assert "WARNING" in line


class TestGetLogger:
    """Test the get_logger function."""

    def test_get_logger_returns_correct_logger(self):
        assert get_logger().name == "hcc_tace"

    def test_get_logger_returns_same_instance(self):
        assert get_logger() is get_logger()

    def test_get_logger_after_setup(self):
        setup_logging(level=logging.DEBUG)
        assert get_logger().level == logging.DEBUG


class TestLoggingOutput:
    """Test actual logging output."""

    def test_info_message_logged(self, capfd):
        logger = setup_logging(level=logging.INFO)
        logger.info("Risk score: 0.00")
        assert "INFO     | Risk score: 0.00" in capfd.readouterr().out

    def test_debug_message_not_logged_at_info_level(self, capfd):
        logger = setup_logging(level=logging.INFO)
        logger.debug("ignoring unrecognized factors")
        assert "ignoring unrecognized factors" not in capfd.readouterr().out

    def test_debug_message_logged_at_debug_level(self, capfd):
        logger = setup_logging(level=logging.DEBUG)
        logger.debug("ignoring unrecognized factors")
        assert "ignoring unrecognized factors" in capfd.readouterr().out

    def test_error_message_logged(self, capfd):
        logger = setup_logging(level=logging.INFO)
        logger.error("Please fill in all required fields")
        assert "ERROR    | Please fill in all required fields" in capfd.readouterr().out
