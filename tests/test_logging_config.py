# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest
from unittest.mock import patch

from src.config.logging_config import ROOT_LOGGER_NAME, setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the feed_search logger around each test."""
        self._clear_handlers()
        self.addCleanup(self._clear_handlers)

    @staticmethod
    def _clear_handlers() -> None:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")

    def test_file_handler_level_debug(self) -> None:
        """File handler captures everything."""
        setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        file_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level(self) -> None:
        """Console handler defaults to WARNING and is configurable."""
        setup_logging(console_level=logging.INFO)
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        stream_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_repeated_call_updates_console_level(self) -> None:
        """A second call reuses the log file and applies the new level."""
        first = setup_logging()
        second = setup_logging(console_level=logging.INFO)
        self.assertEqual(first, second)
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        levels = [
            h.level
            for h in root_logger.handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(levels, [logging.INFO])

    def test_run_settings_logged_without_query_string(self) -> None:
        """The log records the feed host and early-stop settings only."""
        with patch.object(
            Settings, "FEED_URL", "https://cdn.test/feed.zip?token=s3cret"
        ), patch.object(Settings, "FEED_CACHE_TTL", 0.0), patch.object(
            Settings, "FEED_ROW_CAP", 500
        ):
            log_path = setup_logging()
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        text = log_path.read_text(encoding="utf-8")
        self.assertIn("host=cdn.test", text)
        self.assertIn("streaming, no cache", text)
        self.assertIn("row_cap=500", text)
        self.assertNotIn("s3cret", text)

    def test_module_loggers_propagate_to_file(self) -> None:
        """Child loggers write into the run's log file."""
        log_path = setup_logging()
        logging.getLogger(f"{ROOT_LOGGER_NAME}.parser").info("rows_seen=7")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        self.assertIn("rows_seen=7", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
