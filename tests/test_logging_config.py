# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path

from src.config.logging_config import ROOT_LOGGER_NAME, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Detach handlers and log into a throwaway directory."""
        self._detach()
        self._tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmp.name) / "logs"

    def tearDown(self) -> None:
        self._detach()
        self._tmp.cleanup()

    @staticmethod
    def _detach() -> None:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_requested_dir(self) -> None:
        """The log lands in the directory passed in."""
        log_path = setup_logging(self.logs_dir)
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_file_handler_debug_console_warning(self) -> None:
        """File handler logs DEBUG, console handler WARNING."""
        setup_logging(self.logs_dir)
        handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
        file_handlers = [
            h for h in handlers if isinstance(h, logging.FileHandler)
        ]
        stream_handlers = [
            h
            for h in handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_console_level_override(self) -> None:
        """A verbose run echoes INFO to the console."""
        setup_logging(self.logs_dir, console_level=logging.INFO)
        stream_handlers = [
            h
            for h in logging.getLogger(ROOT_LOGGER_NAME).handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(stream_handlers[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging(self.logs_dir)
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        count_before = len(root_logger.handlers)
        setup_logging(self.logs_dir)
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_module_loggers_reach_file(self) -> None:
        """A trendbuy.* child logger writes into the run log."""
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("trendbuy.cache").debug("probe-message")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        self.assertIn("probe-message", log_path.read_text("utf-8"))


if __name__ == "__main__":
    unittest.main()
