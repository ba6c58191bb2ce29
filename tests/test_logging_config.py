# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path

from promo_publisher.config.logging_config import setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start each test with a bare promo_publisher logger."""
        self.root_logger = logging.getLogger("promo_publisher")
        self._clear_handlers()
        self.logs_dir = Path(tempfile.mkdtemp()) / "logs"

    def tearDown(self) -> None:
        """Close handlers so temp log files are released."""
        self._clear_handlers()

    def _clear_handlers(self) -> None:
        for handler in list(self.root_logger.handlers):
            handler.close()
            self.root_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_handler_levels(self) -> None:
        """File handler logs DEBUG, console defaults to WARNING."""
        setup_logging(logs_dir=self.logs_dir)
        file_handlers = [
            h for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        stream_handlers = [
            h for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_verbose_console_level(self) -> None:
        """console_level is applied to the stderr handler."""
        setup_logging(console_level=logging.INFO, logs_dir=self.logs_dir)
        stream_handlers = [
            h for h in self.root_logger.handlers
            if not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(stream_handlers[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging(logs_dir=self.logs_dir)
        count_before = len(self.root_logger.handlers)
        setup_logging(logs_dir=self.logs_dir)
        self.assertEqual(len(self.root_logger.handlers), count_before)

    def test_repeated_call_returns_same_file(self) -> None:
        """A second call reports the file already in use."""
        first = setup_logging(logs_dir=self.logs_dir)
        second = setup_logging(logs_dir=self.logs_dir)
        self.assertEqual(first.resolve(), second.resolve())

    def test_module_logs_reach_file(self) -> None:
        """Child loggers write into the per-run file."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        logging.getLogger("promo_publisher.pipeline").info("hello run")
        for handler in self.root_logger.handlers:
            handler.flush()
        content = log_path.read_text(encoding="utf-8")
        self.assertIn("hello run", content)
        self.assertIn("promo_publisher.pipeline", content)

    def test_noisy_client_loggers_quietened(self) -> None:
        """HTTP client libraries are capped at WARNING."""
        setup_logging(logs_dir=self.logs_dir)
        self.assertEqual(
            logging.getLogger("openai").level, logging.WARNING
        )


if __name__ == "__main__":
    unittest.main()
