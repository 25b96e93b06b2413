"""
Unit tests for logging setup.

Each test restores the root logger and structlog defaults afterwards.
"""

import sys
import logging
import logging.handlers
import pytest

import structlog

from btc_ticker.models.config import TickerConfig
from btc_ticker.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo setup_logging changes to the root logger and structlog."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level

    yield

    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    structlog.reset_defaults()


def file_handlers():
    return [
        handler for handler in logging.getLogger().handlers
        if isinstance(handler, logging.handlers.RotatingFileHandler)
    ]


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_rotating_file_handler_attached(self, tmp_path):
        """Test a log file gets a rotating handler and its directory is created."""
        log_file = tmp_path / "logs" / "ticker.log"
        config = TickerConfig(_env_file=None, log_file=str(log_file),
                              log_max_size_mb=2, log_backup_count=5)

        setup_logging(config)

        handlers = file_handlers()
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(log_file)
        assert handlers[0].maxBytes == 2 * 1024 * 1024
        assert handlers[0].backupCount == 5
        assert log_file.parent.is_dir()

    def test_file_receives_records(self, tmp_path):
        """Test records logged after setup land in the log file."""
        log_file = tmp_path / "ticker.log"
        setup_logging(TickerConfig(_env_file=None, log_file=str(log_file)))

        logging.getLogger("btc_ticker.core.scheduler").info("Scheduler started")
        for handler in file_handlers():
            handler.flush()

        assert "Scheduler started" in log_file.read_text()

    def test_no_file_handler_by_default(self):
        """Test only the stderr handler is installed without a log file."""
        setup_logging(TickerConfig(_env_file=None))

        assert file_handlers() == []

    def test_console_output_goes_to_stderr(self):
        """Test the stream handler writes to stderr, leaving stdout to the status line."""
        setup_logging(TickerConfig(_env_file=None))

        streams = [
            handler.stream for handler in logging.getLogger().handlers
            if type(handler) is logging.StreamHandler
        ]
        assert streams == [sys.stderr]

    def test_level_applied(self):
        """Test the configured level is set on the root logger."""
        setup_logging(TickerConfig(_env_file=None, log_level="debug"))

        assert logging.getLogger().level == logging.DEBUG

    def test_json_renderer(self):
        """Test the json format ends the processor chain with a JSON renderer."""
        setup_logging(TickerConfig(_env_file=None, log_format="json"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        """Test the text format ends the processor chain with the console renderer."""
        setup_logging(TickerConfig(_env_file=None, log_format="text"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
