"""Unit tests for logging configuration."""

import json
import logging
import sys
from pathlib import Path

from git_poller.poller_logging import JSONFormatter, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_default_setup(self, tmp_path: Path) -> None:
        """Test basic logging setup writing to a file."""
        log_file = tmp_path / "poller.log"
        logger = setup_logging(log_file=log_file)

        logger.info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_json_format(self, tmp_path: Path) -> None:
        """Test JSON log format with command context."""
        log_file = tmp_path / "json.log"
        setup_logging(log_file=log_file, log_format="json")

        get_logger().info("Calling git fetch", extra={"command": "git fetch", "exit_code": 0})

        entry = json.loads(log_file.read_text().strip().split("\n")[-1])
        assert entry["message"] == "Calling git fetch"
        assert entry["level"] == "INFO"
        assert entry["command"] == "git fetch"
        assert entry["exit_code"] == 0

    def test_quiet_disables_console(self) -> None:
        logger = setup_logging(quiet=True)

        assert not any(
            isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
            for h in logger.handlers
        )

    def test_verbose_console_level(self) -> None:
        logger = setup_logging(verbose=True)

        console = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert console and console[0].level == logging.DEBUG

    def test_get_logger_name(self) -> None:
        assert get_logger().name == "git_poller"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_includes_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "git_poller", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "failed"
        assert "ValueError: boom" in entry["exception"]
