"""Tests for logging configuration."""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from time_entry_sync.utils import setup_logging


@pytest.fixture
def root_logger():
    """Restore the root logger after a test reconfigures it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Test setup_logging."""

    def test_writes_log_file(self, root_logger, temp_config_dir: Path) -> None:
        log_file = setup_logging(config_dir=temp_config_dir)

        logging.getLogger("time_entry_sync.test").info("Fetched 3 entries")

        assert log_file == temp_config_dir / "time-entry-sync.log"
        assert "time_entry_sync.test - INFO - Fetched 3 entries" in log_file.read_text()

    def test_handlers_and_level(self, root_logger, temp_config_dir: Path) -> None:
        setup_logging(log_level=logging.DEBUG, config_dir=temp_config_dir)

        assert root_logger.level == logging.DEBUG
        assert [type(handler) for handler in root_logger.handlers] == [
            logging.FileHandler,
            RichHandler,
        ]
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self, root_logger, temp_config_dir: Path) -> None:
        setup_logging(config_dir=temp_config_dir)
        setup_logging(config_dir=temp_config_dir)

        assert len(root_logger.handlers) == 2

    def test_debug_filtered_at_info(self, root_logger, temp_config_dir: Path) -> None:
        log_file = setup_logging(config_dir=temp_config_dir)

        logging.getLogger("time_entry_sync.test").debug("Ignoring superseded fetch")

        assert "Ignoring superseded fetch" not in log_file.read_text()
