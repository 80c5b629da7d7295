"""Logging configuration for time entry sync."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = "time-entry-sync.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client libraries log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(log_level: int = logging.INFO, config_dir: Path | None = None) -> Path:
    """Configure the root logger for a CLI run.

    Records go to a timestamped log file in the configuration directory and
    to a rich handler on stderr, leaving stdout to the tables the CLI prints.
    Handlers from a previous call are replaced.

    Args:
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG).
        config_dir: Directory to store log files. Defaults to ~/.time-entry-sync/

    Returns:
        Path of the log file.
    """
    config_dir = config_dir or Path.home() / ".time-entry-sync"
    config_dir.mkdir(parents=True, exist_ok=True)
    log_file = config_dir / LOG_FILE_NAME

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    console_handler = RichHandler(console=Console(stderr=True), show_path=False)

    logging.basicConfig(level=log_level, handlers=[file_handler, console_handler], force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
