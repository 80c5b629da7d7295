"""Utility modules for time entry sync."""

from time_entry_sync.utils.logging import get_logger, setup_logging
from time_entry_sync.utils.storage import StorageManager

__all__ = ["get_logger", "setup_logging", "StorageManager"]
