"""Tick integration."""

from time_entry_sync.tick.client import TickClient
from time_entry_sync.tick.models import TickEntry, TickProject, TickRole, TickTask

__all__ = ["TickClient", "TickEntry", "TickProject", "TickRole", "TickTask"]
