"""Toggl Track integration."""

from time_entry_sync.toggl.client import TogglClient
from time_entry_sync.toggl.models import TogglTimeEntry, TogglUser

__all__ = ["TogglClient", "TogglTimeEntry", "TogglUser"]
