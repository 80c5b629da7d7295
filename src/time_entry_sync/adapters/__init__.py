"""Capability contracts and shared models."""

from time_entry_sync.adapters.base import ReadCapability, WriteCapability
from time_entry_sync.adapters.models import (
    DateRange,
    Project,
    Task,
    TimeEntry,
    default_date_range,
    month_range,
)

__all__ = [
    "DateRange",
    "Project",
    "ReadCapability",
    "Task",
    "TimeEntry",
    "WriteCapability",
    "default_date_range",
    "month_range",
]
