"""Pydantic models for Toggl Track API responses."""

from datetime import datetime, tzinfo

from pydantic import BaseModel, ConfigDict

from time_entry_sync.adapters.models import TimeEntry


class TogglUser(BaseModel):
    """Toggl user profile."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    email: str | None = None
    fullname: str | None = None
    default_workspace_id: int | None = None


class TogglTimeEntry(BaseModel):
    """Toggl time entry model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    description: str | None = None
    start: datetime
    stop: datetime | None = None
    duration: int
    task_id: int | None = None
    project_id: int | None = None
    workspace_id: int | None = None
    billable: bool = False
    tags: list[str] | None = None

    @property
    def is_running(self) -> bool:
        """Running timers report a negative duration."""
        return self.duration < 0

    def to_time_entry(self, timezone: tzinfo) -> TimeEntry:
        """Convert to a service-independent entry.

        Args:
            timezone: Timezone whose calendar day the entry belongs to.
        """
        return TimeEntry(
            id=str(self.id),
            task_id=str(self.task_id) if self.task_id else "",
            description=self.description or "",
            date=self.start.astimezone(timezone).date(),
            duration_in_seconds=self.duration,
        )
