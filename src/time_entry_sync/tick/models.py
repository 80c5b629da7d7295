"""Pydantic models for Tick API responses."""

import math
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict

from time_entry_sync.adapters.models import Project, Task, TimeEntry


class TickRole(BaseModel):
    """Subscription role returned when logging in with email and password."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    subscription_id: int | str
    company: str | None = None
    api_token: str


class TickProject(BaseModel):
    """Tick project model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str
    name: str
    closed: bool = False

    def to_project(self) -> Project:
        return Project(id=str(self.id), name=self.name)


class TickTask(BaseModel):
    """Tick task model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str
    name: str
    project_id: int | str

    def to_task(self) -> Task:
        return Task(id=str(self.id), name=self.name, project_id=str(self.project_id))


class TickEntry(BaseModel):
    """Tick time entry model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str | None = None
    date: date
    hours: float
    notes: str | None = None
    task_id: int | str | None = None
    user_id: int | str | None = None

    def to_time_entry(self) -> TimeEntry:
        """Convert to a service-independent entry."""
        return TimeEntry(
            id=str(self.id),
            task_id=str(self.task_id) if self.task_id else "",
            description=self.notes or "",
            date=self.date,
            duration_in_seconds=math.floor(self.hours * 60 * 60),
        )

    @classmethod
    def from_time_entry(cls, entry: TimeEntry) -> "TickEntry":
        """Build the Tick representation of an entry to create."""
        return cls(
            date=entry.date,
            hours=entry.duration_in_seconds / 60 / 60,
            notes=entry.description,
            task_id=entry.task_id,
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to API-compatible dictionary.

        Returns:
            Dictionary for API submission.
        """
        return {
            "date": self.date.isoformat(),
            "hours": self.hours,
            "notes": self.notes or "",
            "task_id": self.task_id,
        }
