"""Service-independent models shared by adapters and the sync engine."""

import calendar
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _strip_time(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    return value


class Project(BaseModel):
    """Project on the target service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str


class Task(BaseModel):
    """Task within a target project."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    project_id: str = Field(alias="projectId")


class TimeEntry(BaseModel):
    """Immutable snapshot of a time entry as fetched from one service.

    The id is only unique within the service the entry was fetched from.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    task_id: str = Field(default="", alias="taskId")
    description: str = ""
    date: date
    duration_in_seconds: int = Field(ge=0, alias="durationInSeconds")

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        return _strip_time(value)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: Any) -> Any:
        return "" if value is None else value

    def with_task(self, task_id: str) -> "TimeEntry":
        """Return a copy of this entry assigned to another task."""
        return self.model_copy(update={"task_id": task_id})


class DateRange(BaseModel):
    """Inclusive range of calendar days."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        return _strip_time(value)

    @model_validator(mode="after")
    def _ordered(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after its end {self.end}")
        return self

    def __contains__(self, day: object) -> bool:
        day = _strip_time(day)
        if not isinstance(day, date):
            return False
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


def month_range(year: int, month: int) -> DateRange:
    """Range covering a whole calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(start=date(year, month, 1), end=date(year, month, last_day))


def default_date_range(today: date | None = None) -> DateRange:
    """Range offered when nothing else was requested.

    Until the 10th of a month the previous month is still being reported,
    afterwards the current one.
    """
    today = today or date.today()
    if today.day <= 10:
        previous = today.replace(day=1) - timedelta(days=1)
        return month_range(previous.year, previous.month)
    return month_range(today.year, today.month)
