"""Pytest configuration and fixtures."""

import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable

import pytest

from time_entry_sync.adapters import (
    DateRange,
    Project,
    ReadCapability,
    Task,
    TimeEntry,
    WriteCapability,
)
from time_entry_sync.config import Config
from time_entry_sync.exceptions import AuthenticationError, FetchError, ItemError
from time_entry_sync.sync import SyncApp, build_app
from time_entry_sync.utils import StorageManager


class FakeSource(ReadCapability):
    """In-memory source service."""

    name = "FakeSource"

    def __init__(self, entries: list[TimeEntry] | None = None) -> None:
        self.entries = list(entries or [])
        self.valid_token = "good-token"
        self.fetch_error: Exception | None = None
        self.fetch_calls: list[DateRange] = []
        self._token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def credentials(self) -> dict[str, Any]:
        return {"token": self._token}

    async def authenticate(self, credentials: dict[str, Any]) -> None:
        if credentials.get("token") != self.valid_token:
            raise AuthenticationError("FakeSource rejected the credentials", self.name)
        self._token = credentials["token"]

    async def fetch_entries(self, date_range: DateRange) -> list[TimeEntry]:
        self.fetch_calls.append(date_range)
        if self.fetch_error is not None:
            raise self.fetch_error
        return [entry for entry in self.entries if entry.date in date_range]


class FakeTarget(FakeSource, WriteCapability):
    """In-memory target service recording every write."""

    name = "FakeTarget"

    def __init__(self, entries: list[TimeEntry] | None = None) -> None:
        super().__init__(entries)
        self.projects = [Project(id="p1", name="Client work"), Project(id="p2", name="Internal")]
        self.tasks = [
            Task(id="t1", name="Development", project_id="p1"),
            Task(id="t2", name="Meetings", project_id="p1"),
            Task(id="t3", name="Admin", project_id="p2"),
        ]
        self.created: list[TimeEntry] = []
        self.deleted: list[str] = []
        self.failing_ids: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self._next_id = 1000

    async def list_projects(self) -> list[Project]:
        return list(self.projects)

    async def list_tasks(self, project_id: str) -> list[Task]:
        return [task for task in self.tasks if task.project_id == project_id]

    async def create_entry(self, entry: TimeEntry) -> None:
        self.calls.append(("create", entry.id))
        if entry.id in self.failing_ids:
            raise ItemError(f"Could not create entry {entry.id}", entry.id)
        self._next_id += 1
        self.created.append(entry)
        self.entries.append(entry.model_copy(update={"id": str(self._next_id)}))

    async def delete_entry(self, entry_id: str) -> None:
        self.calls.append(("delete", entry_id))
        if entry_id in self.failing_ids:
            raise ItemError(f"Could not delete entry {entry_id}", entry_id)
        self.deleted.append(entry_id)
        self.entries = [entry for entry in self.entries if entry.id != entry_id]


@pytest.fixture
def temp_config_dir() -> Path:
    """Create a temporary configuration directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage_manager(temp_config_dir: Path) -> StorageManager:
    """Create a storage manager with temporary directory."""
    return StorageManager(temp_config_dir)


@pytest.fixture
def config(temp_config_dir: Path) -> Config:
    """Create a config instance with temporary directory."""
    return Config(temp_config_dir)


@pytest.fixture
def make_entry() -> Callable[..., TimeEntry]:
    """Factory for time entries with sensible defaults."""

    def _make_entry(
        entry_id: str,
        description: str = "Standup",
        day: date = date(2024, 1, 5),
        duration: int = 1800,
        task_id: str = "",
    ) -> TimeEntry:
        return TimeEntry(
            id=entry_id,
            task_id=task_id,
            description=description,
            date=day,
            duration_in_seconds=duration,
        )

    return _make_entry


@pytest.fixture
def january() -> DateRange:
    """Date range covering January 2024."""
    return DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def fake_target() -> FakeTarget:
    return FakeTarget()


@pytest.fixture
def sync_app(
    config: Config,
    fake_source: FakeSource,
    fake_target: FakeTarget,
    january: DateRange,
) -> SyncApp:
    """Wired app with fake services, set to January 2024."""
    sync_app = build_app(config, source_adapter=fake_source, target_adapter=fake_target)
    sync_app.integration.date_range = january
    return sync_app


@pytest.fixture
def source_credentials() -> dict[str, Any]:
    return {"token": "good-token"}


@pytest.fixture
def target_credentials() -> dict[str, Any]:
    return {"token": "good-token"}


@pytest.fixture
def network_error() -> FetchError:
    return FetchError("Could not reach service: connection refused", "FakeSource")
