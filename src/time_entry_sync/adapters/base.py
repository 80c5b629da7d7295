"""Capability contracts consumed by the sync engine.

Concrete services implement these; the engine never sees HTTP details.
"""

from abc import ABC, abstractmethod
from typing import Any

from time_entry_sync.adapters.models import DateRange, Project, Task, TimeEntry


class ReadCapability(ABC):
    """Service that time entries can be read from."""

    name: str = "source"

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """Whether authenticate() has completed successfully."""
        ...

    @property
    @abstractmethod
    def credentials(self) -> dict[str, Any]:
        """Credentials worth persisting for the next session.

        Raises:
            AuthenticationError: If the adapter is not authenticated yet.
        """
        ...

    @abstractmethod
    async def authenticate(self, credentials: dict[str, Any]) -> None:
        """Validate credentials against the service.

        Raises:
            AuthenticationError: If the service rejects the credentials.
            FetchError: If the service cannot be reached.
        """
        ...

    @abstractmethod
    async def fetch_entries(self, date_range: DateRange) -> list[TimeEntry]:
        """Fetch all entries within the range (both ends inclusive).

        Raises:
            AuthenticationError: If the adapter is not authenticated.
            FetchError: On network failure.
        """
        ...

    async def close(self) -> None:
        """Release network resources."""


class WriteCapability(ReadCapability):
    """Service that entries are written to."""

    name = "target"

    @abstractmethod
    async def list_projects(self) -> list[Project]:
        ...

    @abstractmethod
    async def list_tasks(self, project_id: str) -> list[Task]:
        ...

    @abstractmethod
    async def create_entry(self, entry: TimeEntry) -> None:
        """Create an entry; the entry's task_id names the destination task.

        Raises:
            ItemError: If the service refuses the entry.
        """
        ...

    @abstractmethod
    async def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by its id on this service.

        Raises:
            ItemError: If the service refuses the deletion.
        """
        ...
