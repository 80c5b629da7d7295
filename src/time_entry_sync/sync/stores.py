"""Per-service state: authentication, fetched entries, and target choices."""

import logging
from typing import Any, Generic, TypeVar

from time_entry_sync.adapters.base import ReadCapability, WriteCapability
from time_entry_sync.adapters.models import DateRange, Project, Task, TimeEntry
from time_entry_sync.config import Config
from time_entry_sync.exceptions import AuthenticationError, PreconditionError
from time_entry_sync.sync.alerts import AlertChannel
from time_entry_sync.sync.async_state import AsyncOperation

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=ReadCapability)


class SourceSide(Generic[A]):
    """State of the service entries are read from."""

    def __init__(self, adapter: A, service: str, config: Config, alerts: AlertChannel) -> None:
        """Initialize side state.

        Args:
            adapter: Service adapter.
            service: Key the credentials are stored under.
            config: Application configuration.
            alerts: Channel failures and confirmations are published to.
        """
        self.adapter = adapter
        self.service = service
        self.config = config
        self.alerts = alerts
        self.authenticated: AsyncOperation[A] = AsyncOperation(
            f"{self.name} authentication", on_error=alerts.publish_error
        )
        self.entries: AsyncOperation[list[TimeEntry]] = AsyncOperation(
            f"{self.name} time entries", on_error=alerts.publish_error
        )

    @property
    def name(self) -> str:
        return self.adapter.name

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated.value is not None and self.adapter.is_authenticated

    async def authenticate(self, credentials: dict[str, Any]) -> bool:
        """Authenticate the adapter and remember working credentials.

        Returns:
            True if authentication succeeded.
        """

        async def _authenticate() -> A:
            await self.adapter.authenticate(credentials)
            return self.adapter

        if not await self.authenticated.run(_authenticate):
            if self.authenticated.error is not None and not self.authenticated.pending:
                self.config.storage.reset_credentials(self.service)
            return False

        self.alerts.success(f"Successfully authenticated to {self.name}!")
        self.config.storage.set_credentials(self.service, self.adapter.credentials)
        return True

    async def load_stored_credentials(self) -> bool:
        """Authenticate with previously stored credentials, if any."""
        credentials = self.config.storage.get_credentials(self.service)
        if not credentials:
            logger.debug(f"No stored credentials for {self.name}")
            return False
        return await self.authenticate(credentials)

    def forget_credentials(self) -> None:
        """Drop stored credentials and everything fetched with them."""
        self.config.storage.reset_credentials(self.service)
        self.authenticated.reset()
        self.entries.reset()

    async def fetch_entries(self, date_range: DateRange) -> bool:
        """Replace the entries with the ones within the range.

        Returns:
            True if the fetch succeeded and is still current.
        """

        async def _fetch() -> list[TimeEntry]:
            if not self.is_authenticated:
                raise AuthenticationError(f"Not authenticated to {self.name} yet", self.name)
            return await self.adapter.fetch_entries(date_range)

        return await self.entries.run(_fetch)


class TargetSide(SourceSide[WriteCapability]):
    """State of the service entries are written to.

    Entries are scoped to the selected task; without one there is nothing
    to compare against.
    """

    def __init__(
        self, adapter: WriteCapability, service: str, config: Config, alerts: AlertChannel
    ) -> None:
        super().__init__(adapter, service, config, alerts)
        self.projects: AsyncOperation[list[Project]] = AsyncOperation(
            f"{self.name} projects", on_error=alerts.publish_error
        )
        self.tasks: AsyncOperation[list[Task]] = AsyncOperation(
            f"{self.name} tasks", on_error=alerts.publish_error
        )
        self.selected_project = ""
        self.selected_task = ""
        self.deletion_allowed = False

    async def authenticate(self, credentials: dict[str, Any]) -> bool:
        """Authenticate, then load projects and restore the stored selection."""
        if not await super().authenticate(credentials):
            return False
        await self.load_projects()
        if not self.selected_task:
            self.set_task_not_selected_error()
        return True

    def forget_credentials(self) -> None:
        super().forget_credentials()
        self.config.reset_selection()
        self.projects.reset()
        self.tasks.reset()
        self.selected_project = ""
        self.selected_task = ""
        self.deletion_allowed = False

    async def load_projects(self) -> bool:
        """Load projects and the tasks of the selected project."""
        if not await self.projects.run(self.adapter.list_projects):
            return False

        project_ids = [project.id for project in self.projects.value or []]
        if not self.selected_project:
            stored = self.config.selected_project
            if stored and stored in project_ids:
                self.selected_project = stored
            elif stored:
                logger.info(f"Stored {self.name} project {stored} no longer exists")
                self.config.reset_selection()

        if self.selected_project and self.selected_project in project_ids:
            await self.load_tasks(self.selected_project)
        return True

    async def load_tasks(self, project_id: str) -> bool:
        """Load tasks of a project and restore the stored task."""
        if not await self.tasks.run(lambda: self.adapter.list_tasks(project_id)):
            return False

        if not self.selected_task:
            stored = self.config.selected_task
            task_ids = [task.id for task in self.tasks.value or []]
            if stored and stored in task_ids:
                self.selected_task = stored
            elif stored:
                logger.info(f"Stored {self.name} task {stored} no longer exists")
                self.config.selected_task = None
        return True

    async def select_project(self, project_id: str) -> bool:
        """Switch to another project, dropping the task choice.

        Returns:
            True if the selection changed.
        """
        if project_id == self.selected_project:
            return False
        self.selected_project = project_id
        self.selected_task = ""
        self.deletion_allowed = False
        self.config.selected_project = project_id
        self.config.selected_task = None
        self.set_task_not_selected_error()
        self.tasks.reset()
        await self.load_tasks(project_id)
        return True

    def select_task(self, task_id: str) -> bool:
        """Choose the task entries are created in and compared against.

        Returns:
            True if the selection changed.
        """
        if task_id == self.selected_task:
            return False
        self.selected_task = task_id
        self.config.selected_task = task_id
        return True

    def toggle_deletion_allowed(self) -> bool:
        self.deletion_allowed = not self.deletion_allowed
        return self.deletion_allowed

    def set_task_not_selected_error(self) -> None:
        self.entries.set_error(
            PreconditionError(f"Please select the target task in {self.name}.")
        )

    async def fetch_entries(self, date_range: DateRange) -> bool:
        """Replace the entries with the selected task's ones within the range."""
        if not self.selected_task:
            self.set_task_not_selected_error()
            return False

        task_id = self.selected_task

        async def _fetch() -> list[TimeEntry]:
            if not self.is_authenticated:
                raise AuthenticationError(f"Not authenticated to {self.name} yet", self.name)
            entries = await self.adapter.fetch_entries(date_range)
            return [entry for entry in entries if entry.task_id == task_id]

        return await self.entries.run(_fetch)
