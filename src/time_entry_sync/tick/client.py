"""Tick API client, used as the read-write target."""

import logging
from typing import Any

import httpx

from time_entry_sync.adapters.base import WriteCapability
from time_entry_sync.adapters.http import DEFAULT_TIMEOUT, send
from time_entry_sync.adapters.models import DateRange, Project, Task, TimeEntry
from time_entry_sync.exceptions import AuthenticationError, FetchError, ItemError
from time_entry_sync.tick.models import TickEntry, TickProject, TickRole, TickTask

logger = logging.getLogger(__name__)


class TickClient(WriteCapability):
    """Client for the Tick API."""

    BASE_URL = "https://www.tickspot.com"
    PAGE_SIZE = 100
    name = "Tick"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize Tick client.

        Args:
            transport: Optional httpx transport, mainly for tests.
        """
        self._credentials: dict[str, str] | None = None
        self._authenticated = False
        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def credentials(self) -> dict[str, Any]:
        if not self._credentials or not self._authenticated:
            raise AuthenticationError(f"{self.name} is not authenticated yet", self.name)
        return dict(self._credentials)

    @property
    def _api_path(self) -> str:
        assert self._credentials is not None
        return f"/{self._credentials['subscription_id']}/api/v2"

    def _user_agent(self, email: str) -> str:
        return f"TimeEntrySync ({email})"

    def _auth_headers(self) -> dict[str, str]:
        assert self._credentials is not None
        return {
            "Authorization": f"Token token={self._credentials['token']}",
            "User-Agent": self._user_agent(self._credentials["email"]),
        }

    async def authenticate(self, credentials: dict[str, Any]) -> None:
        """Authenticate with a token or with email and password.

        Args:
            credentials: Either {"token", "email", "subscription_id"} or
                {"email", "password"}.

        Raises:
            AuthenticationError: If credentials are incomplete or rejected.
            FetchError: If Tick cannot be reached.
        """
        self._authenticated = False
        email = credentials.get("email")
        if not email:
            raise AuthenticationError(f"{self.name} email not provided", self.name)

        if credentials.get("token"):
            if not credentials.get("subscription_id"):
                raise AuthenticationError(f"{self.name} subscription id not provided", self.name)
            self._credentials = {
                "token": str(credentials["token"]),
                "email": email,
                "subscription_id": str(credentials["subscription_id"]),
            }
        elif credentials.get("password"):
            role = await self._fetch_role(email, credentials["password"])
            self._credentials = {
                "token": role.api_token,
                "email": email,
                "subscription_id": str(role.subscription_id),
            }
        else:
            raise AuthenticationError(f"{self.name} token or password not provided", self.name)

        await send(
            self.client,
            "GET",
            f"{self._api_path}/users.json",
            service=self.name,
            headers=self._auth_headers(),
        )
        self._authenticated = True
        logger.info(f"Authenticated to {self.name} subscription {self._credentials['subscription_id']}")

    async def _fetch_role(self, email: str, password: str) -> TickRole:
        """Exchange email and password for an API token."""
        response = await send(
            self.client,
            "GET",
            "/api/v2/roles.json",
            service=self.name,
            auth=httpx.BasicAuth(email, password),
            headers={"User-Agent": self._user_agent(email)},
        )
        roles = [TickRole(**item) for item in response.json() or []]
        if not roles:
            raise AuthenticationError(f"No {self.name} subscription found for {email}", self.name)
        if len(roles) > 1:
            logger.warning(
                f"{email} has {len(roles)} {self.name} subscriptions, "
                f"using {roles[0].company or roles[0].subscription_id}"
            )
        return roles[0]

    def _ensure_authenticated(self) -> None:
        if not self._authenticated:
            raise AuthenticationError(f"{self.name} is not authenticated yet", self.name)

    async def _get_all_pages(self, path: str, params: dict[str, Any] | None = None) -> list[Any]:
        """Collect every page of a paginated list endpoint."""
        items: list[Any] = []
        page = 1
        while True:
            response = await send(
                self.client,
                "GET",
                f"{self._api_path}{path}",
                service=self.name,
                params={**(params or {}), "page": page},
                headers=self._auth_headers(),
            )
            batch = response.json() or []
            items.extend(batch)
            if len(batch) < self.PAGE_SIZE:
                return items
            page += 1

    async def list_projects(self) -> list[Project]:
        """List all open projects.

        Returns:
            List of projects.

        Raises:
            AuthenticationError: If not authenticated.
            FetchError: If the API request fails.
        """
        self._ensure_authenticated()
        data = await self._get_all_pages("/projects.json")
        return [TickProject(**item).to_project() for item in data]

    async def list_tasks(self, project_id: str) -> list[Task]:
        """List tasks for a project.

        Args:
            project_id: Project ID.

        Returns:
            List of tasks.

        Raises:
            AuthenticationError: If not authenticated.
            FetchError: If the API request fails.
        """
        self._ensure_authenticated()
        response = await send(
            self.client,
            "GET",
            f"{self._api_path}/projects/{project_id}/tasks.json",
            service=self.name,
            headers=self._auth_headers(),
        )
        return [TickTask(**item).to_task() for item in response.json() or []]

    async def fetch_entries(self, date_range: DateRange) -> list[TimeEntry]:
        """Get time entries within the range.

        Args:
            date_range: Calendar days to fetch.

        Returns:
            List of time entries.

        Raises:
            AuthenticationError: If not authenticated.
            FetchError: If the API request fails.
        """
        self._ensure_authenticated()
        data = await self._get_all_pages(
            "/entries.json",
            params={
                "start_date": date_range.start.isoformat(),
                "end_date": date_range.end.isoformat(),
            },
        )
        entries = [TickEntry(**item).to_time_entry() for item in data]
        logger.info(f"Found {len(entries)} {self.name} time entries in {date_range}")
        return entries

    async def create_entry(self, entry: TimeEntry) -> None:
        """Create a new time entry.

        Args:
            entry: Entry to create; task_id is the Tick task.

        Raises:
            ItemError: If the API request fails.
        """
        self._ensure_authenticated()
        payload = TickEntry.from_time_entry(entry).to_api_dict()
        try:
            await send(
                self.client,
                "POST",
                f"{self._api_path}/entries.json",
                service=self.name,
                json=payload,
                headers=self._auth_headers(),
            )
        except FetchError as e:
            raise ItemError(f"Could not create entry {entry.id}: {e}", entry.id) from e

    async def delete_entry(self, entry_id: str) -> None:
        """Delete a time entry.

        Args:
            entry_id: Tick entry ID.

        Raises:
            ItemError: If the API request fails.
        """
        self._ensure_authenticated()
        try:
            await send(
                self.client,
                "DELETE",
                f"{self._api_path}/entries/{entry_id}.json",
                service=self.name,
                headers=self._auth_headers(),
            )
        except FetchError as e:
            raise ItemError(f"Could not delete entry {entry_id}: {e}", entry_id) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "TickClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()
