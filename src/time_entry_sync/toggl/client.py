"""Toggl Track API client, used as the read-only source."""

import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Any

import httpx

from time_entry_sync.adapters.base import ReadCapability
from time_entry_sync.adapters.http import DEFAULT_TIMEOUT, send
from time_entry_sync.adapters.models import DateRange, TimeEntry
from time_entry_sync.exceptions import AuthenticationError
from time_entry_sync.toggl.models import TogglTimeEntry, TogglUser

logger = logging.getLogger(__name__)


class TogglClient(ReadCapability):
    """Client for the Toggl Track API."""

    BASE_URL = "https://api.track.toggl.com/api/v9"
    name = "Toggl"

    def __init__(
        self,
        tz: tzinfo = timezone.utc,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Toggl client.

        Args:
            tz: Timezone used to assign entries to calendar days.
            transport: Optional httpx transport, mainly for tests.
        """
        self.timezone = tz
        self.user: TogglUser | None = None
        self._token: str | None = None
        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def credentials(self) -> dict[str, Any]:
        if not self._token or not self.is_authenticated:
            raise AuthenticationError(f"{self.name} is not authenticated yet", self.name)
        return {"token": self._token}

    async def authenticate(self, credentials: dict[str, Any]) -> None:
        """Verify an API token by fetching the current user.

        Args:
            credentials: Dictionary with a "token" key.

        Raises:
            AuthenticationError: If the token is missing or rejected.
            FetchError: If Toggl cannot be reached.
        """
        token = credentials.get("token")
        if not token:
            raise AuthenticationError(f"{self.name} API token not provided", self.name)

        self.user = None
        self._token = token
        self.client.auth = httpx.BasicAuth(token, "api_token")

        response = await send(self.client, "GET", "/me", service=self.name)
        self.user = TogglUser(**response.json())
        logger.info(f"Authenticated to {self.name} as {self.user.email or self.user.id}")

    async def fetch_entries(self, date_range: DateRange) -> list[TimeEntry]:
        """Get finished time entries started within the range.

        Args:
            date_range: Calendar days to fetch, in the client's timezone.

        Returns:
            List of time entries.

        Raises:
            AuthenticationError: If not authenticated.
            FetchError: If the API request fails.
        """
        if not self.is_authenticated:
            raise AuthenticationError(f"{self.name} is not authenticated yet", self.name)

        start = datetime.combine(date_range.start, time.min, tzinfo=self.timezone)
        end = datetime.combine(date_range.end + timedelta(days=1), time.min, tzinfo=self.timezone)

        response = await send(
            self.client,
            "GET",
            "/me/time_entries",
            service=self.name,
            params={"start_date": start.isoformat(), "end_date": end.isoformat()},
        )

        entries = []
        for item in response.json() or []:
            toggl_entry = TogglTimeEntry(**item)
            if toggl_entry.is_running:
                logger.debug(f"Skipping running timer entry: {toggl_entry.id}")
                continue
            entries.append(toggl_entry.to_time_entry(self.timezone))

        logger.info(f"Found {len(entries)} {self.name} time entries in {date_range}")
        return entries

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "TogglClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()
