"""Storage of settings, state, and credentials for time entry sync."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml


class StorageManager:
    """Manages settings, state, and credential storage."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize storage manager.

        Args:
            config_dir: Directory to store configuration. Defaults to ~/.time-entry-sync/
        """
        self.config_dir = config_dir or Path.home() / ".time-entry-sync"
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.yaml"
        self.state_file = self.config_dir / "state.json"
        self.credentials_file = self.config_dir / "credentials.json"

    def load_settings(self) -> dict[str, Any]:
        """Load user settings.

        Returns:
            Settings dictionary.
        """
        if self.settings_file.exists():
            with open(self.settings_file) as f:
                return yaml.safe_load(f) or {}
        return {}

    def save_settings(self, settings: dict[str, Any]) -> None:
        """Save user settings.

        Args:
            settings: Settings to save.
        """
        with open(self.settings_file, "w") as f:
            yaml.dump(settings, f, default_flow_style=False, sort_keys=False)

    def load_state(self) -> dict[str, Any]:
        """Load persisted session state.

        Returns:
            State dictionary with selected project/task, last sync timestamp, etc.
        """
        if self.state_file.exists():
            with open(self.state_file) as f:
                return json.load(f)
        return {}

    def save_state(self, state: dict[str, Any]) -> None:
        """Save session state.

        Args:
            state: State dictionary to save.
        """
        with open(self.state_file, "w") as f:
            json.dump(state, f, indent=2)

    def get_state_value(self, key: str) -> Any:
        return self.load_state().get(key)

    def set_state_value(self, key: str, value: Any) -> None:
        """Set or, when value is None, remove a single state key."""
        state = self.load_state()
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
        self.save_state(state)

    def get_last_sync_date(self) -> datetime | None:
        """Get the date of the last submitted synchronization.

        Returns:
            Last sync datetime or None if never synced.
        """
        value = self.get_state_value("last_sync_date")
        if value:
            return datetime.fromisoformat(value)
        return None

    def set_last_sync_date(self, date: datetime) -> None:
        """Set the last submitted synchronization date.

        Args:
            date: The synchronization datetime.
        """
        self.set_state_value("last_sync_date", date.isoformat())

    def load_credentials(self) -> dict[str, dict[str, Any]]:
        """Load stored credentials of all services.

        Returns:
            Dictionary of service names to credential dictionaries.
        """
        if self.credentials_file.exists():
            with open(self.credentials_file) as f:
                return json.load(f)
        return {}

    def save_credentials(self, credentials: dict[str, dict[str, Any]]) -> None:
        """Save credentials of all services.

        Args:
            credentials: Dictionary of service names to credential dictionaries.
        """
        with open(self.credentials_file, "w") as f:
            json.dump(credentials, f)
        # User read/write only
        self.credentials_file.chmod(0o600)

    def get_credentials(self, service: str) -> dict[str, Any] | None:
        """Get stored credentials for a service.

        Args:
            service: Service name (e.g., "toggl", "tick").

        Returns:
            Credentials if available, None otherwise.
        """
        return self.load_credentials().get(service)

    def set_credentials(self, service: str, credentials: dict[str, Any]) -> None:
        """Store credentials for a service.

        Args:
            service: Service name.
            credentials: Credentials to store.
        """
        stored = self.load_credentials()
        stored[service] = credentials
        self.save_credentials(stored)

    def reset_credentials(self, service: str) -> None:
        """Forget stored credentials for a service."""
        stored = self.load_credentials()
        if stored.pop(service, None) is not None:
            self.save_credentials(stored)
