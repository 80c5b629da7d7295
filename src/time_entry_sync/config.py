"""Configuration management for time entry sync."""

from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from time_entry_sync.utils.storage import StorageManager

DEFAULT_SETTINGS: dict[str, Any] = {
    "source": "toggl",
    "target": "tick",
    "timezone": "UTC",
}


class Config:
    """Manages application settings and persisted selections."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_dir: Directory for storing configuration.
        """
        self.storage = StorageManager(config_dir)
        self._settings = {**DEFAULT_SETTINGS, **self.storage.load_settings()}

    def get_settings(self) -> dict[str, Any]:
        """Get current settings, defaults included."""
        return dict(self._settings)

    def update_setting(self, key: str, value: Any) -> None:
        """Change a setting and persist it.

        Args:
            key: Setting name.
            value: New value.
        """
        self._settings[key] = value
        stored = self.storage.load_settings()
        stored[key] = value
        self.storage.save_settings(stored)

    @property
    def source_name(self) -> str:
        return self._settings["source"]

    @property
    def target_name(self) -> str:
        return self._settings["target"]

    @property
    def timezone(self) -> ZoneInfo:
        """Timezone used to turn source timestamps into calendar days.

        Raises:
            ValueError: If the configured timezone is unknown.
        """
        name = self._settings.get("timezone") or "UTC"
        try:
            return ZoneInfo(name)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone in settings: {name}") from e

    @property
    def selected_project(self) -> str | None:
        return self.storage.get_state_value(f"{self.target_name}_selected_project")

    @selected_project.setter
    def selected_project(self, project_id: str | None) -> None:
        self.storage.set_state_value(f"{self.target_name}_selected_project", project_id or None)

    @property
    def selected_task(self) -> str | None:
        return self.storage.get_state_value(f"{self.target_name}_selected_task")

    @selected_task.setter
    def selected_task(self, task_id: str | None) -> None:
        self.storage.set_state_value(f"{self.target_name}_selected_task", task_id or None)

    def reset_selection(self) -> None:
        """Forget the stored target project and task."""
        self.selected_project = None
        self.selected_task = None

    def get_last_sync_date(self) -> datetime | None:
        return self.storage.get_last_sync_date()

    def set_last_sync_date(self, date: datetime) -> None:
        self.storage.set_last_sync_date(date)
