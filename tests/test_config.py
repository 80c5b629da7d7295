"""Tests for configuration management."""

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from time_entry_sync.config import DEFAULT_SETTINGS, Config


class TestConfig:
    """Test Config functionality."""

    def test_defaults(self, config: Config) -> None:
        assert config.get_settings() == DEFAULT_SETTINGS
        assert config.source_name == "toggl"
        assert config.target_name == "tick"
        assert config.timezone == ZoneInfo("UTC")

    def test_settings_file_overrides_defaults(self, temp_config_dir: Path) -> None:
        (temp_config_dir / "settings.yaml").write_text("timezone: Europe/Prague\n")

        config = Config(temp_config_dir)

        assert config.timezone == ZoneInfo("Europe/Prague")
        assert config.source_name == "toggl"

    def test_update_setting_persists(self, config: Config, temp_config_dir: Path) -> None:
        config.update_setting("timezone", "Asia/Tokyo")

        assert Config(temp_config_dir).timezone == ZoneInfo("Asia/Tokyo")
        assert config.storage.load_settings() == {"timezone": "Asia/Tokyo"}

    def test_unknown_timezone(self, config: Config) -> None:
        config.update_setting("timezone", "Mars/Olympus_Mons")

        with pytest.raises(ValueError, match="Unknown timezone"):
            config.timezone

    def test_selection_is_scoped_to_target(self, config: Config) -> None:
        config.selected_project = "p1"
        config.selected_task = "t1"

        assert config.storage.load_state() == {
            "tick_selected_project": "p1",
            "tick_selected_task": "t1",
        }
        assert config.selected_project == "p1"
        assert config.selected_task == "t1"

    def test_empty_selection_is_removed(self, config: Config) -> None:
        config.selected_task = "t1"
        config.selected_task = ""

        assert config.selected_task is None

    def test_reset_selection(self, config: Config) -> None:
        config.selected_project = "p1"
        config.selected_task = "t1"

        config.reset_selection()

        assert config.selected_project is None
        assert config.selected_task is None
