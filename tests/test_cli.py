"""Tests for the command-line interface."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from time_entry_sync import __version__, cli
from time_entry_sync.config import Config
from time_entry_sync.sync import build_app

runner = CliRunner()

JANUARY = ["--from-date", "2024-01-01", "--to-date", "2024-01-31"]


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def fake_services(monkeypatch, fake_source, fake_target) -> None:
    """Make the CLI wire the in-memory services instead of Toggl and Tick."""
    monkeypatch.setattr(
        cli,
        "build_app",
        lambda config: build_app(config, source_adapter=fake_source, target_adapter=fake_target),
    )


@pytest.fixture
def configured(temp_config_dir: Path) -> Config:
    config = Config(temp_config_dir)
    config.storage.set_credentials(config.source_name, {"token": "good-token"})
    config.storage.set_credentials(config.target_name, {"token": "good-token"})
    config.selected_project = "p1"
    config.selected_task = "t1"
    return config


@pytest.fixture
def target_logins(monkeypatch, fake_target) -> list[dict]:
    """Record the credentials the target is authenticated with."""
    received: list[dict] = []
    original = fake_target.authenticate

    async def authenticate(credentials):
        received.append(dict(credentials))
        await original(credentials)

    monkeypatch.setattr(fake_target, "authenticate", authenticate)
    return received


class TestCli:
    """Test the simple commands."""

    def test_version(self) -> None:
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_select_stores_choice(self, temp_config_dir: Path) -> None:
        result = runner.invoke(
            cli.app,
            ["select", "--project", "p1", "--task", "t1", "--config-dir", str(temp_config_dir)],
        )

        assert result.exit_code == 0
        config = Config(temp_config_dir)
        assert config.selected_project == "p1"
        assert config.selected_task == "t1"


class TestConfigure:
    """Test the configure command."""

    def test_target_with_token(
        self, fake_services, target_logins, temp_config_dir: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            cli.Prompt, "ask", MagicMock(side_effect=["dev@example.com", "42", "good-token"])
        )

        result = runner.invoke(
            cli.app,
            ["configure", "--service", "target", "--token", "--config-dir", str(temp_config_dir)],
        )

        assert result.exit_code == 0
        assert target_logins == [
            {"email": "dev@example.com", "subscription_id": "42", "token": "good-token"}
        ]
        assert "Found 2 FakeTarget projects" in result.output
        config = Config(temp_config_dir)
        assert config.storage.get_credentials(config.target_name) == {"token": "good-token"}

    def test_target_with_password(
        self, fake_services, target_logins, temp_config_dir: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr(cli.Prompt, "ask", MagicMock(side_effect=["dev@example.com", "hunter2"]))

        result = runner.invoke(
            cli.app, ["configure", "--service", "target", "--config-dir", str(temp_config_dir)]
        )

        assert target_logins == [{"email": "dev@example.com", "password": "hunter2"}]
        assert result.exit_code == 1

    def test_unknown_service(self, temp_config_dir: Path) -> None:
        result = runner.invoke(
            cli.app, ["configure", "--service", "nowhere", "--config-dir", str(temp_config_dir)]
        )

        assert result.exit_code == 1


class TestSyncCommand:
    """Test the sync command."""

    def test_requires_configuration(self, fake_services, temp_config_dir: Path) -> None:
        result = runner.invoke(cli.app, ["sync", *JANUARY, "--config-dir", str(temp_config_dir)])

        assert result.exit_code == 1
        assert "configured first" in result.output

    def test_rejects_reversed_range(self, temp_config_dir: Path) -> None:
        result = runner.invoke(
            cli.app,
            ["sync", "--from-date", "2024-02-01", "--to-date", "2024-01-31",
             "--config-dir", str(temp_config_dir)],
        )

        assert result.exit_code == 1

    def test_dry_run(self, fake_services, configured, fake_source, fake_target, make_entry) -> None:
        fake_source.entries = [make_entry("s1")]

        result = runner.invoke(
            cli.app,
            ["sync", *JANUARY, "--dry-run", "--config-dir", str(configured.storage.config_dir)],
        )

        assert result.exit_code == 0
        assert "DRY RUN" in result.output
        assert fake_target.calls == []

    def test_creates_entries(
        self, fake_services, configured, fake_source, fake_target, make_entry
    ) -> None:
        fake_source.entries = [make_entry("s1"), make_entry("s2", "Review")]

        result = runner.invoke(
            cli.app, ["sync", *JANUARY, "--yes", "--config-dir", str(configured.storage.config_dir)]
        )

        assert result.exit_code == 0
        assert sorted(entry.id for entry in fake_target.created) == ["s1", "s2"]
        assert configured.get_last_sync_date() is not None

    def test_nothing_to_do(
        self, fake_services, configured, fake_source, fake_target, make_entry
    ) -> None:
        fake_source.entries = [make_entry("s1")]
        fake_target.entries = [make_entry("t-a", task_id="t1")]

        result = runner.invoke(
            cli.app, ["sync", *JANUARY, "--yes", "--config-dir", str(configured.storage.config_dir)]
        )

        assert result.exit_code == 0
        assert "Nothing to synchronize" in result.output
        assert fake_target.calls == []

    def test_reports_failures(
        self, fake_services, configured, fake_source, fake_target, make_entry
    ) -> None:
        fake_source.entries = [make_entry("s1")]
        fake_target.failing_ids = {"s1"}

        result = runner.invoke(
            cli.app, ["sync", *JANUARY, "--yes", "--config-dir", str(configured.storage.config_dir)]
        )

        assert result.exit_code == 1
        assert fake_target.created == []
