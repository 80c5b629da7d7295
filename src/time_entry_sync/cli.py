"""Command-line interface for time entry sync."""

import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from time_entry_sync import __version__
from time_entry_sync.adapters.models import DateRange, TimeEntry, default_date_range
from time_entry_sync.config import Config
from time_entry_sync.sync import Alert, AlertLevel, SyncApp, TransactionResult, build_app
from time_entry_sync.utils import get_logger, setup_logging

app = typer.Typer(help="Synchronize time entries from Toggl to Tick")
console = Console()
logger = get_logger(__name__)

ALERT_STYLES = {
    AlertLevel.SUCCESS: "green",
    AlertLevel.INFO: "cyan",
    AlertLevel.WARNING: "yellow",
    AlertLevel.ERROR: "red",
}

ConfigDirOption = typer.Option(
    None,
    "--config-dir",
    help="Configuration directory. Defaults to ~/.time-entry-sync/",
)


def _print_alert(alert: Alert) -> None:
    console.print(f"[{ALERT_STYLES[alert.level]}]{alert.message}[/{ALERT_STYLES[alert.level]}]")


def _open_app(config_dir: Optional[Path]) -> SyncApp:
    sync_app = build_app(Config(config_dir))
    sync_app.alerts.subscribe(_print_alert)
    return sync_app


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")
        raise typer.Exit(code=1)


def _resolve_range(from_date: Optional[str], to_date: Optional[str]) -> DateRange:
    default = default_date_range()
    start = _parse_date(from_date) or default.start
    end = _parse_date(to_date) or default.end
    try:
        return DateRange(start=start, end=end)
    except ValueError:
        console.print(f"[red]--from-date {start} is after --to-date {end}[/red]")
        raise typer.Exit(code=1)


def _entries_table(
    title: str,
    entries: list[TimeEntry],
    selection: frozenset[str],
    mark: str,
) -> Table:
    table = Table(title=title)
    table.add_column("", style="bold")
    table.add_column("Date", style="cyan")
    table.add_column("Duration", style="magenta", justify="right")
    table.add_column("Description")

    for entry in sorted(entries, key=lambda e: (e.date, e.description)):
        hours, remainder = divmod(entry.duration_in_seconds, 3600)
        table.add_row(
            mark if entry.id in selection else "",
            entry.date.isoformat(),
            f"{hours}:{remainder // 60:02d}",
            entry.description,
        )
    return table


def _result_table(result: TransactionResult) -> Table:
    table = Table(title="Sync Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta")
    table.add_row("Created", str(len(result.created)))
    table.add_row("Failed to create", str(len(result.failed_to_create)))
    table.add_row("Deleted", str(len(result.deleted)))
    table.add_row("Failed to delete", str(len(result.failed_to_delete)))
    return table


async def _sync(
    config_dir: Optional[Path],
    date_range: DateRange,
    project: Optional[str],
    task: Optional[str],
    allow_deletion: bool,
    dry_run: bool,
    assume_yes: bool,
) -> int:
    async with _open_app(config_dir) as sync_app:
        integration = sync_app.integration
        source, target = sync_app.source, sync_app.target
        integration.date_range = date_range

        await integration.connect()
        if not source.is_authenticated or not target.is_authenticated:
            console.print("[yellow]Both services must be configured first.[/yellow]")
            console.print("Run: time-entry-sync configure")
            return 1

        if project:
            await integration.select_target_project(project)
        if task:
            await integration.select_target_task(task)
        if not target.selected_task:
            console.print(f"[yellow]No {target.name} task selected.[/yellow]")
            console.print("Run: time-entry-sync select --project <id> --task <id>")
            return 1

        if allow_deletion:
            integration.toggle_deletion_allowed()
        if source.entries.error or target.entries.error:
            return 1

        console.print(
            _entries_table(
                f"{source.name} entries ({date_range})",
                source.entries.value or [],
                integration.source_selection,
                "+",
            )
        )
        console.print(
            _entries_table(
                f"{target.name} entries ({date_range})",
                target.entries.value or [],
                integration.target_selection if target.deletion_allowed else frozenset(),
                "-",
            )
        )

        if not integration.is_submitable:
            console.print("[green]Nothing to synchronize.[/green]")
            return 0

        to_delete = len(integration.target_selection) if target.deletion_allowed else 0
        summary = f"{len(integration.source_selection)} to create, {to_delete} to delete"
        if dry_run:
            console.print(f"[bold cyan]DRY RUN[/bold cyan]: {summary}")
            return 0
        if not assume_yes and not Confirm.ask(f"Apply {summary} to {target.name}?"):
            console.print("[yellow]Sync cancelled by user[/yellow]")
            return 0

        result = await integration.submit()
        if result is None:
            return 1

        console.print(_result_table(result))
        for failure in (*result.failed_to_create, *result.failed_to_delete):
            console.print(
                f"  [red]-[/red] {failure.entry.date} {failure.entry.description!r}: {failure.error}"
            )
        return 1 if result.has_failures else 0


@app.command()
def sync(
    from_date: Optional[str] = typer.Option(
        None,
        "--from-date",
        help="Start date (YYYY-MM-DD). Defaults to the start of the reporting month.",
    ),
    to_date: Optional[str] = typer.Option(
        None,
        "--to-date",
        help="End date (YYYY-MM-DD). Defaults to the end of the reporting month.",
    ),
    project: Optional[str] = typer.Option(None, "--project", help="Target project ID."),
    task: Optional[str] = typer.Option(None, "--task", help="Target task ID."),
    allow_deletion: bool = typer.Option(
        False,
        "--allow-deletion",
        help="Delete target entries of the task that have no source counterpart.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be synced without changing anything.",
    ),
    assume_yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Create missing entries in the target (and optionally delete orphans)."""
    log_file = setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    logger.info(f"Time Entry Sync v{__version__}")
    logger.debug(f"Logging to {log_file}")

    date_range = _resolve_range(from_date, to_date)
    exit_code = asyncio.run(
        _sync(config_dir, date_range, project, task, allow_deletion, dry_run, assume_yes)
    )
    raise typer.Exit(code=exit_code)


async def _configure(config_dir: Optional[Path], service: str, use_token: bool) -> bool:
    async with _open_app(config_dir) as sync_app:
        ok = True
        if service in ("source", "both"):
            console.print(f"[yellow]{sync_app.source.name} Configuration[/yellow]")
            token = Prompt.ask(f"Enter your {sync_app.source.name} API token", password=True)
            ok = await sync_app.source.authenticate({"token": token}) and ok

        if service in ("target", "both"):
            target_name = sync_app.target.name
            console.print(f"[yellow]{target_name} Configuration[/yellow]")
            credentials: dict[str, str] = {"email": Prompt.ask(f"Enter your {target_name} email")}
            if use_token:
                credentials["subscription_id"] = Prompt.ask(
                    f"Enter your {target_name} subscription id"
                )
                credentials["token"] = Prompt.ask(
                    f"Enter your {target_name} API token", password=True
                )
            else:
                credentials["password"] = Prompt.ask(
                    f"Enter your {target_name} password", password=True
                )
            ok = await sync_app.target.authenticate(credentials) and ok
            if sync_app.target.projects.value is not None:
                console.print(
                    f"Found {len(sync_app.target.projects.value)} {target_name} projects"
                )
        return ok


@app.command()
def configure(
    service: str = typer.Option(
        "both",
        "--service",
        help="Which side to configure: source, target or both.",
    ),
    use_token: bool = typer.Option(
        False,
        "--token",
        help="Authenticate the target with an API token and subscription id instead of a password.",
    ),
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Store and verify credentials for the source and target services."""
    setup_logging(config_dir=config_dir)
    if service not in ("source", "target", "both"):
        console.print("[red]--service must be one of: source, target, both[/red]")
        raise typer.Exit(code=1)

    if not asyncio.run(_configure(config_dir, service, use_token)):
        raise typer.Exit(code=1)
    console.print("\n[green]Configuration complete![/green]")
    console.print("Run 'time-entry-sync projects' to pick the target task.")


async def _projects(config_dir: Optional[Path], project: Optional[str]) -> int:
    async with _open_app(config_dir) as sync_app:
        target = sync_app.target
        if not await target.load_stored_credentials():
            console.print(f"[yellow]{target.name} not configured. Run: time-entry-sync configure[/yellow]")
            return 1

        if project is None:
            table = Table(title=f"{target.name} Projects")
            table.add_column("ID", style="cyan")
            table.add_column("Name", style="magenta")
            table.add_column("Selected", style="green")
            for item in target.projects.value or []:
                table.add_row(item.id, item.name, "*" if item.id == target.selected_project else "")
            console.print(table)
            return 0

        if not await target.load_tasks(project):
            return 1
        table = Table(title=f"{target.name} Tasks of project {project}")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Selected", style="green")
        for item in target.tasks.value or []:
            table.add_row(item.id, item.name, "*" if item.id == target.selected_task else "")
        console.print(table)
        return 0


@app.command()
def projects(
    project: Optional[str] = typer.Option(
        None, "--project", help="Show the tasks of this project instead."
    ),
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """List target projects, or the tasks of one project."""
    setup_logging(config_dir=config_dir)
    raise typer.Exit(code=asyncio.run(_projects(config_dir, project)))


@app.command()
def select(
    project: str = typer.Option(..., "--project", help="Target project ID."),
    task: str = typer.Option(..., "--task", help="Target task ID."),
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Remember the target project and task entries are created in."""
    setup_logging(config_dir=config_dir)
    config = Config(config_dir)
    config.selected_project = project
    config.selected_task = task
    console.print(f"[green]Selected project {project}, task {task}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Time Entry Sync v{__version__}")


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
