"""Orchestration of fetching, reconciliation, and submission."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Iterable

from time_entry_sync.adapters.models import DateRange, TimeEntry, default_date_range
from time_entry_sync.config import Config
from time_entry_sync.exceptions import PreconditionError
from time_entry_sync.sync import reconciliation
from time_entry_sync.sync.alerts import AlertChannel
from time_entry_sync.sync.async_state import AsyncOperation
from time_entry_sync.sync.reconciliation import ReconciliationEngine
from time_entry_sync.sync.stores import SourceSide, TargetSide
from time_entry_sync.sync.transaction import SyncTransaction, TransactionResult

logger = logging.getLogger(__name__)


class IntegrationController:
    """Keeps source and target entries reconciled and submits the selection.

    Owns the date range and both selections. Every fetch that succeeds is
    followed by a recomputation of the default selections.
    """

    def __init__(
        self,
        config: Config,
        source: SourceSide,
        target: TargetSide,
        alerts: AlertChannel,
        date_range: DateRange | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Application configuration.
            source: Side entries are read from.
            target: Side entries are written to.
            alerts: Channel for user-facing notifications.
            date_range: Initial range, defaults to the current reporting month.
        """
        self.config = config
        self.source = source
        self.target = target
        self.alerts = alerts
        self.date_range = date_range or default_date_range()
        self.engine = ReconciliationEngine()
        self.refresh_state: AsyncOperation[None] = AsyncOperation(
            "refresh", on_error=alerts.publish_error
        )
        self.submission: AsyncOperation[TransactionResult] = AsyncOperation(
            "submission", on_error=alerts.publish_error
        )

    @property
    def source_selection(self) -> frozenset[str]:
        return self.engine.source_selection

    @property
    def target_selection(self) -> frozenset[str]:
        return self.engine.target_selection

    def set_source_selection(self, ids: Iterable[str]) -> None:
        self.engine.set_source_selection(ids)

    def set_target_selection(self, ids: Iterable[str]) -> None:
        self.engine.set_target_selection(ids)

    @property
    def last_result(self) -> TransactionResult | None:
        return self.submission.value

    @property
    def already_synced_source_entries(self) -> list[str]:
        return reconciliation.source_already_synced(
            self.source.entries.value or [], self.target.entries.value or []
        )

    @property
    def target_entries_not_in_source(self) -> list[str]:
        return reconciliation.target_not_in_source(
            self.target.entries.value or [], self.source.entries.value or []
        )

    @property
    def is_submitable(self) -> bool:
        """Whether submit() has something to do and everything it needs."""
        has_selection = bool(
            self.source_selection or (self.target_selection and self.target.deletion_allowed)
        )
        return (
            self.source.is_authenticated
            and self.target.is_authenticated
            and bool(self.target.selected_task)
            and has_selection
            and not self.submission.pending
        )

    def select_differences(self) -> None:
        """Reset both selections to the entries that differ between the sides."""
        self.engine.select_differences(self.source.entries.value, self.target.entries.value)

    async def connect(self) -> None:
        """Authenticate both sides with stored credentials and fetch their entries."""
        await asyncio.gather(self._connect_source(), self._connect_target())

    async def _connect_source(self) -> None:
        if await self.source.load_stored_credentials():
            await self.fetch_source_entries()

    async def _connect_target(self) -> None:
        if await self.target.load_stored_credentials() and self.target.selected_task:
            await self.fetch_target_entries()

    async def authenticate_source(self, credentials: dict[str, Any]) -> bool:
        if not await self.source.authenticate(credentials):
            return False
        await self.fetch_source_entries()
        return True

    async def authenticate_target(self, credentials: dict[str, Any]) -> bool:
        if not await self.target.authenticate(credentials):
            return False
        if self.target.selected_task:
            await self.fetch_target_entries()
        return True

    def forget_source_credentials(self) -> None:
        self.source.forget_credentials()
        self.engine.set_source_selection(())

    def forget_target_credentials(self) -> None:
        self.target.forget_credentials()
        self.engine.set_target_selection(())

    async def fetch_source_entries(self) -> bool:
        if not await self.source.fetch_entries(self.date_range):
            return False
        self.select_differences()
        return True

    async def fetch_target_entries(self) -> bool:
        if not await self.target.fetch_entries(self.date_range):
            return False
        self.select_differences()
        return True

    async def select_target_project(self, project_id: str) -> None:
        if await self.target.select_project(project_id):
            self.engine.set_target_selection(())

    async def select_target_task(self, task_id: str) -> None:
        if self.target.select_task(task_id):
            await self.fetch_target_entries()

    def toggle_deletion_allowed(self) -> bool:
        """Allow or forbid deleting target entries on submit.

        Returns:
            Whether deletion is now allowed.
        """
        self.engine.set_target_selection(())
        allowed = self.target.toggle_deletion_allowed()
        self.select_differences()
        return allowed

    async def set_date_range(self, date_range: DateRange) -> None:
        """Switch to another range and re-fetch every side that can be fetched."""
        self.date_range = date_range
        logger.info(f"Date range set to {date_range}")

        fetches = []
        if self.target.is_authenticated and self.target.selected_task:
            fetches.append(self.fetch_target_entries())
        if self.source.is_authenticated:
            fetches.append(self.fetch_source_entries())
        await asyncio.gather(*fetches)

    async def refresh(self) -> bool:
        """Re-fetch both sides together, then reconcile once.

        Returns:
            True if the refresh completed and is still current.
        """

        async def _refresh() -> None:
            await asyncio.gather(
                self.source.fetch_entries(self.date_range),
                self.target.fetch_entries(self.date_range),
            )
            self.select_differences()

        return await self.refresh_state.run(_refresh)

    def build_transaction(self) -> SyncTransaction:
        """Turn the current selections into a transaction.

        Raises:
            PreconditionError: If a side is not authenticated, no target task
                is selected, or nothing is selected.
        """
        if not self.source.is_authenticated or not self.target.is_authenticated:
            raise PreconditionError(
                f"Authenticate to {self.source.name} and {self.target.name} before submitting"
            )
        task_id = self.target.selected_task
        if not task_id:
            raise PreconditionError(f"Please select the target task in {self.target.name}.")

        transaction = SyncTransaction(self.target.adapter)
        for entry in self._selected(self.source.entries.value, self.source_selection):
            transaction.create(entry.with_task(task_id))
        if self.target.deletion_allowed:
            for entry in self._selected(self.target.entries.value, self.target_selection):
                transaction.delete(entry)

        if transaction.is_empty:
            raise PreconditionError("No entries are selected for submission")
        return transaction

    async def submit(self) -> TransactionResult | None:
        """Apply the selection to the target, then re-fetch the target.

        Returns:
            The transaction result, or None if the submission was rejected,
            also while another submission is still running; the reason is
            published as an alert.
        """
        if self.submission.pending:
            self.alerts.publish_error(PreconditionError("A submission is already in progress"))
            return None

        async def _submit() -> TransactionResult:
            return await self.build_transaction().execute()

        if not await self.submission.run(_submit):
            return None

        result = self.submission.value
        assert result is not None
        self.config.set_last_sync_date(datetime.now())
        self._publish_result_alert(result)
        await self.fetch_target_entries()
        return result

    def _publish_result_alert(self, result: TransactionResult) -> None:
        target_name = self.target.name
        failed_to_create = len(result.failed_to_create)
        failed_to_delete = len(result.failed_to_delete)

        if not failed_to_create and not failed_to_delete:
            self.alerts.success(f"Successfully applied all changes to {target_name}")
            return

        if failed_to_create and not failed_to_delete:
            message = f"Failed to create {failed_to_create} entries in"
        elif failed_to_delete and not failed_to_create:
            message = f"Failed to delete {failed_to_delete} entries from"
        else:
            message = (
                f"Failed to create {failed_to_create}, and delete "
                f"{failed_to_delete} entries from"
            )
        self.alerts.warning(f"{message} {target_name}. Check the log for more details.")

    @staticmethod
    def _selected(entries: list[TimeEntry] | None, selection: frozenset[str]) -> list[TimeEntry]:
        return [entry for entry in entries or [] if entry.id in selection]
