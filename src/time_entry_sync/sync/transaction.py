"""Single-use batch of create/delete operations against the target service."""

import logging
from dataclasses import dataclass

from time_entry_sync.adapters.base import WriteCapability
from time_entry_sync.adapters.models import TimeEntry
from time_entry_sync.exceptions import PreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemFailure:
    """An entry that could not be applied and why."""

    entry: TimeEntry
    error: Exception


@dataclass(frozen=True)
class TransactionResult:
    """Per-item outcome of an executed transaction."""

    created: tuple[TimeEntry, ...] = ()
    failed_to_create: tuple[ItemFailure, ...] = ()
    deleted: tuple[TimeEntry, ...] = ()
    failed_to_delete: tuple[ItemFailure, ...] = ()

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_to_create or self.failed_to_delete)

    def __str__(self) -> str:
        """String representation of results."""
        return (
            f"Created: {len(self.created)}, "
            f"Failed to create: {len(self.failed_to_create)}, "
            f"Deleted: {len(self.deleted)}, "
            f"Failed to delete: {len(self.failed_to_delete)}"
        )


class SyncTransaction:
    """Applies queued creations and deletions to the target service.

    Deletions run before creations and items run one at a time. A failing
    item is recorded and the batch continues with the next one.
    """

    def __init__(self, target: WriteCapability) -> None:
        """Initialize an empty transaction.

        Args:
            target: Service the changes are applied to.
        """
        self.target = target
        self._to_create: list[TimeEntry] = []
        self._to_delete: list[TimeEntry] = []
        self._executed = False

    @property
    def executed(self) -> bool:
        return self._executed

    @property
    def is_empty(self) -> bool:
        return not self._to_create and not self._to_delete

    def create(self, entry: TimeEntry) -> None:
        """Queue an entry for creation; its task_id names the destination task."""
        self._ensure_not_executed()
        self._to_create.append(entry)

    def delete(self, entry: TimeEntry) -> None:
        """Queue a target entry for deletion."""
        self._ensure_not_executed()
        self._to_delete.append(entry)

    async def execute(self) -> TransactionResult:
        """Apply all queued changes.

        Returns:
            Outcome of every queued item.

        Raises:
            PreconditionError: If the target is not authenticated or the
                transaction was already executed. Nothing is sent in that case.
        """
        if not self.target.is_authenticated:
            raise PreconditionError(
                f"{self.target.name} is not authenticated yet", target=self.target.name
            )
        self._ensure_not_executed()
        self._executed = True

        logger.info(
            f"Applying transaction to {self.target.name}: "
            f"{len(self._to_delete)} deletions, {len(self._to_create)} creations"
        )

        deleted, failed_to_delete = await self._delete_entries()
        created, failed_to_create = await self._create_entries()

        result = TransactionResult(
            created=tuple(created),
            failed_to_create=tuple(failed_to_create),
            deleted=tuple(deleted),
            failed_to_delete=tuple(failed_to_delete),
        )
        logger.info(f"Transaction complete: {result}")
        return result

    async def _delete_entries(self) -> tuple[list[TimeEntry], list[ItemFailure]]:
        deleted: list[TimeEntry] = []
        failed: list[ItemFailure] = []

        for entry in self._to_delete:
            try:
                await self.target.delete_entry(entry.id)
            except Exception as e:
                logger.error(f"Failed to delete entry {entry.id}: {e}")
                failed.append(ItemFailure(entry=entry, error=e))
                continue
            logger.info(f"Deleted {self.target.name} entry {entry.id} on {entry.date}")
            deleted.append(entry)

        return deleted, failed

    async def _create_entries(self) -> tuple[list[TimeEntry], list[ItemFailure]]:
        created: list[TimeEntry] = []
        failed: list[ItemFailure] = []

        for entry in self._to_create:
            try:
                await self.target.create_entry(entry)
            except Exception as e:
                logger.error(f"Failed to create entry from {entry.id}: {e}")
                failed.append(ItemFailure(entry=entry, error=e))
                continue
            logger.info(
                f"Created {self.target.name} entry: {entry.description!r} "
                f"{entry.duration_in_seconds}s on {entry.date}"
            )
            created.append(entry)

        return created, failed

    def _ensure_not_executed(self) -> None:
        if self._executed:
            raise PreconditionError("Transaction was already executed")
