"""Diffing of source and target entry sets and the default selections."""

import logging
from typing import Iterable

from time_entry_sync.adapters.models import TimeEntry
from time_entry_sync.sync.matcher import has_counterpart

logger = logging.getLogger(__name__)


def source_not_yet_synced(
    source_entries: list[TimeEntry],
    target_entries: list[TimeEntry],
) -> list[str]:
    """Ids of source entries without a similar target entry."""
    return [entry.id for entry in source_entries if not has_counterpart(entry, target_entries)]


def source_already_synced(
    source_entries: list[TimeEntry],
    target_entries: list[TimeEntry],
) -> list[str]:
    """Ids of source entries that already have a similar target entry."""
    return [entry.id for entry in source_entries if has_counterpart(entry, target_entries)]


def target_not_in_source(
    target_entries: list[TimeEntry],
    source_entries: list[TimeEntry],
) -> list[str]:
    """Ids of target entries without a similar source entry."""
    return [entry.id for entry in target_entries if not has_counterpart(entry, source_entries)]


class ReconciliationEngine:
    """Holds the per-side selections offered for the next submit.

    Selections are replaced wholesale, never mutated in place, so a snapshot
    taken by a caller stays valid.
    """

    def __init__(self) -> None:
        """Initialize with empty selections."""
        self.source_selection: frozenset[str] = frozenset()
        self.target_selection: frozenset[str] = frozenset()

    def select_differences(
        self,
        source_entries: list[TimeEntry] | None,
        target_entries: list[TimeEntry] | None,
    ) -> None:
        """Select unsynced source entries and target entries missing from the source.

        A side that has not been fetched counts as empty.
        """
        source_entries = source_entries or []
        target_entries = target_entries or []

        self.source_selection = frozenset(source_not_yet_synced(source_entries, target_entries))
        self.target_selection = frozenset(target_not_in_source(target_entries, source_entries))
        logger.debug(
            f"Selected {len(self.source_selection)} of {len(source_entries)} source entries "
            f"and {len(self.target_selection)} of {len(target_entries)} target entries"
        )

    def set_source_selection(self, ids: Iterable[str]) -> None:
        self.source_selection = frozenset(ids)

    def set_target_selection(self, ids: Iterable[str]) -> None:
        self.target_selection = frozenset(ids)

    def clear(self) -> None:
        self.source_selection = frozenset()
        self.target_selection = frozenset()
