"""Reconciliation and synchronization of time entries."""

from time_entry_sync.sync.alerts import Alert, AlertChannel, AlertLevel
from time_entry_sync.sync.app import SyncApp, build_app
from time_entry_sync.sync.async_state import AsyncOperation
from time_entry_sync.sync.controller import IntegrationController
from time_entry_sync.sync.matcher import are_similar
from time_entry_sync.sync.reconciliation import (
    ReconciliationEngine,
    source_not_yet_synced,
    target_not_in_source,
)
from time_entry_sync.sync.stores import SourceSide, TargetSide
from time_entry_sync.sync.transaction import ItemFailure, SyncTransaction, TransactionResult

__all__ = [
    "Alert",
    "AlertChannel",
    "AlertLevel",
    "AsyncOperation",
    "IntegrationController",
    "ItemFailure",
    "ReconciliationEngine",
    "SourceSide",
    "SyncApp",
    "SyncTransaction",
    "TargetSide",
    "TransactionResult",
    "are_similar",
    "build_app",
    "source_not_yet_synced",
    "target_not_in_source",
]
