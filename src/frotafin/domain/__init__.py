"""Domain layer for frotafin application."""

from frotafin.domain.csv_import import SpreadsheetImportService
from frotafin.domain.entities import Snapshot
from frotafin.domain.ledger import LedgerStore
from frotafin.domain.sync import SyncService

__all__ = [
    "LedgerStore",
    "Snapshot",
    "SpreadsheetImportService",
    "SyncService",
]
