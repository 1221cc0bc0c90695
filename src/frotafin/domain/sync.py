"""Snapshot upload and download through a remote blob store."""

import logging
from dataclasses import dataclass
from typing import Optional

from frotafin.database import mappers
from frotafin.domain.entities import Snapshot
from frotafin.domain.errors import SyncError, ValidationError
from frotafin.domain.ledger import LedgerStore
from frotafin.remote.base import RemoteBlobStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSummary:
    """Counts of what went over the wire."""

    key: str
    transactions: int
    fuel_records: int
    trucks: int
    last_sync: Optional[str]


def _summary(key: str, snapshot: Snapshot) -> SyncSummary:
    return SyncSummary(
        key=key,
        transactions=len(snapshot.transactions),
        fuel_records=len(snapshot.fuel_records),
        trucks=len(snapshot.trucks),
        last_sync=snapshot.last_sync,
    )


class SyncService:
    """Mirror the ledger to a remote blob store under one sync key."""

    def __init__(self, store: LedgerStore, remote: RemoteBlobStore, key: str):
        if not key or not key.strip():
            raise SyncError("A sync key is required")
        self.store = store
        self.remote = remote
        self.key = key.strip()

    def upload(self) -> SyncSummary:
        """Push the current snapshot and stamp the last-sync time.

        Raises:
            SyncError: If the remote store fails; local state is untouched
        """
        payload = mappers.snapshot_to_payload(self.store.snapshot)
        self.remote.put(self.key, payload)
        snapshot = self.store.record_sync()
        logger.info("Uploaded snapshot to %s key '%s'", self.remote.name, self.key)
        return _summary(self.key, snapshot)

    def download(self) -> SyncSummary:
        """Replace the local snapshot with the remote one.

        The payload is validated in full before anything is replaced, so a
        malformed document leaves local data exactly as it was.

        Raises:
            SyncError: If the remote store fails or the payload is invalid
        """
        payload = self.remote.get(self.key)
        try:
            snapshot = mappers.snapshot_from_payload(payload, base=self.store.snapshot)
        except ValidationError as e:
            raise SyncError(f"Remote data for key '{self.key}' was rejected: {e}") from e
        self.store.replace_snapshot(snapshot)
        snapshot = self.store.record_sync()
        logger.info("Downloaded snapshot from %s key '%s'", self.remote.name, self.key)
        return _summary(self.key, snapshot)
