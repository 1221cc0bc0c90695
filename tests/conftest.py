"""Shared pytest fixtures for frotafin tests."""

import itertools
import os
import tempfile
from datetime import date
from pathlib import Path

import pytest

from frotafin.database.factories import create_sqlite_storage
from frotafin.domain.errors import SyncError
from frotafin.domain.ledger import LedgerStore
from frotafin.remote.base import RemoteBlobStore

TODAY = date(2024, 3, 15)


class MemoryBlobStore(RemoteBlobStore):
    """Remote blob store kept in a dict."""

    name = "Memory"

    def __init__(self):
        self.blobs = {}

    def put(self, key, blob):
        self.blobs[key] = blob

    def get(self, key):
        if key not in self.blobs:
            raise SyncError(f"No data found for key '{key}'")
        return self.blobs[key]


@pytest.fixture
def db_path():
    """Path of a temporary SQLite database file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def storage(db_path):
    """Create a temporary SQLite storage for testing."""
    storage = create_sqlite_storage(database_path=db_path)
    storage.connect()

    yield storage

    storage.disconnect()


@pytest.fixture
def id_factory():
    """Deterministic entity IDs: id1, id2, ..."""
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def store(storage, id_factory):
    """Ledger store on temporary storage with a fixed clock (2024-03-15)."""
    return LedgerStore(storage, id_factory=id_factory, clock=lambda: TODAY)


@pytest.fixture
def fuel_category_id(store):
    """ID of the seeded fuel category."""
    return store.snapshot.find_category_containing("combustível").id


@pytest.fixture
def truck(store):
    """The seeded truck ABC-1234."""
    return next(t for t in store.snapshot.trucks if t.plate == "ABC-1234")


@pytest.fixture
def memory_remote():
    """In-memory remote blob store."""
    return MemoryBlobStore()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def open_store(db_path):
    """Open a fresh store on the test database, as a new process would."""
    stores = []

    def _open():
        store = LedgerStore(create_sqlite_storage(database_path=db_path))
        stores.append(store)
        return store

    yield _open

    for store in stores:
        store.storage.disconnect()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
