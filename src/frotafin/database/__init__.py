"""Persistence layer for frotafin."""

from frotafin.database.base import Storage
from frotafin.database.factories import create_sqlite_storage

__all__ = ["Storage", "create_sqlite_storage"]
