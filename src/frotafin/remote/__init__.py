"""Remote sync backends."""

from frotafin.remote.base import RemoteBlobStore
from frotafin.remote.factories import create_remote_store, default_sync_key

__all__ = ["RemoteBlobStore", "create_remote_store", "default_sync_key"]
