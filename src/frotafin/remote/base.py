"""Abstract remote blob store interface."""

from abc import ABC, abstractmethod
from typing import Any


class RemoteBlobStore(ABC):
    """A remote place holding one JSON document per sync key.

    Implementations raise SyncError for every failure: network problems,
    timeouts, rejected credentials, unexpected HTTP statuses, missing keys
    and replies that are not JSON objects.
    """

    name: str = "remote"

    @abstractmethod
    def put(self, key: str, blob: dict[str, Any]) -> None:
        """Store ``blob`` under ``key``, replacing any previous document."""
        pass

    @abstractmethod
    def get(self, key: str) -> dict[str, Any]:
        """Return the document stored under ``key``."""
        pass

    def close(self) -> None:
        """Release network resources."""
        pass
