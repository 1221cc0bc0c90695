"""Abstract storage interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class Storage(ABC):
    """Abstract key/value persistence for the ledger.

    Each logical key (one entity collection or one scalar setting) holds a
    single JSON document, so a corrupt key never blocks loading the others.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the storage backend."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Persist a JSON-serializable document under ``key``.

        Raises:
            PersistenceError: If the document cannot be written
        """
        pass

    @abstractmethod
    def save_many(self, documents: dict[str, Any]) -> None:
        """Persist several documents as one unit: either all are written or none.

        Raises:
            PersistenceError: If any document cannot be written
        """
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the document stored under ``key``, or None if absent.

        Raises:
            PersistenceError: If the stored document cannot be read or decoded
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        pass
