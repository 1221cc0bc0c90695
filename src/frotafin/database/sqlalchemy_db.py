"""Generic SQLAlchemy storage implementation."""

import json
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frotafin.database.base import Storage
from frotafin.database.models import StoredDocument, create_session_factory
from frotafin.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


class SQLAlchemyStorage(Storage):
    """SQLAlchemy-based implementation of the Storage interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy storage.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        try:
            self.session_factory = create_session_factory(database_url)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot open database {database_url}: {e}")
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def save(self, key: str, value: Any) -> None:
        """Persist a JSON document under ``key``, replacing any previous one."""
        self.save_many({key: value})

    def save_many(self, documents: dict[str, Any]) -> None:
        """Persist several JSON documents in a single transaction.

        Every document is serialized before anything is written, and a
        failed write rolls back the whole batch.
        """
        texts = {}
        for key, value in documents.items():
            try:
                texts[key] = json.dumps(value, ensure_ascii=False)
            except (TypeError, ValueError) as e:
                raise PersistenceError(f"Cannot serialize '{key}': {e}")

        session = self._get_session()
        try:
            for key, text in texts.items():
                self._put_document(session, key, text)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Cannot write {', '.join(texts)}: {e}")
        logger.debug("Saved %s", ", ".join(f"{k} ({len(t)} bytes)" for k, t in texts.items()))

    def _put_document(self, session: Session, key: str, text: str) -> None:
        document = session.get(StoredDocument, key)
        if document is None:
            session.add(StoredDocument(key=key, value=text))
        else:
            document.value = text

    def load(self, key: str) -> Optional[Any]:
        """Return the decoded document stored under ``key``, or None."""
        session = self._get_session()
        try:
            document = session.get(StoredDocument, key)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Cannot read '{key}': {e}")
        if document is None:
            return None
        try:
            return json.loads(document.value)
        except ValueError as e:
            raise PersistenceError(f"Stored value for '{key}' is not valid JSON: {e}")

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        session = self._get_session()
        try:
            document = session.get(StoredDocument, key)
            if document is not None:
                session.delete(document)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Cannot delete '{key}': {e}")

    def keys(self) -> list[str]:
        """List stored keys in alphabetical order."""
        session = self._get_session()
        try:
            rows = session.query(StoredDocument.key).order_by(StoredDocument.key).all()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Cannot list keys: {e}")
        return [row[0] for row in rows]
