"""Shared requests.Session handling for HTTP backends."""

import json
import logging
from typing import Any, Optional

import requests

from frotafin.domain.errors import SyncError
from frotafin.remote.base import RemoteBlobStore

logger = logging.getLogger(__name__)

# (connect, read) seconds.
DEFAULT_TIMEOUT = (5, 30)


class HttpBlobStore(RemoteBlobStore):
    """Base class for backends that talk to a JSON HTTP API."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ):
        self._session = session
        self.timeout = timeout

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {"Accept": "application/json", "User-Agent": "frotafin-sync"}
            )
        return self._session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send a request, converting transport failures into SyncError."""
        kwargs.setdefault("timeout", self.timeout)
        logger.debug("%s %s", method, url)
        try:
            response = self._get_session().request(method, url, **kwargs)
        except requests.Timeout as e:
            raise SyncError(f"{self.name} did not answer in time: {e}") from e
        except requests.RequestException as e:
            raise SyncError(f"Could not reach {self.name}: {e}") from e
        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code in (401, 403):
            raise SyncError(f"{self.name} rejected the credentials (HTTP {response.status_code})")
        return response

    def _raise_for_status(self, response: requests.Response, action: str) -> None:
        if response.ok:
            return
        detail = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            detail = f": {body['message']}"
        raise SyncError(f"{self.name} {action} failed (HTTP {response.status_code}){detail}")

    def _json_object(self, text: str) -> dict[str, Any]:
        try:
            document = json.loads(text)
        except ValueError as e:
            raise SyncError(f"{self.name} returned invalid JSON: {e}") from e
        if not isinstance(document, dict):
            raise SyncError(f"{self.name} returned {type(document).__name__}, expected an object")
        return document

    def close(self) -> None:
        """Closes the session."""
        if self._session is not None:
            self._session.close()
            self._session = None
