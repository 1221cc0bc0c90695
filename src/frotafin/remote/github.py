"""GitHub contents API backend.

The snapshot is committed as a JSON file in a repository. Updating an
existing file requires its blob SHA, so uploads read the file first.
"""

import base64
import binascii
import json
import logging
from datetime import datetime
from typing import Any, Optional

import requests

from frotafin.domain.errors import SyncError
from frotafin.remote.http import DEFAULT_TIMEOUT, HttpBlobStore

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


class GitHubBlobStore(HttpBlobStore):
    """Each sync key is a ``<key>.json`` file on one branch of a repository."""

    name = "GitHub"

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        branch: str = "main",
        session: Optional[requests.Session] = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
        base_url: str = GITHUB_API,
    ):
        super().__init__(session=session, timeout=timeout)
        for value, variable in (
            (token, "FROTAFIN_GITHUB_TOKEN"),
            (owner, "FROTAFIN_GITHUB_OWNER"),
            (repo, "FROTAFIN_GITHUB_REPO"),
        ):
            if not value:
                raise SyncError(f"GitHub sync is not configured (set {variable})")
        self.token = token
        self.owner = owner
        self.repo = repo
        self.branch = branch or "main"
        self.base_url = base_url.rstrip("/")

    @staticmethod
    def path_for(key: str) -> str:
        """Repository path used for a sync key."""
        return key if key.endswith(".json") else f"{key}.json"

    def _contents_url(self, key: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/contents/{self.path_for(key)}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
        }

    def _fetch(self, key: str) -> Optional[dict[str, Any]]:
        """Return the contents API entry for ``key``, or None if the file is missing."""
        response = self._request(
            "GET", self._contents_url(key), headers=self._headers(), params={"ref": self.branch}
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, "download")
        return self._json_object(response.text)

    def put(self, key: str, blob: dict[str, Any]) -> None:
        existing = self._fetch(key)
        content = json.dumps(blob, indent=2, ensure_ascii=False).encode("utf-8")
        body = {
            "message": f"FrotaFin sync: {datetime.now().strftime('%d/%m/%Y %H:%M:%S')}",
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self.branch,
        }
        if existing and existing.get("sha"):
            body["sha"] = existing["sha"]
        response = self._request("PUT", self._contents_url(key), headers=self._headers(), json=body)
        self._raise_for_status(response, "upload")
        logger.info("Committed %s to %s/%s@%s", self.path_for(key), self.owner, self.repo, self.branch)

    def get(self, key: str) -> dict[str, Any]:
        entry = self._fetch(key)
        if entry is None:
            raise SyncError(
                f"File {self.path_for(key)} not found in {self.owner}/{self.repo}@{self.branch}"
            )
        encoded = entry.get("content")
        if not isinstance(encoded, str):
            raise SyncError(f"GitHub returned no content for {self.path_for(key)}")
        try:
            text = base64.b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SyncError(f"GitHub content for {self.path_for(key)} is not valid: {e}") from e
        return self._json_object(text)
