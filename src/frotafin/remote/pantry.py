"""Pantry (getpantry.cloud) basket backend."""

from typing import Any, Optional

import requests

from frotafin.domain.errors import SyncError
from frotafin.remote.http import DEFAULT_TIMEOUT, HttpBlobStore

PANTRY_API = "https://getpantry.cloud/apiv1/pantry"


class PantryBlobStore(HttpBlobStore):
    """Each sync key is a basket of one pantry."""

    name = "Pantry"

    def __init__(
        self,
        pantry_id: str,
        session: Optional[requests.Session] = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
        base_url: str = PANTRY_API,
    ):
        super().__init__(session=session, timeout=timeout)
        if not pantry_id:
            raise SyncError("Pantry ID is required (set FROTAFIN_PANTRY_ID)")
        self.pantry_id = pantry_id
        self.base_url = base_url.rstrip("/")

    def _basket_url(self, key: str) -> str:
        return f"{self.base_url}/{self.pantry_id}/basket/{key}"

    def put(self, key: str, blob: dict[str, Any]) -> None:
        # POST replaces the whole basket; PUT would merge into it
        response = self._request("POST", self._basket_url(key), json=blob)
        self._raise_for_status(response, "upload")

    def get(self, key: str) -> dict[str, Any]:
        response = self._request("GET", self._basket_url(key))
        # Pantry answers 400 for baskets that do not exist
        if response.status_code in (400, 404):
            raise SyncError(f"No data found in Pantry for key '{key}'")
        self._raise_for_status(response, "download")
        return self._json_object(response.text)
