"""Local directory backend, also used for offline backups."""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from frotafin.domain.errors import SyncError
from frotafin.remote.base import RemoteBlobStore

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class FileBlobStore(RemoteBlobStore):
    """Each sync key is a ``<key>.json`` file inside one directory."""

    name = "File"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        """Return the file that holds ``key``."""
        if not _KEY_PATTERN.match(key or ""):
            raise SyncError(f"Invalid sync key '{key}': use letters, digits, '.', '_' or '-'")
        return self.directory / (key if key.endswith(".json") else f"{key}.json")

    def put(self, key: str, blob: dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            text = json.dumps(blob, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise SyncError(f"Cannot serialize data for key '{key}': {e}") from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".frotafin-", suffix=".tmp")
        except OSError as e:
            raise SyncError(f"Could not write {path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except OSError as e:
            os.unlink(tmp_name)
            raise SyncError(f"Could not write {path}: {e}") from e
        logger.info("Wrote sync file %s", path)

    def get(self, key: str) -> dict[str, Any]:
        path = self.path_for(key)
        if not path.exists():
            raise SyncError(f"No data found for key '{key}' in {self.directory}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except OSError as e:
            raise SyncError(f"Could not read {path}: {e}") from e
        except ValueError as e:
            raise SyncError(f"{path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise SyncError(f"{path} does not hold a JSON object")
        return document
