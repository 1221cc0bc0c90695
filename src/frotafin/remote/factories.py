"""Factory functions for remote blob stores."""

import os
from pathlib import Path
from typing import Optional

from frotafin.domain.errors import SyncError
from frotafin.remote.base import RemoteBlobStore
from frotafin.remote.file_store import FileBlobStore
from frotafin.remote.github import GitHubBlobStore
from frotafin.remote.pantry import PantryBlobStore

BACKENDS = ("file", "pantry", "github")
DEFAULT_BACKEND = "file"
DEFAULT_SYNC_KEY = "frotafin"


def default_sync_key() -> str:
    """Resolve the sync key from FROTAFIN_SYNC_KEY."""
    return os.environ.get("FROTAFIN_SYNC_KEY") or DEFAULT_SYNC_KEY


def create_remote_store(backend: Optional[str] = None) -> RemoteBlobStore:
    """Create the remote blob store selected by configuration.

    Args:
        backend: "file", "pantry" or "github". If None, uses the
            FROTAFIN_SYNC_BACKEND environment variable, falling back to "file".

    Returns:
        A RemoteBlobStore configured from FROTAFIN_* environment variables

    Raises:
        SyncError: If the backend is unknown or its settings are missing
    """
    backend = (backend or os.environ.get("FROTAFIN_SYNC_BACKEND") or DEFAULT_BACKEND).lower()

    if backend == "file":
        directory = os.environ.get("FROTAFIN_SYNC_DIR") or Path.home() / ".frotafin" / "sync"
        return FileBlobStore(directory)
    if backend == "pantry":
        return PantryBlobStore(os.environ.get("FROTAFIN_PANTRY_ID", ""))
    if backend == "github":
        return GitHubBlobStore(
            token=os.environ.get("FROTAFIN_GITHUB_TOKEN", ""),
            owner=os.environ.get("FROTAFIN_GITHUB_OWNER", ""),
            repo=os.environ.get("FROTAFIN_GITHUB_REPO", ""),
            branch=os.environ.get("FROTAFIN_GITHUB_BRANCH", "main"),
        )

    raise SyncError(f"Unknown sync backend '{backend}'. Supported: {', '.join(BACKENDS)}")
