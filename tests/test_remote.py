"""Tests for remote blob store backends."""

import base64
import json
from unittest.mock import MagicMock

import pytest
import requests

from frotafin.domain.errors import SyncError
from frotafin.remote.factories import create_remote_store, default_sync_key
from frotafin.remote.file_store import FileBlobStore
from frotafin.remote.github import GitHubBlobStore
from frotafin.remote.pantry import PantryBlobStore


def _response(status_code, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = json.dumps(body) if body is not None else ""
    if body is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = body
    return response


def _github_entry(blob, sha="abc123"):
    content = base64.b64encode(json.dumps(blob).encode("utf-8")).decode("ascii")
    return {"sha": sha, "content": content}


# File backend
def test_file_store_round_trip(tmp_path):
    """Test blobs are written as <key>.json and read back."""
    remote = FileBlobStore(tmp_path / "sync")

    remote.put("frota", {"trucks": [], "companyName": "Transportes Ávila"})

    assert (tmp_path / "sync" / "frota.json").exists()
    assert remote.get("frota") == {"trucks": [], "companyName": "Transportes Ávila"}


def test_file_store_missing_key(tmp_path):
    """Test reading an unknown key."""
    with pytest.raises(SyncError, match="No data found"):
        FileBlobStore(tmp_path).get("nothing")


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden"])
def test_file_store_rejects_unsafe_keys(tmp_path, key):
    """Test keys cannot leave the sync directory."""
    with pytest.raises(SyncError, match="Invalid sync key"):
        FileBlobStore(tmp_path).put(key, {})


def test_file_store_rejects_non_object(tmp_path):
    """Test files that do not hold an object are rejected."""
    (tmp_path / "frota.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SyncError, match="JSON object"):
        FileBlobStore(tmp_path).get("frota")
    (tmp_path / "frota.json").write_text("{broken", encoding="utf-8")
    with pytest.raises(SyncError, match="not valid JSON"):
        FileBlobStore(tmp_path).get("frota")


def test_file_store_unserializable_blob(tmp_path):
    """Test unserializable data is reported as a sync error and nothing is written."""
    with pytest.raises(SyncError, match="Cannot serialize"):
        FileBlobStore(tmp_path).put("frota", {"bad": object()})
    assert list(tmp_path.iterdir()) == []


def test_file_store_failed_replace_removes_temp_file(tmp_path, monkeypatch):
    """Test a failed rename leaves neither the target nor a temp file behind."""
    def failing_replace(src, dst):
        raise OSError("read-only file system")

    monkeypatch.setattr("frotafin.remote.file_store.os.replace", failing_replace)

    with pytest.raises(SyncError, match="read-only file system"):
        FileBlobStore(tmp_path).put("frota", {"a": 1})
    assert list(tmp_path.iterdir()) == []


# Pantry backend
def test_pantry_put_posts_basket():
    """Test uploads replace the basket with a POST."""
    session = MagicMock()
    session.request.return_value = _response(200)
    remote = PantryBlobStore("pantry-1", session=session)

    remote.put("frota", {"a": 1})

    session.request.assert_called_once_with(
        "POST",
        "https://getpantry.cloud/apiv1/pantry/pantry-1/basket/frota",
        json={"a": 1},
        timeout=(5, 30),
    )


def test_pantry_get():
    """Test downloads parse the basket body."""
    session = MagicMock()
    session.request.return_value = _response(200, {"trucks": []})
    assert PantryBlobStore("pantry-1", session=session).get("frota") == {"trucks": []}


def test_pantry_missing_basket():
    """Test Pantry's 400 for unknown baskets."""
    session = MagicMock()
    session.request.return_value = _response(400, {"message": "Could not get basket"})
    with pytest.raises(SyncError, match="No data found in Pantry"):
        PantryBlobStore("pantry-1", session=session).get("frota")


def test_pantry_requires_id():
    """Test the pantry ID is mandatory."""
    with pytest.raises(SyncError, match="FROTAFIN_PANTRY_ID"):
        PantryBlobStore("")


def test_pantry_server_error_includes_message():
    """Test HTTP errors carry the API message."""
    session = MagicMock()
    session.request.return_value = _response(500, {"message": "boom"})
    with pytest.raises(SyncError, match=r"upload failed \(HTTP 500\): boom"):
        PantryBlobStore("pantry-1", session=session).put("frota", {})


def test_transport_errors_become_sync_errors():
    """Test timeouts and connection errors."""
    session = MagicMock()
    session.request.side_effect = requests.ReadTimeout("slow")
    with pytest.raises(SyncError, match="did not answer in time"):
        PantryBlobStore("pantry-1", session=session).get("frota")

    session.request.side_effect = requests.ConnectionError("down")
    with pytest.raises(SyncError, match="Could not reach Pantry"):
        PantryBlobStore("pantry-1", session=session).get("frota")


# GitHub backend
def test_github_put_creates_file():
    """Test the first upload commits without a SHA."""
    session = MagicMock()
    session.request.side_effect = [_response(404), _response(201, {"content": {}})]
    remote = GitHubBlobStore("tok", "me", "data", session=session)

    remote.put("frota", {"trucks": []})

    method, url = session.request.call_args.args
    body = session.request.call_args.kwargs["json"]
    assert method == "PUT"
    assert url == "https://api.github.com/repos/me/data/contents/frota.json"
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "token tok"
    assert body["branch"] == "main"
    assert "sha" not in body
    assert json.loads(base64.b64decode(body["content"])) == {"trucks": []}
    assert body["message"].startswith("FrotaFin sync: ")


def test_github_put_updates_existing_file():
    """Test updates send the current blob SHA."""
    session = MagicMock()
    session.request.side_effect = [
        _response(200, _github_entry({"old": True}, sha="s1")),
        _response(200, {"content": {}}),
    ]
    remote = GitHubBlobStore("tok", "me", "data", branch="sync", session=session)

    remote.put("frota", {"new": True})

    first_call = session.request.call_args_list[0]
    assert first_call.kwargs["params"] == {"ref": "sync"}
    assert session.request.call_args.kwargs["json"]["sha"] == "s1"


def test_github_get_decodes_content():
    """Test downloads decode the base64 file content."""
    session = MagicMock()
    session.request.return_value = _response(200, _github_entry({"trucks": [1]}))
    assert GitHubBlobStore("tok", "me", "data", session=session).get("frota") == {"trucks": [1]}


def test_github_get_missing_file():
    """Test a missing file is reported."""
    session = MagicMock()
    session.request.return_value = _response(404)
    with pytest.raises(SyncError, match="frota.json not found"):
        GitHubBlobStore("tok", "me", "data", session=session).get("frota")


def test_github_rejected_credentials():
    """Test 401 answers."""
    session = MagicMock()
    session.request.return_value = _response(401)
    with pytest.raises(SyncError, match="rejected the credentials"):
        GitHubBlobStore("tok", "me", "data", session=session).get("frota")


def test_github_requires_configuration():
    """Test missing settings name the environment variable."""
    with pytest.raises(SyncError, match="FROTAFIN_GITHUB_OWNER"):
        GitHubBlobStore("tok", "", "data")


# Factories
def test_create_remote_store_defaults_to_file(monkeypatch, tmp_path):
    """Test the file backend and its directory setting."""
    monkeypatch.delenv("FROTAFIN_SYNC_BACKEND", raising=False)
    monkeypatch.setenv("FROTAFIN_SYNC_DIR", str(tmp_path))

    remote = create_remote_store()

    assert isinstance(remote, FileBlobStore)
    assert remote.directory == tmp_path


def test_create_remote_store_from_environment(monkeypatch):
    """Test backend selection through environment variables."""
    monkeypatch.setenv("FROTAFIN_SYNC_BACKEND", "pantry")
    monkeypatch.setenv("FROTAFIN_PANTRY_ID", "p-1")
    assert isinstance(create_remote_store(), PantryBlobStore)

    monkeypatch.setenv("FROTAFIN_GITHUB_TOKEN", "tok")
    monkeypatch.setenv("FROTAFIN_GITHUB_OWNER", "me")
    monkeypatch.setenv("FROTAFIN_GITHUB_REPO", "data")
    remote = create_remote_store("GitHub")
    assert isinstance(remote, GitHubBlobStore)
    assert remote.branch == "main"


def test_create_remote_store_unknown_backend():
    """Test unknown backends are rejected."""
    with pytest.raises(SyncError, match="Unknown sync backend"):
        create_remote_store("sheets")


def test_default_sync_key(monkeypatch):
    """Test the sync key setting."""
    monkeypatch.delenv("FROTAFIN_SYNC_KEY", raising=False)
    assert default_sync_key() == "frotafin"
    monkeypatch.setenv("FROTAFIN_SYNC_KEY", "empresa")
    assert default_sync_key() == "empresa"
