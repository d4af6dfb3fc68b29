from __future__ import annotations

import pytest

from drive_sdk.client import TOKEN_KEY, DriveClient
from drive_sdk.storage.factory import make_storage
from drive_sdk.transport.errors import Unauthorized

from drive_sdk.browse.trash import TrashView
from drive_sdk.browse.view import FolderView


@pytest.fixture
def stored_client(drive, tmp_path) -> DriveClient:
    c = DriveClient(base_url="http://drive.test", storage=make_storage("fs", str(tmp_path)))
    c.use_transport(drive)
    return c


def _signin_route(drive, token="fresh-token"):
    original = drive._route

    def route(method, path, params, body, files, data):
        if path == "/auth/signin":
            return {"token": token, "user": {"id": "u1", "email": body["email"]}}
        if path == "/auth/me":
            return {"id": "u1", "email": "a@example.com", "storage": {"used": 10, "quota": 1000}}
        if path == "/auth/signout":
            return None
        return original(method, path, params, body, files, data)

    drive._route = route


def test_01_sign_in_persists_token(stored_client, drive):
    _signin_route(drive)

    resp = stored_client.sign_in("a@example.com", "pw")

    assert resp.token == "fresh-token"
    assert drive.token == "fresh-token"
    assert stored_client.storage.read_json(TOKEN_KEY)["access_token"] == "fresh-token"

    me = stored_client.whoami()
    assert me.email == "a@example.com"
    assert me.storage_quota == 1000


def test_02_saved_token_is_loaded(drive, tmp_path):
    storage = make_storage("fs", str(tmp_path))
    storage.write_json(TOKEN_KEY, {"access_token": "saved"})

    c = DriveClient(base_url="http://drive.test", storage=storage)
    c.use_transport(drive)

    assert c.load_token_from_storage() is True
    assert c.token == "saved"
    assert drive.token == "saved"


def test_03_unauthorized_expires_session(stored_client, drive):
    _signin_route(drive)
    stored_client.sign_in("a@example.com", "pw")
    expired = []
    stored_client.on_session_expired = lambda: expired.append(True)
    drive.failures[("GET", "/folders")] = Unauthorized(status_code=401, message="expired")

    with pytest.raises(Unauthorized):
        stored_client.browser().load()

    assert stored_client.session_expired
    assert stored_client.token is None
    assert drive.token is None
    assert stored_client.storage.read_json(TOKEN_KEY) is None
    assert expired == [True]


def test_04_sign_out_clears_token(stored_client, drive):
    _signin_route(drive)
    stored_client.sign_in("a@example.com", "pw")

    stored_client.sign_out()

    assert stored_client.token is None
    assert stored_client.storage.read_json(TOKEN_KEY) is None
    with pytest.raises(RuntimeError):
        stored_client.whoami()


def test_05_views(client):
    assert isinstance(client.browser("f1"), FolderView)
    assert client.browser("f1").folder_id == "f1"
    assert isinstance(client.trash_view(), TrashView)


def test_06_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DRIVE_BASE_URL", "https://drive.example.com/api")
    monkeypatch.delenv("DRIVE_TOKEN", raising=False)
    monkeypatch.setenv("DRIVE_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("DRIVE_UPLOAD_WORKERS", "2")
    make_storage("fs", str(tmp_path)).write_json(TOKEN_KEY, {"access_token": "from-disk"})

    c = DriveClient.from_env()

    assert c.token == "from-disk"
    assert c.upload_workers == 2
    assert c.browser().uploads._max_workers == 2
