from __future__ import annotations

import itertools
import json
import re
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
import requests

from drive_sdk.browse.notices import NoticeBoard
from drive_sdk.client import DriveClient
from drive_sdk.transport.errors import ApiError, BadRequest, NotFound, Unauthorized
from drive_sdk.transport.http import HttpTransport


Route = Tuple[str, str]


def api_error(cls=ApiError, message: str = "boom", status_code: int = 500) -> ApiError:
    codes = {"TransportError": 0, "BadRequest": 400, "Unauthorized": 401, "NotFound": 404, "Conflict": 409}
    return cls(status_code=codes.get(cls.__name__, status_code), message=message)


class FakeDrive(HttpTransport):
    """
    In-memory drive service behind the transport interface.

    Payloads come back already unwrapped, the way HttpTransport.request
    returns them. Failures are injected per (method, path); hooks run once,
    before the route answers, so a test can act while a request is in flight.
    """

    def __init__(self) -> None:
        super().__init__("http://drive.test", token="test-token")
        self.folders: Dict[str, dict] = {}
        self.files: Dict[str, dict] = {}
        self.trashed: set[str] = set()
        self.shares: List[dict] = []

        self.calls: List[dict] = []
        self.failures: Dict[Route, ApiError] = {}
        self.upload_failures: Dict[str, ApiError] = {}
        self.batch_responses: Dict[str, Any] = {}
        self.ancestors_responses: Dict[str, Any] = {}

        self._hooks: Dict[Route, Callable[[dict], None]] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    # ---- seeding ----

    def add_folder(self, folder_id: str, name: str, parent_id: Optional[str] = None) -> dict:
        f = {"id": folder_id, "name": name, "parentId": parent_id, "userId": "u1", "createdAt": "2024-01-01T00:00:00Z"}
        self.folders[folder_id] = f
        return f

    def add_file(self, file_id: str, name: str, folder_id: Optional[str] = None, size: int = 10) -> dict:
        f = {"id": file_id, "name": name, "folderId": folder_id, "userId": "u1", "size": size, "currentVersion": 1}
        self.files[file_id] = f
        return f

    def once(self, method: str, path: str, fn: Callable[[dict], None]) -> None:
        self._hooks[(method, path)] = fn

    # ---- inspection ----

    def calls_to(self, method: str, path: str) -> List[dict]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    def count(self, method: str, path: str) -> int:
        return len(self.calls_to(method, path))

    # ---- transport ----

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        files: Any = None,
        data: Any = None,
        auth: bool = True,
        raw: bool = False,
    ) -> Any:
        call = {"method": method, "path": path, "params": params, "json": json, "files": files, "data": data}
        with self._lock:
            self.calls.append(call)
            hook = self._hooks.pop((method, path), None)
        if hook is not None:
            hook(call)

        exc = self.failures.get((method, path))
        if exc is None and path == "/files/upload":
            exc = self.upload_failures.get(files["file"][0])
        if exc is not None:
            if isinstance(exc, Unauthorized):
                self._handle_unauthorized()
            raise exc

        with self._lock:
            return self._route(method, path, params or {}, json, files, data)

    # ---- routes ----

    def _live_folders(self) -> List[dict]:
        return [f for f in self.folders.values() if f["id"] not in self.trashed]

    def _live_files(self) -> List[dict]:
        return [f for f in self.files.values() if f["id"] not in self.trashed]

    def _folder(self, folder_id: str) -> dict:
        f = self.folders.get(folder_id)
        if f is None or folder_id in self.trashed:
            raise api_error(NotFound, f"folder {folder_id} not found")
        return f

    def _file(self, file_id: str) -> dict:
        f = self.files.get(file_id)
        if f is None or file_id in self.trashed:
            raise api_error(NotFound, f"file {file_id} not found")
        return f

    def _is_descendant(self, folder_id: Optional[str], ancestor_id: str) -> bool:
        seen = set()
        while folder_id and folder_id not in seen:
            if folder_id == ancestor_id:
                return True
            seen.add(folder_id)
            folder_id = self.folders.get(folder_id, {}).get("parentId")
        return False

    def _chain(self, folder_id: str) -> List[dict]:
        chain: List[dict] = []
        cur: Optional[str] = folder_id
        while cur:
            f = self.folders[cur]
            chain.insert(0, dict(f))
            cur = f["parentId"]
        return chain

    def _move(self, kind: str, item_id: str, target: Optional[str]) -> None:
        if target is not None:
            self._folder(target)
        if kind == "folder":
            f = self._folder(item_id)
            if self._is_descendant(target, item_id):
                raise api_error(BadRequest, "Cannot move a folder into itself or its descendant")
            f["parentId"] = target
        else:
            self._file(item_id)["folderId"] = target

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def _route(self, method: str, path: str, params: dict, body: Any, files: Any, data: Any) -> Any:
        if (method, path) == ("GET", "/folders"):
            folder_id = params.get("folderId")
            folder = dict(self._folder(folder_id)) if folder_id else None
            return {
                "parentName": folder["name"] if folder else None,
                "folder": folder,
                "folders": [dict(f) for f in self._live_folders() if f["parentId"] == folder_id],
                "files": [dict(f) for f in self._live_files() if f["folderId"] == folder_id],
                "storage": {"used": sum(f["size"] for f in self._live_files()), "quota": 1000},
            }

        if (method, path) == ("POST", "/folders"):
            folder_id = self._new_id("fo")
            return dict(self.add_folder(folder_id, body["name"], body.get("parentId")))

        if (method, path) == ("POST", "/files/upload"):
            name, content, _ = files["file"]
            file_id = self._new_id("fi")
            return dict(self.add_file(file_id, name, (data or {}).get("folderId"), size=len(content)))

        if (method, path) == ("POST", "/files/upload-multi"):
            return {"uploaded": sum(1 for k, _ in files if k == "files")}

        if (method, path) == ("GET", "/search"):
            q = params["q"].lower()
            return {
                "folders": [dict(f) for f in self._live_folders() if q in f["name"].lower()],
                "files": [dict(f) for f in self._live_files() if q in f["name"].lower()],
            }

        if (method, path) == ("GET", "/trash"):
            return {
                "folders": [dict(f) for i, f in self.folders.items() if i in self.trashed],
                "files": [dict(f) for i, f in self.files.items() if i in self.trashed],
            }

        m = re.fullmatch(r"/files/batch/(delete|move|restore)", path)
        if m and method == "POST":
            return self._batch(m.group(1), body)

        m = re.fullmatch(r"/folders/([^/]+)/ancestors", path)
        if m and method == "GET":
            folder_id = m.group(1)
            if folder_id in self.ancestors_responses:
                return self.ancestors_responses[folder_id]
            self._folder(folder_id)
            return self._chain(folder_id)

        m = re.fullmatch(r"/(folders|files)/([^/]+)(?:/(rename|move|restore|permanent|download))?", path)
        if m:
            return self._item_route(method, m.group(1)[:-1], m.group(2), m.group(3), params, body)

        if (method, path) == ("POST", "/shares"):
            share = {
                "id": self._new_id("sh"),
                "itemId": body["itemId"],
                "itemType": body["itemType"],
                "ownerId": "u1",
                "permission": body["permission"],
                "sharedWith": {"email": body["email"]},
            }
            self.shares.append(share)
            return dict(share)

        if (method, path) == ("GET", "/shares/sent"):
            return [dict(s) for s in self.shares]
        if (method, path) == ("GET", "/shares/shared-with-me"):
            return []

        m = re.fullmatch(r"/shares/([^/]+)", path)
        if m and method == "DELETE":
            self.shares = [s for s in self.shares if s["id"] != m.group(1)]
            return None

        raise api_error(NotFound, f"no route for {method} {path}")

    def _item_route(
        self,
        method: str,
        kind: str,
        item_id: str,
        action: Optional[str],
        params: dict,
        body: Any,
    ) -> Any:
        table = self.folders if kind == "folder" else self.files
        lookup = self._folder if kind == "folder" else self._file

        if action == "rename" and method == "PATCH":
            item = lookup(item_id)
            item["name"] = body["name"]
            return dict(item)
        if action == "move" and method == "POST":
            self._move(kind, item_id, body["targetFolderId"])
            return {"success": True}
        if action == "restore" and method == "POST":
            if item_id not in self.trashed:
                raise api_error(NotFound, f"{kind} {item_id} is not in trash")
            self.trashed.discard(item_id)
            return {"success": True}
        if action == "permanent" and method == "DELETE":
            if item_id not in self.trashed:
                raise api_error(NotFound, f"{kind} {item_id} is not in trash")
            self.trashed.discard(item_id)
            del table[item_id]
            return None
        if action == "download" and method == "GET":
            lookup(item_id)
            return b"PK\x03\x04" if kind == "folder" else f"content of {item_id}".encode()
        if action is None and method == "DELETE":
            lookup(item_id)
            self.trashed.add(item_id)
            return {"success": True}

        raise api_error(NotFound, f"no route for {method} {kind}/{item_id}/{action}")

    def _batch(self, operation: str, body: dict) -> Any:
        if operation in self.batch_responses:
            return self.batch_responses[operation]

        successes: List[dict] = []
        errors: List[dict] = []
        for item in body["items"]:
            kind, item_id = item["type"], item["id"]
            try:
                if operation == "delete":
                    (self._folder if kind == "folder" else self._file)(item_id)
                    self.trashed.add(item_id)
                elif operation == "move":
                    self._move(kind, item_id, body["targetFolderId"])
                else:
                    if item_id not in self.trashed:
                        raise api_error(NotFound, "not in trash")
                    self.trashed.discard(item_id)
            except ApiError as e:
                errors.append({"id": item_id, "type": kind, "error": e.message})
            else:
                successes.append({"id": item_id, "type": kind})
        return {"successes": successes, "errors": errors}


@pytest.fixture
def drive() -> FakeDrive:
    return FakeDrive()


@pytest.fixture
def tree(drive: FakeDrive) -> FakeDrive:
    """
    My Drive
    ├── Docs (f-docs)
    │   ├── 2024 (f-2024)
    │   │   └── Q1 (f-q1)
    │   │       └── Reports (f-reports)
    │   │           └── summary.pdf
    │   └── notes.txt
    ├── Photos (f-photos)
    ├── readme.md
    └── todo.txt
    """
    drive.add_folder("f-docs", "Docs")
    drive.add_folder("f-2024", "2024", "f-docs")
    drive.add_folder("f-q1", "Q1", "f-2024")
    drive.add_folder("f-reports", "Reports", "f-q1")
    drive.add_folder("f-photos", "Photos")

    drive.add_file("x-readme", "readme.md")
    drive.add_file("x-todo", "todo.txt")
    drive.add_file("x-notes", "notes.txt", "f-docs")
    drive.add_file("x-summary", "summary.pdf", "f-reports")
    return drive


@pytest.fixture
def client(drive: FakeDrive) -> DriveClient:
    c = DriveClient(base_url="http://drive.test", token="test-token")
    c.use_transport(drive)
    return c


@pytest.fixture
def notices() -> NoticeBoard:
    return NoticeBoard()


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Builds a requests.Response as the session would return it."""

    def build(status: int, body: Any = None, *, content_type: Optional[str] = "application/json") -> requests.Response:
        r = requests.Response()
        r.status_code = status
        r.encoding = "utf-8"
        if body is None:
            r._content = b""
        elif isinstance(body, bytes):
            r._content = body
        else:
            r._content = json.dumps(body).encode()
        if content_type:
            r.headers["Content-Type"] = content_type
        return r

    return build
