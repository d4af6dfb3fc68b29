from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .transport.http import HttpTransport
from .config import DEFAULT_FOLDER_HREF, get_settings
from .storage.base import Storage
from .storage.factory import make_storage


from .apis.auth import AuthAPI, AuthUser, SignInResponse
from .apis.batch import BatchAPI
from .apis.files import FilesAPI
from .apis.folders import FoldersAPI
from .apis.search import SearchAPI
from .apis.sharing import SharingAPI
from .apis.trash import TrashAPI

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth/token"


@dataclass
class DriveClient:
    base_url: str
    token: Optional[str] = None
    timeout: int = 30

    storage: Optional[Storage] = None

    upload_workers: int = 4
    folder_href: str = DEFAULT_FOLDER_HREF

    # called once the server rejects the session (sign-in redirect equivalent)
    on_session_expired: Optional[Callable[[], None]] = None

    session_expired: bool = field(init=False, default=False)

    _http: HttpTransport = field(init=False, repr=False)

    # exposed APIs
    auth: AuthAPI = field(init=False)
    folders: FoldersAPI = field(init=False)
    files: FilesAPI = field(init=False)
    batch: BatchAPI = field(init=False)
    search: SearchAPI = field(init=False)
    sharing: SharingAPI = field(init=False)
    trash: TrashAPI = field(init=False)

    def __post_init__(self) -> None:
        self._http = HttpTransport(
            self.base_url,
            token=self.token,
            timeout=self.timeout,
            on_unauthorized=self._expire_session,
        )
        self._wire(self._http)

    def _wire(self, http: HttpTransport) -> None:
        self.auth = AuthAPI(http)
        self.folders = FoldersAPI(http)
        self.files = FilesAPI(http)
        self.batch = BatchAPI(http)
        self.search = SearchAPI(http)
        self.sharing = SharingAPI(http)
        self.trash = TrashAPI(http, folders=self.folders, files=self.files)

    def use_transport(self, http: HttpTransport) -> None:
        """Swap the transport (tests, custom sessions). The unauthorized hook is re-attached."""
        http.on_unauthorized = self._expire_session
        self._http = http
        self._wire(http)

    # ---- session ----

    def _expire_session(self) -> None:
        self.session_expired = True
        self.token = None
        self._http.set_token(None)
        if self.storage:
            self.storage.delete(TOKEN_KEY)
        if self.on_session_expired:
            self.on_session_expired()

    def set_token(self, token: Optional[str]) -> None:
        self.token = token
        self.session_expired = False
        self._http.set_token(token)

    def load_token_from_storage(self) -> bool:
        """
        Load a saved token if storage is configured.
        Does nothing if token already set.
        """
        if self.token or not self.storage:
            return False
        d = self.storage.read_json(TOKEN_KEY) or {}
        tok = d.get("access_token")
        if isinstance(tok, str) and tok.strip():
            self.set_token(tok.strip())
            return True
        return False

    def sign_in(self, email: str, password: str) -> SignInResponse:
        resp = self.auth.sign_in(email, password)
        self.set_token(resp.token)
        if self.storage:
            self.storage.write_json(TOKEN_KEY, {"access_token": resp.token, "email": email})
        logger.info("[sign_in] signed in; email:%s", email)
        return resp

    def sign_out(self) -> None:
        try:
            self.auth.sign_out()
        finally:
            self.set_token(None)
            if self.storage:
                self.storage.delete(TOKEN_KEY)

    def whoami(self) -> Optional[AuthUser]:
        if not self.token:
            raise RuntimeError("No token set. Call client.sign_in() first or set DRIVE_TOKEN.")
        return self.auth.me()

    # ---- browse entry points ----

    def browser(self, folder_id: Optional[str] = None, **kwargs):
        from .browse.view import FolderView

        return FolderView(self, folder_id=folder_id, **kwargs)

    def trash_view(self, **kwargs):
        from .browse.trash import TrashView

        return TrashView(self, **kwargs)

    @classmethod
    def from_env(cls) -> "DriveClient":
        s = get_settings()

        storage = make_storage(s.storage_backend, s.storage_dir)

        c = cls(
            base_url=s.base_url,
            token=s.token,
            timeout=s.timeout,
            storage=storage,
            upload_workers=s.upload_workers,
            folder_href=s.folder_href,
        )
        if not c.token:
            c.load_token_from_storage()

        return c
