from __future__ import annotations

from typing import Any, Optional

from ..transport.http import HttpTransport
from ..transport.serializers import build_params, dump_body

from ..models.folder import (
    CreateFolderBody,
    Folder,
    FolderContents,
    MoveBody,
    RenameBody,
)


class FoldersAPI:
    def __init__(self, http: HttpTransport):
        self._http = http

    # -------- listing --------

    def list_children(self, folder_id: Optional[str] = None) -> FolderContents:
        """
        GET /folders?folderId=<id>

        Direct children (sub-folders + files) of a folder; None lists the root.
        """
        params = build_params({"folderId": folder_id})
        data = self._http.request("GET", "/folders", params=params or None)
        return FolderContents.model_validate(data or {})

    def ancestors(self, folder_id: str) -> Any:
        """
        GET /folders/<id>/ancestors

        Returned raw: the shape is checked by the breadcrumb resolver, which
        falls back to walking parents when it is not an ordered folder list.
        """
        return self._http.request("GET", f"/folders/{folder_id}/ancestors")

    # -------- mutations --------

    def create(self, name: str, parent_id: Optional[str] = None) -> Folder:
        body = CreateFolderBody(name=name, parent_id=parent_id)
        data = self._http.request("POST", "/folders", json=dump_body(body))
        return Folder.model_validate(data)

    def rename(self, folder_id: str, name: str) -> Folder:
        data = self._http.request("PATCH", f"/folders/{folder_id}/rename", json=dump_body(RenameBody(name=name)))
        return Folder.model_validate(data)

    def move(self, folder_id: str, target_folder_id: Optional[str]) -> Any:
        # the service rejects moving a folder under its own descendant
        body = MoveBody(target_folder_id=target_folder_id)
        return self._http.request("POST", f"/folders/{folder_id}/move", json=dump_body(body))

    def delete(self, folder_id: str, *, recursive: bool = False) -> Any:
        """Soft delete: the folder goes to trash."""
        params = build_params({"recursive": recursive})
        return self._http.request("DELETE", f"/folders/{folder_id}", params=params)

    def restore(self, folder_id: str) -> Any:
        return self._http.request("POST", f"/folders/{folder_id}/restore")

    def permanently_delete(self, folder_id: str) -> Any:
        return self._http.request("DELETE", f"/folders/{folder_id}/permanent")

    # -------- download --------

    def download_zip(self, folder_id: str) -> bytes:
        """
        Returns ZIP bytes of the whole folder.
        """
        resp = self._http.request("GET", f"/folders/{folder_id}/download", raw=True)
        if isinstance(resp, (bytes, bytearray)):
            return bytes(resp)
        raise TypeError("Expected ZIP bytes from folder download endpoint")
