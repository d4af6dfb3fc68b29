from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence

from ..transport.http import HttpTransport
from ..transport.multipart import UploadBlob
from ..transport.serializers import dump_body

from ..models.folder import File, MoveBody, RenameBody

# NOTE:
# Backend expects multipart fields:
# - /files/upload:       file (one), folderId (optional form field)
# - /files/upload-multi: files (repeated), paths (JSON array string, same order),
#                        baseFolderId (optional form field)


class FilesAPI:
    def __init__(self, http: HttpTransport):
        self._http = http

    # -------- upload --------

    def upload(self, blob: UploadBlob, folder_id: Optional[str] = None) -> File:
        files = {"file": blob.part()}
        form: dict[str, str] = {}
        if folder_id:
            form["folderId"] = folder_id

        data = self._http.request(
            "POST",
            "/files/upload",
            data=form or None,
            files=files,
        )
        return File.model_validate(data)

    def upload_multi(
        self,
        blobs: Sequence[UploadBlob],
        paths: Sequence[str],
        base_folder_id: Optional[str] = None,
    ) -> Any:
        """
        POST /files/upload-multi (multipart)

        paths[i] is the relative path of blobs[i]; the service rebuilds the
        sub-folder structure under base_folder_id (root when None).
        """
        if len(blobs) != len(paths):
            raise ValueError("blobs and paths must have the same length")

        multipart: List[Any] = [("files", b.part()) for b in blobs]
        multipart.append(("paths", (None, json.dumps(list(paths)))))
        if base_folder_id:
            multipart.append(("baseFolderId", (None, base_folder_id)))

        return self._http.request("POST", "/files/upload-multi", files=multipart)

    # -------- single item mutations --------

    def rename(self, file_id: str, name: str) -> File:
        data = self._http.request("PATCH", f"/files/{file_id}/rename", json=dump_body(RenameBody(name=name)))
        return File.model_validate(data)

    def move(self, file_id: str, target_folder_id: Optional[str]) -> Any:
        body = MoveBody(target_folder_id=target_folder_id)
        return self._http.request("POST", f"/files/{file_id}/move", json=dump_body(body))

    def delete(self, file_id: str) -> Any:
        """Soft delete: the file goes to trash."""
        return self._http.request("DELETE", f"/files/{file_id}")

    def restore(self, file_id: str) -> Any:
        return self._http.request("POST", f"/files/{file_id}/restore")

    def permanently_delete(self, file_id: str) -> Any:
        return self._http.request("DELETE", f"/files/{file_id}/permanent")

    # -------- download --------

    def download(self, file_id: str) -> bytes:
        """
        Returns raw bytes of the current version.
        """
        data = self._http.request("GET", f"/files/{file_id}/download", raw=True)
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        raise TypeError("Expected bytes from download endpoint")
