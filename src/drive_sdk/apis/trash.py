from __future__ import annotations

from typing import Any

from ..transport.http import HttpTransport

from ..models.entity import EntityType
from ..models.search import TrashContents
from .files import FilesAPI
from .folders import FoldersAPI


class TrashAPI:
    def __init__(self, http: HttpTransport, *, folders: FoldersAPI, files: FilesAPI):
        self._http = http
        self._folders = folders
        self._files = files

    def list(self) -> TrashContents:
        data = self._http.request("GET", "/trash")
        return TrashContents.model_validate(data or {})

    def restore(self, item_id: str, entity_type: EntityType) -> Any:
        if EntityType(entity_type) is EntityType.FOLDER:
            return self._folders.restore(item_id)
        return self._files.restore(item_id)

    def permanently_delete(self, item_id: str, entity_type: EntityType) -> Any:
        if EntityType(entity_type) is EntityType.FOLDER:
            return self._folders.permanently_delete(item_id)
        return self._files.permanently_delete(item_id)
