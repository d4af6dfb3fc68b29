from __future__ import annotations

from typing import Any, List

from ..transport.http import HttpTransport
from ..transport.serializers import dump_body

from ..models.entity import EntityType
from ..models.sharing import CreateShareBody, Permission, Share


class SharingAPI:
    def __init__(self, http: HttpTransport):
        self._http = http

    def create(
        self,
        item_id: str,
        item_type: EntityType,
        email: str,
        permission: Permission = Permission.VIEW,
    ) -> Share:
        body = CreateShareBody(item_id=item_id, item_type=item_type, email=email, permission=permission)
        data = self._http.request("POST", "/shares", json=dump_body(body))
        return Share.model_validate(data)

    def shared_with_me(self) -> List[Share]:
        data = self._http.request("GET", "/shares/shared-with-me")
        return [Share.model_validate(x) for x in (data or [])]

    def sent(self) -> List[Share]:
        data = self._http.request("GET", "/shares/sent")
        return [Share.model_validate(x) for x in (data or [])]

    def delete(self, share_id: str) -> Any:
        return self._http.request("DELETE", f"/shares/{share_id}")
