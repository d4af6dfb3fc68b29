from __future__ import annotations

from typing import Optional, Sequence

from ..transport.http import HttpTransport
from ..transport.serializers import dump_body

from ..models.batch import BatchBody, BatchItem, BatchMoveBody, BatchResult


class BatchAPI:
    """
    One request, many items. The response reports per-item outcome; a 2xx
    does not mean every item was mutated.
    """

    def __init__(self, http: HttpTransport):
        self._http = http

    def delete(self, items: Sequence[BatchItem]) -> BatchResult:
        data = self._http.request("POST", "/files/batch/delete", json=dump_body(BatchBody(items=list(items))))
        return BatchResult.model_validate(data or {})

    def move(self, items: Sequence[BatchItem], target_folder_id: Optional[str]) -> BatchResult:
        body = BatchMoveBody(items=list(items), target_folder_id=target_folder_id)
        data = self._http.request("POST", "/files/batch/move", json=dump_body(body))
        return BatchResult.model_validate(data or {})

    def restore(self, items: Sequence[BatchItem]) -> BatchResult:
        data = self._http.request("POST", "/files/batch/restore", json=dump_body(BatchBody(items=list(items))))
        return BatchResult.model_validate(data or {})
