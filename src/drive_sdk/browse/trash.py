"""Trash listing: restore or purge soft-deleted items."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from pydantic import ValidationError

from ..models.batch import BatchOperation
from ..models.search import TrashContents
from ..transport.errors import ApiError, Unauthorized
from .batch import BatchCoordinator, BatchOutcome, EmptySelectionError
from .notices import NoticeBoard, Notifier
from .selection import SelectionKey, SelectionManager

if TYPE_CHECKING:
    from ..client import DriveClient

logger = logging.getLogger(__name__)


class TrashView:
    def __init__(self, client: DriveClient, *, notices: Optional[Notifier] = None) -> None:
        self._client = client
        self.notices: Notifier = notices if notices is not None else NoticeBoard()
        self.contents = TrashContents()
        self.busy: set[str] = set()

        self.selection = SelectionManager()
        self.batch = BatchCoordinator(client.batch, self.selection, refresh=self.load, notices=self.notices)

    def load(self) -> None:
        try:
            self.contents = self._client.trash.list()
        except Unauthorized:
            raise
        except (ApiError, ValidationError) as e:
            logger.error("[load] failed to load trash; error:%s", e)
            self.notices.post("Failed to load trash", str(e), error=True)

    @property
    def empty(self) -> bool:
        return not self.contents.folders and not self.contents.files

    def _item_action(self, key: SelectionKey, label: str, fn: Callable[[], object]) -> bool:
        if key.id in self.busy:
            return False
        self.busy.add(key.id)
        try:
            fn()
        except Unauthorized:
            raise
        except (ApiError, ValidationError) as e:
            logger.error("[_item_action] %s failed; key:%s;error:%s", label, key, e)
            self.notices.post(f"{label.capitalize()} failed", str(e), error=True)
            return False
        finally:
            self.busy.discard(key.id)

        self.selection.discard([key])
        self.load()
        return True

    def restore(self, key: SelectionKey) -> bool:
        return self._item_action(key, "restore", lambda: self._client.trash.restore(key.id, key.entity_type))

    def purge(self, key: SelectionKey) -> bool:
        """Permanent delete; there is no way back."""
        return self._item_action(
            key,
            "delete",
            lambda: self._client.trash.permanently_delete(key.id, key.entity_type),
        )

    def restore_selected(self) -> Optional[BatchOutcome]:
        try:
            return self.batch.execute(self.selection.items(), BatchOperation.RESTORE)
        except EmptySelectionError as e:
            self.notices.post("Nothing selected", str(e), error=True)
            return None
