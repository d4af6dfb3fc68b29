"""The primary folder browser: listing, selection and the actions on them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional, TypeVar

from pydantic import ValidationError

from ..models.batch import BatchOperation
from ..models.entity import EntityType
from ..models.folder import File, Folder, FolderContents
from ..models.sharing import Permission, Share
from ..transport.errors import ApiError, Unauthorized
from .batch import BatchCoordinator, BatchOutcome, EmptySelectionError
from .breadcrumbs import BreadcrumbEntry, BreadcrumbResolver
from .notices import NoticeBoard, Notifier
from .picker import DestinationPicker
from .selection import SelectionKey, SelectionManager
from .uploads import FileInput, UploadOrchestrator, UploadReport

if TYPE_CHECKING:
    from ..client import DriveClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidNameError(ValueError):
    """Blank names are rejected before any request is made."""


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidNameError("Name must not be empty")
    return cleaned


class FolderView:
    """
    One browsing session rooted at folder_id (None = "My Drive").

    Owns the selection (cleared on every navigation) and the per-row busy
    flags that stop a second delete/download on a row whose first one is
    still running.
    """

    def __init__(
        self,
        client: DriveClient,
        folder_id: Optional[str] = None,
        *,
        notices: Optional[Notifier] = None,
        on_selection_change: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._client = client
        self.notices: Notifier = notices if notices is not None else NoticeBoard()

        self.folder_id: Optional[str] = folder_id
        self.contents: Optional[FolderContents] = None
        self.breadcrumbs: List[BreadcrumbEntry] = []
        self.loading = False
        self.busy: set[str] = set()

        self.selection = SelectionManager(on_change=on_selection_change)
        self.resolver = BreadcrumbResolver(client.folders, href_template=client.folder_href)
        self.batch = BatchCoordinator(
            client.batch,
            self.selection,
            refresh=self.refresh,
            notices=self.notices,
        )
        self.uploads = UploadOrchestrator(
            client.files,
            refresh=self.refresh,
            notices=self.notices,
            max_workers=client.upload_workers,
        )

        self._generation = 0

    # ---- listing ----

    @property
    def folder(self) -> Optional[Folder]:
        return self.contents.folder if self.contents else None

    @property
    def folders(self) -> List[Folder]:
        return list(self.contents.folders) if self.contents else []

    @property
    def files(self) -> List[File]:
        return list(self.contents.files) if self.contents else []

    @property
    def uploading(self) -> bool:
        return self.uploads.uploading

    def open(self, folder_id: Optional[str]) -> None:
        """Navigate. The selection belongs to the previous listing and is dropped."""
        self.selection.clear()
        self.folder_id = folder_id
        self.load()

    def go_up(self) -> None:
        parent = self.folder.parent_id if self.folder else None
        self.open(parent)

    def refresh(self) -> None:
        self.load()

    def load(self) -> None:
        self._generation += 1
        generation = self._generation
        folder_id = self.folder_id
        self.loading = True

        try:
            try:
                contents = self._client.folders.list_children(folder_id)
            except Unauthorized:
                raise
            except (ApiError, ValidationError) as e:
                # keep whatever listing we had; the user can retry
                logger.error("[load] failed to load contents; folder_id:%s;error:%s", folder_id, e)
                self.notices.post("Failed to load folder", str(e), error=True)
                return

            if generation != self._generation or folder_id != self.folder_id:
                logger.debug("[load] discarding stale listing; folder_id:%s", folder_id)
                return
            self.contents = contents

            crumbs = self.resolver.resolve(folder_id)
            if generation == self._generation and folder_id == self.folder_id:
                self.breadcrumbs = crumbs
        finally:
            if generation == self._generation:
                self.loading = False

    def name_of(self, key: SelectionKey) -> str:
        pool = self.folders if key.entity_type is EntityType.FOLDER else self.files
        for item in pool:
            if item.id == key.id:
                return item.name
        return key.id

    # ---- selection / batch ----

    def select_all(self) -> None:
        self.selection.select_all(self.folders, self.files)

    def _run_batch(self, operation: BatchOperation, target: Optional[str] = None) -> Optional[BatchOutcome]:
        try:
            return self.batch.execute(self.selection.items(), operation, target)
        except EmptySelectionError as e:
            self.notices.post("Nothing selected", str(e), error=True)
            return None

    def delete_selected(self) -> Optional[BatchOutcome]:
        return self._run_batch(BatchOperation.DELETE)

    def move_selected(self, target_folder_id: Optional[str]) -> Optional[BatchOutcome]:
        return self._run_batch(BatchOperation.MOVE, target_folder_id)

    def picker(self, initial_folder_id: Optional[str] = None) -> DestinationPicker:
        """A fresh destination picker; it shares nothing with this view's navigation."""
        resolver = BreadcrumbResolver(self._client.folders, href_template=self._client.folder_href)
        return DestinationPicker(self._client.folders, resolver, initial_folder_id=initial_folder_id)

    def move_to_picked(self, picker: DestinationPicker, key: Optional[SelectionKey] = None):
        """
        Confirm the picker and move there: the single item when key is given,
        otherwise the whole selection as one batch.
        """
        target = picker.confirm()
        if key is not None:
            return self.move_item(key, target)
        return self.move_selected(target)

    # ---- single items ----

    def _row_action(self, key: SelectionKey, label: str, fn: Callable[[], T]) -> Optional[T]:
        if key.id in self.busy:
            logger.debug("[_row_action] row busy, ignoring; key:%s;action:%s", key, label)
            return None

        name = self.name_of(key)
        self.busy.add(key.id)
        try:
            return fn()
        except Unauthorized:
            raise
        except (ApiError, ValidationError) as e:
            logger.error("[_row_action] %s failed; key:%s;error:%s", label, key, e)
            self.notices.post(f"{label.capitalize()} failed", f"Could not {label} \"{name}\": {e}", error=True)
            return None
        finally:
            self.busy.discard(key.id)

    def create_folder(self, name: str) -> Optional[Folder]:
        try:
            clean = _clean_name(name)
        except InvalidNameError as e:
            self.notices.post("Invalid name", str(e), error=True)
            return None

        try:
            folder = self._client.folders.create(clean, self.folder_id)
        except Unauthorized:
            raise
        except (ApiError, ValidationError) as e:
            logger.error("[create_folder] failed; name:%s;error:%s", clean, e)
            self.notices.post("Create failed", str(e), error=True)
            return None

        self.refresh()
        self.notices.post("Folder created", clean)
        return folder

    def rename(self, key: SelectionKey, new_name: str) -> bool:
        try:
            clean = _clean_name(new_name)
        except InvalidNameError as e:
            self.notices.post("Invalid name", str(e), error=True)
            return False

        def call():
            if key.entity_type is EntityType.FOLDER:
                self._client.folders.rename(key.id, clean)
            else:
                self._client.files.rename(key.id, clean)
            return True

        renamed = bool(self._row_action(key, "rename", call))
        if renamed:
            self.refresh()
            self.notices.post("Renamed", "Item renamed successfully")
        return renamed

    def move_item(self, key: SelectionKey, target_folder_id: Optional[str]) -> bool:
        def call():
            if key.entity_type is EntityType.FOLDER:
                self._client.folders.move(key.id, target_folder_id)
            else:
                self._client.files.move(key.id, target_folder_id)
            return True

        moved = bool(self._row_action(key, "move", call))
        if moved:
            self.refresh()
            self.notices.post("Moved", "Item moved successfully")
        return moved

    def delete_item(self, key: SelectionKey) -> bool:
        name = self.name_of(key)

        def call():
            if key.entity_type is EntityType.FOLDER:
                self._client.folders.delete(key.id, recursive=True)
            else:
                self._client.files.delete(key.id)
            return True

        deleted = bool(self._row_action(key, "delete", call))
        if deleted:
            self.selection.discard([key])
            self.refresh()
            self.notices.post("Deleted", f"{name} deleted")
        return deleted

    def download(self, key: SelectionKey) -> Optional[bytes]:
        """File bytes, or a ZIP of the folder."""
        if key.entity_type is EntityType.FOLDER:
            return self._row_action(key, "download", lambda: self._client.folders.download_zip(key.id))
        return self._row_action(key, "download", lambda: self._client.files.download(key.id))

    def share(self, key: SelectionKey, email: str, permission: Permission = Permission.VIEW) -> Optional[Share]:
        email = (email or "").strip()
        if not email:
            self.notices.post("Invalid email", "Email must not be empty", error=True)
            return None

        share = self._row_action(
            key,
            "share",
            lambda: self._client.sharing.create(key.id, key.entity_type, email, permission),
        )
        if share is not None:
            self.notices.post("Shared", f"Shared with {email}")
        return share

    # ---- uploads ----

    def upload_files(self, file_input: FileInput) -> UploadReport:
        return self.uploads.upload_files(file_input, self.folder_id)

    def upload_folder(self, file_input: FileInput) -> UploadReport:
        return self.uploads.upload_folder(file_input, self.folder_id)
