"""Destination picker: a folder-only tree walker used to choose a move target."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError

from ..apis.folders import FoldersAPI
from ..models.folder import Folder
from ..transport.errors import ApiError, Unauthorized
from .breadcrumbs import BreadcrumbEntry, BreadcrumbResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationFrame:
    """A folder entered on the way down; popping it goes back one level."""

    folder: Folder

    @property
    def id(self) -> str:
        return self.folder.id


class DestinationPicker:
    """
    Stack-based navigation independent from the main view's breadcrumbs.

    Every transition reloads the sub-folders of the current folder and
    re-resolves its breadcrumbs. A load that completes after the user has
    navigated elsewhere is discarded.
    """

    def __init__(
        self,
        folders: FoldersAPI,
        resolver: BreadcrumbResolver,
        *,
        initial_folder_id: Optional[str] = None,
    ) -> None:
        self._folders_api = folders
        self._resolver = resolver

        self.current_folder_id: Optional[str] = initial_folder_id
        self.stack: List[NavigationFrame] = []
        self.breadcrumbs: List[BreadcrumbEntry] = []
        self.folders: List[Folder] = []
        self.loading = False
        self.is_open = False

        self._generation = 0

    # ---- lifecycle ----

    def open_dialog(self) -> None:
        self.is_open = True
        self._load()

    def close(self) -> None:
        self.is_open = False
        self.loading = False
        # invalidate anything still in flight
        self._generation += 1

    def confirm(self) -> Optional[str]:
        """Return the chosen target (None = root) and close."""
        target = self.current_folder_id
        self.close()
        logger.info("[confirm] destination chosen; folder_id:%s", target)
        return target

    # ---- transitions ----

    @property
    def can_go_back(self) -> bool:
        return bool(self.stack)

    def enter_folder(self, folder: Folder) -> None:
        self.stack.append(NavigationFrame(folder))
        self.current_folder_id = folder.id
        self.breadcrumbs = self.breadcrumbs + [self._resolver.entry(folder.id, folder.name)]
        self._load()

    def go_back(self) -> bool:
        """Pop one level. Returns False (and does nothing) at the top of the stack."""
        if not self.stack:
            return False
        self.stack.pop()
        self.current_folder_id = self.stack[-1].id if self.stack else None
        self.breadcrumbs = self.breadcrumbs[:-1]
        self._load()
        return True

    def go_to_root(self) -> None:
        self.current_folder_id = None
        self.stack = []
        self.breadcrumbs = []
        self._load()

    # ---- loading ----

    def _is_current(self, generation: int, folder_id: Optional[str]) -> bool:
        return self.is_open and generation == self._generation and folder_id == self.current_folder_id

    def _load(self) -> None:
        if not self.is_open:
            return

        self._generation += 1
        generation = self._generation
        folder_id = self.current_folder_id
        self.loading = True

        try:
            try:
                contents = self._folders_api.list_children(folder_id)
            except Unauthorized:
                raise
            except (ApiError, ValidationError) as e:
                logger.error("[_load] failed to load folders; folder_id:%s;error:%s", folder_id, e)
                return

            if not self._is_current(generation, folder_id):
                logger.debug("[_load] discarding stale listing; folder_id:%s", folder_id)
                return
            self.folders = list(contents.folders)

            crumbs = self._resolver.resolve(folder_id)
            if not self._is_current(generation, folder_id):
                logger.debug("[_load] discarding stale breadcrumbs; folder_id:%s", folder_id)
                return
            self.breadcrumbs = crumbs
        finally:
            if generation == self._generation:
                self.loading = False
