"""Breadcrumb resolution: folder id -> ordered root-to-leaf trail."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from ..apis.folders import FoldersAPI
from ..config import DEFAULT_FOLDER_HREF
from ..models.folder import Folder
from ..transport.errors import ApiError, Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreadcrumbEntry:
    id: str
    name: str
    href: str


@dataclass(frozen=True)
class AncestorLookup:
    """Outcome of the one-call ancestors strategy: either a usable chain or a reason it is not."""

    ok: bool
    folders: Tuple[Folder, ...] = field(default_factory=tuple)
    reason: Optional[str] = None

    @classmethod
    def found(cls, folders: List[Folder]) -> "AncestorLookup":
        return cls(ok=True, folders=tuple(folders))

    @classmethod
    def unavailable(cls, reason: str) -> "AncestorLookup":
        return cls(ok=False, reason=reason)


class BreadcrumbResolver:
    """
    Builds the trail for a folder, excluding the implicit "My Drive" root.

    Tries GET /folders/<id>/ancestors first; when that fails or returns
    something other than a root-to-leaf folder list ending at the folder
    itself, walks parent links one listing at a time.

    Never raises except for Unauthorized: failures give an empty or partial trail.
    """

    def __init__(self, folders: FoldersAPI, *, href_template: str = DEFAULT_FOLDER_HREF) -> None:
        self._folders = folders
        self._href_template = href_template

    def entry(self, folder_id: str, name: str) -> BreadcrumbEntry:
        return BreadcrumbEntry(id=folder_id, name=name, href=self._href_template.format(id=folder_id))

    def resolve(self, folder_id: Optional[str]) -> List[BreadcrumbEntry]:
        if not folder_id:
            return []

        lookup = self.lookup_ancestors(folder_id)
        if lookup.ok:
            return [self.entry(f.id, f.name) for f in lookup.folders]

        logger.warning(
            "[resolve] ancestors unavailable, walking parents; folder_id:%s;reason:%s",
            folder_id,
            lookup.reason,
        )
        return self.walk_parents(folder_id)

    def lookup_ancestors(self, folder_id: str) -> AncestorLookup:
        try:
            raw = self._folders.ancestors(folder_id)
        except Unauthorized:
            raise
        except ApiError as e:
            return AncestorLookup.unavailable(f"request failed: {e}")

        return self._check_chain(folder_id, raw)

    @staticmethod
    def _check_chain(folder_id: str, raw: Any) -> AncestorLookup:
        if not isinstance(raw, list):
            return AncestorLookup.unavailable(f"expected a list, got {type(raw).__name__}")
        if not raw:
            return AncestorLookup.unavailable("empty chain")

        try:
            chain = [Folder.model_validate(x) for x in raw]
        except ValidationError as e:
            return AncestorLookup.unavailable(f"malformed entry: {e.error_count()} error(s)")

        if chain[-1].id != folder_id:
            return AncestorLookup.unavailable("chain does not end at the requested folder")
        return AncestorLookup.found(chain)

    def walk_parents(self, folder_id: str) -> List[BreadcrumbEntry]:
        crumbs: List[BreadcrumbEntry] = []
        seen: set[str] = set()
        cur: Optional[str] = folder_id

        while cur:
            if cur in seen:
                logger.error("[walk_parents] parent loop detected; folder_id:%s", cur)
                break
            seen.add(cur)

            try:
                contents = self._folders.list_children(cur)
            except Unauthorized:
                raise
            except (ApiError, ValidationError) as e:
                logger.error("[walk_parents] lookup failed; folder_id:%s;error:%s", cur, e)
                break

            folder = contents.folder
            if folder is None:
                break
            crumbs.insert(0, self.entry(folder.id, folder.name))
            cur = folder.parent_id

        return crumbs
