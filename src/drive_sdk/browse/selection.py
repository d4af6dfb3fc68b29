"""Multi-item selection across folders and files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional, Union

from ..models.batch import BatchItem
from ..models.entity import EntityType
from ..models.folder import File, Folder


@dataclass(frozen=True, order=True)
class SelectionKey:
    """(entity type, id). A file and a folder may share an id; their keys differ."""

    entity_type: EntityType
    id: str

    def __str__(self) -> str:
        return f"{self.entity_type.value}:{self.id}"

    @classmethod
    def folder(cls, folder_id: str) -> "SelectionKey":
        return cls(EntityType.FOLDER, folder_id)

    @classmethod
    def file(cls, file_id: str) -> "SelectionKey":
        return cls(EntityType.FILE, file_id)

    @classmethod
    def of(cls, item: Union[Folder, File, BatchItem, "SelectionKey"]) -> "SelectionKey":
        if isinstance(item, SelectionKey):
            return item
        if isinstance(item, BatchItem):
            return cls(EntityType(item.entity_type), item.id)
        if isinstance(item, Folder):
            return cls.folder(item.id)
        if isinstance(item, File):
            return cls.file(item.id)
        raise TypeError(f"Cannot build a selection key from {type(item).__name__}")

    @classmethod
    def parse(cls, raw: str) -> "SelectionKey":
        """'folder:abc' -> SelectionKey(FOLDER, 'abc')."""
        kind, sep, item_id = raw.partition(":")
        if not sep or not item_id:
            raise ValueError(f"Invalid selection key: {raw!r}")
        return cls(EntityType(kind.strip().lower()), item_id.strip())

    def to_batch_item(self) -> BatchItem:
        return BatchItem(id=self.id, entity_type=self.entity_type)


class SelectionManager:
    """
    Owns the selection set of one view.

    on_change receives the new count after every mutation; a count of zero
    means the batch toolbar should be hidden.
    """

    def __init__(self, on_change: Optional[Callable[[int], None]] = None) -> None:
        self._keys: set[SelectionKey] = set()
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(len(self._keys))

    def toggle(self, item_id: str, entity_type: EntityType) -> bool:
        """Flip membership; returns True when the item is now selected."""
        key = SelectionKey(EntityType(entity_type), item_id)
        if key in self._keys:
            self._keys.remove(key)
            selected = False
        else:
            self._keys.add(key)
            selected = True
        self._changed()
        return selected

    def select_all(self, folders: Iterable[Folder], files: Iterable[File]) -> None:
        # Anything selected -> this acts as "deselect all".
        if self._keys:
            self.clear()
            return
        self._keys = {SelectionKey.folder(f.id) for f in folders} | {SelectionKey.file(f.id) for f in files}
        self._changed()

    def clear(self) -> None:
        self._keys = set()
        self._changed()

    def discard(self, keys: Iterable[SelectionKey]) -> None:
        before = len(self._keys)
        self._keys.difference_update(keys)
        if len(self._keys) != before:
            self._changed()

    def is_selected(self, item_id: str, entity_type: EntityType) -> bool:
        return SelectionKey(EntityType(entity_type), item_id) in self._keys

    @property
    def count(self) -> int:
        return len(self._keys)

    @property
    def toolbar_visible(self) -> bool:
        return bool(self._keys)

    def keys(self) -> FrozenSet[SelectionKey]:
        return frozenset(self._keys)

    def items(self) -> List[BatchItem]:
        return [k.to_batch_item() for k in sorted(self._keys)]

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[SelectionKey]:
        return iter(sorted(self._keys))
