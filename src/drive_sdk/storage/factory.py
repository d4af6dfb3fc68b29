from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

from .base import Storage
from .fs import FileStorage

BACKENDS: Dict[str, Callable[[Path], Storage]] = {
    "fs": FileStorage,
    "file": FileStorage,
    "json": FileStorage,
}


def make_storage(backend: str, storage_dir: Optional[str]) -> Optional[Storage]:
    """Token storage for DRIVE_STORAGE_BACKEND / DRIVE_STORAGE_DIR; None when no dir is set."""
    if not storage_dir:
        return None

    name = (backend or "fs").strip().lower()
    factory = BACKENDS.get(name)
    if factory is None:
        raise ValueError(f"Unsupported storage backend: {backend} (known: {', '.join(sorted(BACKENDS))})")

    root = Path(storage_dir).expanduser().resolve()
    root.mkdir(parents=True, exist_ok=True)
    return factory(root)
