from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class FileStorage:
    """
    One JSON document per key under root ("auth/token" -> root/auth/token.json).

    Writes go through a temp file and a rename, and are readable by the
    owner only: the session token lives here.
    """

    root: Path

    def path_for(self, key: str) -> Path:
        parts = [p for p in key.replace("\\", "/").split("/") if p]
        if not parts:
            raise ValueError("Invalid storage key: empty")
        if ".." in parts:
            raise ValueError(f"Invalid storage key: {key}")
        p = self.root.joinpath(*parts)
        return p.with_name(f"{p.name}.json")

    def write_json(self, key: str, payload: Any) -> str:
        p = self.path_for(key)
        p.parent.mkdir(parents=True, exist_ok=True)

        if hasattr(payload, "model_dump"):
            payload = payload.model_dump(mode="json")

        fd, tmp = tempfile.mkstemp(dir=p.parent, prefix=f".{p.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.chmod(tmp, 0o600)
            os.replace(tmp, p)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return str(p)

    def read_json(self, key: str) -> Optional[Any]:
        p = self.path_for(key)
        if not p.is_file():
            return None
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("[read_json] unreadable storage entry; key:%s", key)
            return None

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
