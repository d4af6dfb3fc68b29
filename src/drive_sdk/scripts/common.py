from __future__ import annotations

import json
import logging
import os
from typing import Any, Iterable, List, Optional

from drive_sdk.browse.notices import NoticeBoard
from drive_sdk.browse.selection import SelectionKey
from drive_sdk.config import get_settings


def getenv_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def setup_logging() -> None:
    level = getenv_str("DRIVE_LOG_LEVEL", "INFO") or "INFO"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def parse_keys(raw: Iterable[str]) -> List[SelectionKey]:
    """'file:abc' / 'folder:xyz' arguments -> selection keys."""
    try:
        return [SelectionKey.parse(r) for r in raw]
    except ValueError as e:
        raise SystemExit(f"{e} (expected folder:<id> or file:<id>)")


def print_json(payload: Any) -> None:
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(mode="json", exclude_none=False)
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def print_notices(board: NoticeBoard) -> None:
    for n in board.notices:
        print(("! " if n.error else "* ") + str(n))


def exit_code(board: NoticeBoard) -> int:
    return 1 if board.errors else 0


def settings_or_exit():
    try:
        return get_settings()
    except RuntimeError as e:
        raise SystemExit(str(e))
