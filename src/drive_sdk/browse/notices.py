"""User-facing notifications (the toast of a graphical client)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    title: str
    description: Optional[str] = None
    error: bool = False

    def __str__(self) -> str:
        if self.description:
            return f"{self.title}: {self.description}"
        return self.title


class Notifier(Protocol):
    def post(self, title: str, description: Optional[str] = None, *, error: bool = False) -> Notice: ...


class NoticeBoard:
    """Logs every notice and keeps them in order for the caller to render."""

    def __init__(self) -> None:
        self.notices: List[Notice] = []

    def post(self, title: str, description: Optional[str] = None, *, error: bool = False) -> Notice:
        notice = Notice(title=title, description=description, error=error)
        self.notices.append(notice)
        if error:
            logger.warning("[notice] %s", notice)
        else:
            logger.info("[notice] %s", notice)
        return notice

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    @property
    def errors(self) -> List[Notice]:
        return [n for n in self.notices if n.error]

    def clear(self) -> None:
        self.notices.clear()
