from __future__ import annotations

from enum import Enum


class EntityType(str, Enum):
    """Files and folders live in separate id-spaces; this tells them apart."""

    FOLDER = "folder"
    FILE = "file"

    def __str__(self) -> str:
        return self.value
