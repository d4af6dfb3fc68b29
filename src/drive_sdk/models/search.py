from __future__ import annotations

from typing import List
from pydantic import BaseModel, ConfigDict, Field

from .folder import File, Folder


class SearchResults(BaseModel):
    """GET /search?q= -> {folders: [...], files: [...]}"""
    model_config = ConfigDict(extra="allow")

    folders: List[Folder] = Field(default_factory=list)
    files: List[File] = Field(default_factory=list)


class TrashContents(SearchResults):
    """GET /trash has the same shape; items are soft-deleted."""
