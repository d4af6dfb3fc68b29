from __future__ import annotations

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices

from .entity import EntityType


class BatchOperation(str, Enum):
    DELETE = "delete"
    MOVE = "move"
    RESTORE = "restore"

    @property
    def past_tense(self) -> str:
        return {"delete": "deleted", "move": "moved", "restore": "restored"}[self.value]


class BatchItem(BaseModel):
    """Wire form of a selection key: {"id": ..., "type": "file"|"folder"}."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    entity_type: EntityType = Field(
        validation_alias=AliasChoices("type", "entityType", "entity_type"),
        serialization_alias="type",
    )


class BatchSuccess(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    # some backends omit the type on outcomes; matched by id alone then
    entity_type: Optional[EntityType] = Field(
        default=None,
        validation_alias=AliasChoices("type", "entityType", "entity_type"),
    )


class BatchFailure(BatchSuccess):
    error: str = "unknown error"


class BatchResult(BaseModel):
    """
    POST /files/batch/{delete,move,restore}

    Best effort, per item. An item may be missing from both lists when the
    service treated it as a no-op.
    """
    model_config = ConfigDict(extra="allow")

    successes: List[BatchSuccess] = Field(default_factory=list)
    errors: List[BatchFailure] = Field(default_factory=list)


class BatchBody(BaseModel):
    items: List[BatchItem]


class BatchMoveBody(BatchBody):
    target_folder_id: Optional[str] = Field(default=None, serialization_alias="targetFolderId")
