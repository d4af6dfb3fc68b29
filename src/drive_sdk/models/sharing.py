from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices

from .entity import EntityType


class Permission(str, Enum):
    VIEW = "view"
    EDIT = "edit"


class Share(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    item_id: str = Field(validation_alias=AliasChoices("itemId", "item_id"))
    item_type: EntityType = Field(validation_alias=AliasChoices("itemType", "item_type"))
    owner_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("ownerId", "owner_id"))
    shared_with_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("sharedWithId", "shared_with_id"))
    permission: Permission = Permission.VIEW
    created_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))

    # nested {email}/{name} blobs as the backend joins them
    owner: Optional[Dict[str, Any]] = None
    shared_with: Optional[Dict[str, Any]] = Field(default=None, validation_alias=AliasChoices("sharedWith", "shared_with"))
    item: Optional[Dict[str, Any]] = None


class CreateShareBody(BaseModel):
    item_id: str = Field(serialization_alias="itemId")
    item_type: EntityType = Field(serialization_alias="itemType")
    email: str
    permission: Permission = Permission.VIEW
