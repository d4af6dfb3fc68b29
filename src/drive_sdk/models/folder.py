from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices


class StorageUsage(BaseModel):
    model_config = ConfigDict(extra="allow")

    used: int = 0
    quota: int = 0


class Folder(BaseModel):
    """
    parent_id None means the folder sits at the user's root.
    Backend sends camelCase; both spellings are accepted.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str
    parent_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("parentId", "parent_id"))
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    created_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    updated_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("updatedAt", "updated_at"))
    size: Optional[int] = None


class File(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str
    folder_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("folderId", "folder_id"))
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    storage_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("storagePath", "storage_path"))
    size: int = 0
    current_version: int = Field(default=1, validation_alias=AliasChoices("currentVersion", "current_version"))
    created_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    updated_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("updatedAt", "updated_at"))


class FolderContents(BaseModel):
    """
    GET /folders[?folderId=]

    folder is None when listing the root.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    parent_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("parentName", "parent_name"))
    folder: Optional[Folder] = None
    folders: List[Folder] = Field(default_factory=list)
    files: List[File] = Field(default_factory=list)
    storage: Optional[StorageUsage] = None


# ----- request bodies -----

class CreateFolderBody(BaseModel):
    name: str
    parent_id: Optional[str] = Field(default=None, serialization_alias="parentId")


class RenameBody(BaseModel):
    name: str


class MoveBody(BaseModel):
    # None is sent as an explicit null: move to root
    target_folder_id: Optional[str] = Field(default=None, serialization_alias="targetFolderId")
