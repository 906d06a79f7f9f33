"""Request and response schemas for the folder and file API.

Request bodies accept the camelCase field names web clients send
(``folderId``, ``fileId``, ``fileName``, ``physicalRef``) as well as the
snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Values a client may send for "no parent".
ROOT_SENTINELS = (None, "", "/")


class CreateFolderRequest(BaseModel):
    """Create a folder, at the root or under ``folderId``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Folder display name")
    folder_id: int | None = Field(
        default=None,
        alias="folderId",
        description="Parent folder id; omit, empty or '/' for a root folder",
    )

    @field_validator("folder_id", mode="before")
    @classmethod
    def root_sentinel(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
        if v in ROOT_SENTINELS:
            return None
        return v


class DeleteFolderRequest(BaseModel):
    """Delete a folder and everything under it."""

    model_config = ConfigDict(populate_by_name=True)

    folder_id: int = Field(..., alias="folderId")


class ManualFileRequest(BaseModel):
    """Register a file whose bytes are already stored elsewhere."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    physical_ref: str = Field(..., min_length=1, alias="physicalRef")


class DeleteFileRequest(BaseModel):
    """Delete a file by id or by name within the addressed folder."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: int | None = Field(default=None, alias="fileId")
    file_name: str | None = Field(default=None, alias="fileName")


class FolderResponse(BaseModel):
    """Folder record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    path: str
    parent_id: int | None = None
    created_at: datetime | None = None


class FileResponse(BaseModel):
    """File record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    folder_id: int
    name: str
    slug: str
    path: str
    physical_ref: str
    created_at: datetime | None = None


class TreeEntryResponse(BaseModel):
    """One child of a folder listing."""

    model_config = ConfigDict(from_attributes=True)

    kind: str
    id: int
    name: str
    path: str


class FolderContentsResponse(BaseModel):
    """A resolved folder plus its direct children."""

    folder: FolderResponse
    contents: list[TreeEntryResponse] = Field(default_factory=list)


class RootListingResponse(BaseModel):
    """The caller's root folders."""

    folders: list[FolderResponse] = Field(default_factory=list)


class DeletedResponse(BaseModel):
    """Acknowledgement for delete operations."""

    deleted: bool = True
    id: int
