"""Data models for file tree operations."""

import os
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from filebrowser.filesystem.mime import get_extension


class EntryType(str, Enum):
    """Type of filesystem entry."""

    FILE = "file"
    DIRECTORY = "directory"


class Entry(BaseModel):
    """One file or directory exposed to callers."""

    name: str = Field(description="Base name")
    path: str = Field(description="Root-relative path, forward-slash separated")
    type: EntryType = Field(description="Type of entry")
    size: int = Field(default=0, description="Size in bytes (0 for directories)")
    modified: datetime = Field(description="Last modified time")
    extension: str | None = Field(
        default=None, description="Lowercase extension with leading dot (files only)"
    )
    children: list["Entry"] | None = Field(
        default=None, description="One level of children (listed directories only)"
    )

    @classmethod
    def from_stat(cls, name: str, path: str, stat: os.stat_result, is_dir: bool) -> "Entry":
        """Create an Entry from an already obtained stat result.

        Args:
            name: Base name of the entry
            path: Root-relative path of the entry
            stat: Result of os.stat on the entry
            is_dir: Whether the entry is a directory

        Returns:
            Entry instance without children
        """
        if is_dir:
            return cls(
                name=name,
                path=path,
                type=EntryType.DIRECTORY,
                size=0,
                modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )

        return cls(
            name=name,
            path=path,
            type=EntryType.FILE,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            extension=get_extension(name),
        )

    def to_dict(self) -> dict:
        """Serialize for JSON responses, omitting absent optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class RenameResult(BaseModel):
    """Result of renaming an entry."""

    old_path: str = Field(description="Previous root-relative path")
    new_path: str = Field(description="New root-relative path")
    new_name: str = Field(description="New base name")


class DeleteResult(BaseModel):
    """Result of deleting an entry."""

    path: str = Field(description="Root-relative path that was removed")
    type: EntryType = Field(description="Type of the removed entry")


class DownloadResult(BaseModel):
    """File content prepared for download."""

    file_name: str = Field(description="Base name of the file")
    mime_type: str = Field(description="MIME type inferred from the extension")
    size: int = Field(description="Content length in bytes")
    content: bytes = Field(repr=False, description="Full file content")


class UploadResult(BaseModel):
    """Result of storing one uploaded file."""

    filename: str = Field(description="Name the file was stored under")
    original_filename: str = Field(description="Name the client sent")
    path: str = Field(description="Root-relative path of the stored file")
    size: int = Field(description="Bytes written")
    renamed: bool = Field(default=False, description="Whether a collision forced a new name")
