"""Confined file tree operations."""

from filebrowser.filesystem.client import FileTreeService
from filebrowser.filesystem.mime import guess_mime_type
from filebrowser.filesystem.models import (
    DeleteResult,
    DownloadResult,
    Entry,
    EntryType,
    RenameResult,
    UploadResult,
)
from filebrowser.filesystem.names import is_valid_name
from filebrowser.filesystem.paths import PathResolver, sanitize_path

__all__ = [
    "FileTreeService",
    "PathResolver",
    "DeleteResult",
    "DownloadResult",
    "Entry",
    "EntryType",
    "RenameResult",
    "UploadResult",
    "guess_mime_type",
    "is_valid_name",
    "sanitize_path",
]
