"""File tree service for confined file operations."""

from __future__ import annotations

import logging
import os
import shutil
import stat as stat_module
import time
from pathlib import Path
from typing import TYPE_CHECKING

from filebrowser.errors import (
    AccessDenied,
    Conflict,
    InvalidName,
    NotADirectory,
    NotAFile,
    NotFound,
)
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
from filebrowser.filesystem.paths import PathResolver

if TYPE_CHECKING:
    from filebrowser.multipart.models import UploadedPart

logger = logging.getLogger(__name__)


def _entry_sort_key(entry: Entry) -> tuple[bool, str]:
    # Directories first, then plain ordinal name order
    return (entry.type != EntryType.DIRECTORY, entry.name)


class FileTreeService:
    """Service for browsing and modifying a directory tree.

    All operations are restricted to a root directory: every caller supplied
    path goes through `PathResolver` and every caller supplied name through
    `is_valid_name`. The service keeps no state between calls.
    """

    def __init__(self, root: str | Path, create: bool = False) -> None:
        """Initialize the service.

        Args:
            root: Root directory for all operations
            create: Create the root directory if it does not exist

        Raises:
            ValueError: If the root does not exist (and create is False) or is not a directory
        """
        root_path = Path(root).expanduser()
        if create and not root_path.exists():
            root_path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created root directory: {root_path}")

        self.resolver = PathResolver(root_path)
        self.root = self.resolver.root
        if not self.root.exists():
            raise ValueError(f"Root directory does not exist: {self.root}")
        if not self.root.is_dir():
            raise ValueError(f"Root is not a directory: {self.root}")

    def _require_name(self, name: str) -> None:
        if not is_valid_name(name):
            raise InvalidName(name)

    def _join(self, parent_path: str, name: str) -> str:
        """Join a root-relative directory path and a name."""
        if parent_path == "/":
            return name
        return f"{parent_path}/{name}"

    def _stat(self, resolved: Path, relative_path: str) -> os.stat_result:
        """Stat a resolved path, reporting any lookup failure as NotFound."""
        try:
            return resolved.stat()
        except OSError as e:
            logger.debug(f"Cannot stat {relative_path or '/'}: {e}")
            raise NotFound(relative_path)

    def list(self, relative_path: str = "") -> Entry:
        """List a file or one level of a directory.

        Args:
            relative_path: Root-relative path

        Returns:
            Entry for a file, or Entry with children for a directory

        Raises:
            AccessDenied: If path escapes root
            NotFound: If path does not exist
        """
        resolved = self.resolver.resolve(relative_path)
        stat = self._stat(resolved, relative_path)

        rel_path = self.resolver.relative(resolved)
        name = resolved.name or self.root.name

        if not stat_module.S_ISDIR(stat.st_mode):
            return Entry.from_stat(name, rel_path, stat, is_dir=False)

        entry = Entry.from_stat(name, rel_path, stat, is_dir=True)
        entry.children = sorted(self._list_children(resolved, rel_path), key=_entry_sort_key)
        return entry

    def _list_children(self, directory: Path, rel_path: str) -> list[Entry]:
        """Read one level of a directory, skipping entries that cannot be read.

        Links whose target lies outside the root are left out.
        """
        children: list[Entry] = []

        try:
            names = os.listdir(directory)
        except PermissionError as e:
            logger.warning(f"Permission denied listing {rel_path}: {e}")
            return children

        for child_name in names:
            child_rel_path = self._join(rel_path, child_name)
            try:
                child_path = self.resolver.resolve(child_rel_path)
                if child_path != directory / child_name:
                    # Names sanitization would rewrite cannot be addressed
                    logger.debug(f"Skipping unaddressable entry {child_rel_path!r}")
                    continue
                child_stat = child_path.stat()
            except AccessDenied:
                logger.debug(f"Skipping entry linking outside root: {child_rel_path}")
                continue
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {child_rel_path}: {e}")
                continue

            is_dir = stat_module.S_ISDIR(child_stat.st_mode)
            children.append(Entry.from_stat(child_name, child_rel_path, child_stat, is_dir))

        return children

    def rename(self, old_relative_path: str, new_name: str) -> RenameResult:
        """Rename a file or directory within its parent directory.

        Args:
            old_relative_path: Root-relative path of the entry
            new_name: New base name

        Returns:
            RenameResult with old and new paths

        Raises:
            AccessDenied: If path escapes root or targets the root itself
            NotFound: If the entry does not exist
            InvalidName: If new_name is not a valid name
            Conflict: If an entry named new_name already exists
        """
        source = self.resolver.resolve(old_relative_path)
        if self.resolver.is_root(source):
            raise AccessDenied(old_relative_path, "the root directory cannot be renamed")
        if not os.path.lexists(source):
            raise NotFound(old_relative_path)

        self._require_name(new_name)

        old_path = self.resolver.relative(source)
        parent_path = self.resolver.relative(source.parent)
        new_path = self._join(parent_path, new_name)
        destination = self.resolver.resolve(new_path)

        if os.path.lexists(destination):
            raise Conflict(new_path)

        os.rename(source, destination)
        logger.info(f"Renamed {old_path} -> {new_path}")

        return RenameResult(old_path=old_path, new_path=new_path, new_name=new_name)

    def delete(self, relative_path: str) -> DeleteResult:
        """Delete a file, or a directory recursively.

        Args:
            relative_path: Root-relative path

        Returns:
            DeleteResult with the removed entry's type

        Raises:
            AccessDenied: If path escapes root or targets the root itself
            NotFound: If the entry does not exist
        """
        target = self.resolver.resolve(relative_path)
        if self.resolver.is_root(target):
            raise AccessDenied(relative_path, "the root directory cannot be deleted")
        if not os.path.lexists(target):
            raise NotFound(relative_path)

        rel_path = self.resolver.relative(target)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
            entry_type = EntryType.DIRECTORY
        else:
            target.unlink()
            entry_type = EntryType.FILE

        logger.info(f"Deleted {entry_type.value} {rel_path}")
        return DeleteResult(path=rel_path, type=entry_type)

    def download(self, relative_path: str) -> DownloadResult:
        """Read a file for download.

        Args:
            relative_path: Root-relative path of the file

        Returns:
            DownloadResult with content, file name and MIME type

        Raises:
            AccessDenied: If path escapes root
            NotFound: If the file does not exist
            NotAFile: If the path is a directory
        """
        resolved = self.resolver.resolve(relative_path)
        if not stat_module.S_ISREG(self._stat(resolved, relative_path).st_mode):
            raise NotAFile(relative_path)

        content = resolved.read_bytes()
        return DownloadResult(
            file_name=resolved.name,
            mime_type=guess_mime_type(resolved.name),
            size=len(content),
            content=content,
        )

    def upload(self, part: "UploadedPart", target_relative_path: str = "") -> UploadResult:
        """Store an uploaded file in a directory.

        An existing file is never overwritten: on a name collision the file is
        stored as ``<basename>_<epoch millis><extension>`` instead.

        Args:
            part: Decoded file part
            target_relative_path: Root-relative path of the destination directory

        Returns:
            UploadResult with the stored name and path

        Raises:
            AccessDenied: If path escapes root
            InvalidName: If the part's filename is not a valid name
            NotFound: If the target directory does not exist
            NotADirectory: If the target is not a directory
        """
        self._require_name(part.filename)

        target_dir = self.resolver.resolve(target_relative_path)
        if not stat_module.S_ISDIR(self._stat(target_dir, target_relative_path).st_mode):
            raise NotADirectory(target_relative_path)

        dir_path = self.resolver.relative(target_dir)
        filename = part.filename
        if os.path.lexists(target_dir / filename):
            stem, extension = os.path.splitext(filename)
            filename = f"{stem}_{int(time.time() * 1000)}{extension}"

        stored_path = self._join(dir_path, filename)
        destination = self.resolver.resolve(stored_path)
        destination.write_bytes(part.content)

        renamed = filename != part.filename
        if renamed:
            logger.info(f"Stored upload {part.filename} as {stored_path} (name already taken)")
        else:
            logger.info(f"Stored upload {stored_path} ({part.size} bytes)")

        return UploadResult(
            filename=filename,
            original_filename=part.filename,
            path=stored_path,
            size=part.size,
            renamed=renamed,
        )

    def create_folder(self, relative_path: str, folder_name: str) -> Entry:
        """Create a folder inside a directory.

        Args:
            relative_path: Root-relative path of the parent directory
            folder_name: Name of the new folder

        Returns:
            Entry for the created folder

        Raises:
            AccessDenied: If path escapes root
            InvalidName: If folder_name is not a valid name
            NotFound: If the parent directory does not exist
            NotADirectory: If the parent is not a directory
            Conflict: If an entry with that name already exists
        """
        parent = self.resolver.resolve(relative_path)
        self._require_name(folder_name)

        if not stat_module.S_ISDIR(self._stat(parent, relative_path).st_mode):
            raise NotADirectory(relative_path)

        new_path = self._join(self.resolver.relative(parent), folder_name)
        folder = self.resolver.resolve(new_path)
        try:
            folder.mkdir()
        except FileExistsError:
            raise Conflict(new_path)

        logger.info(f"Created folder {new_path}")
        return Entry.from_stat(folder_name, new_path, folder.stat(), is_dir=True)
