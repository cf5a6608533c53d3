"""Confinement of user supplied paths to a root directory."""

import logging
import os
import re
from pathlib import Path

from filebrowser.errors import AccessDenied

logger = logging.getLogger(__name__)

# Sanitization patterns, applied before joining onto the root
_LEADING_PARENTS = re.compile(r"^(\.\.[/\\])+")
_EMBEDDED_PARENTS = re.compile(r"[/\\]\.\.[/\\]")
_LEADING_SEPARATORS = re.compile(r"^[/\\]+")

ROOT_PATH = "/"


def sanitize_path(user_path: str) -> str:
    """Strip traversal sequences and leading separators from a relative path.

    This is only a first filter; `PathResolver.resolve` still checks the
    normalized result against the root.

    Args:
        user_path: Path as received from the caller

    Returns:
        Sanitized relative path using forward slashes
    """
    if not user_path:
        return ""

    sanitized = _LEADING_PARENTS.sub("", user_path)
    sanitized = _EMBEDDED_PARENTS.sub("/", sanitized)
    sanitized = _LEADING_SEPARATORS.sub("", sanitized)
    return sanitized.replace("\\", "/")


class PathResolver:
    """Resolves root-relative paths to absolute paths inside the root.

    Every filesystem operation must obtain its absolute path from `resolve`.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize the resolver.

        Args:
            root: Root directory all paths are confined to
        """
        self.root = Path(root).resolve()
        self._root_str = os.path.normpath(str(self.root))

    def _is_within_root(self, candidate: str, root: str) -> bool:
        if candidate == root:
            return True
        prefix = root if root.endswith(os.sep) else root + os.sep
        return candidate.startswith(prefix)

    def resolve(self, relative_path: str | None) -> Path:
        """Resolve a path relative to root, with security checks.

        Args:
            relative_path: Root-relative path; empty or "/" means the root

        Returns:
            Absolute path at or below the root

        Raises:
            AccessDenied: If the path escapes the root directory
        """
        relative_path = relative_path or ""
        if "\x00" in relative_path:
            raise AccessDenied(relative_path, "path contains a null byte")

        sanitized = sanitize_path(relative_path)
        normalized = os.path.normpath(os.path.join(self._root_str, sanitized))

        if not self._is_within_root(normalized, self._root_str):
            logger.warning(f"Rejected path escaping root: {relative_path!r}")
            raise AccessDenied(relative_path)

        # Symlinks inside the tree must not lead out of it either
        real = os.path.realpath(normalized)
        if not self._is_within_root(real, self._root_str):
            logger.warning(f"Rejected path resolving through a link outside root: {relative_path!r}")
            raise AccessDenied(relative_path)

        return Path(normalized)

    def relative(self, absolute: str | Path) -> str:
        """Convert a confined absolute path back to its root-relative form.

        Args:
            absolute: Absolute path previously returned by `resolve`

        Returns:
            Forward-slash relative path, "/" for the root itself

        Raises:
            AccessDenied: If the path is not below the root
        """
        normalized = os.path.normpath(str(absolute))
        if not self._is_within_root(normalized, self._root_str):
            raise AccessDenied(str(absolute))
        if normalized == self._root_str:
            return ROOT_PATH
        return Path(normalized).relative_to(self.root).as_posix()

    def is_root(self, absolute: Path) -> bool:
        """Check if an absolute path is the root directory."""
        return os.path.normpath(str(absolute)) == self._root_str
