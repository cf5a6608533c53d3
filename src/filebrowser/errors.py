"""Error kinds raised by the file tree service and the multipart decoder."""


class FileTreeError(Exception):
    """Base class for all file tree failures."""


class AccessDenied(FileTreeError):
    """Raised when a path would resolve outside the root directory."""

    def __init__(self, path: str, reason: str = "path outside allowed directory") -> None:
        """Initialize AccessDenied.

        Args:
            path: The caller-supplied path that was rejected
            reason: Human readable reason
        """
        self.path = path
        super().__init__(f"Access denied: {reason}")


class NotFound(FileTreeError):
    """Raised when a source or target does not exist."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Path not found: {path or '/'}")


class NotAFile(NotFound):
    """Raised when a file operation targets a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"Not a file: {path or '/'}")


class NotADirectory(NotFound):
    """Raised when a directory operation targets a file."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"Not a directory: {path or '/'}")


class InvalidName(FileTreeError):
    """Raised when a file or folder name fails validation."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid name: {name!r}")


class Conflict(FileTreeError):
    """Raised when the destination of an operation already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"An entry with that name already exists: {path}")


class MalformedRequest(FileTreeError):
    """Raised when an upload body cannot be framed (missing boundary, no parts)."""
