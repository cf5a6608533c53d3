"""MIME type lookup by file extension."""

import mimetypes
import os

DEFAULT_MIME_TYPE = "application/octet-stream"

# Explicit table so downloads get the same type on every host, whatever
# mime.types the platform ships
MIME_TYPES: dict[str, str] = {
    # Text
    ".txt": "text/plain",
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".csv": "text/csv",
    # Images
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    # Documents
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Archives
    ".zip": "application/zip",
    ".rar": "application/x-rar-compressed",
    ".7z": "application/x-7z-compressed",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    # Audio
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    # Video
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".wmv": "video/x-ms-wmv",
    # Fonts
    ".ttf": "font/ttf",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def get_extension(filename: str) -> str:
    """Get the lowercase extension of a filename, including the leading dot.

    Returns an empty string when there is no extension (".bashrc" has none).
    """
    return os.path.splitext(filename)[1].lower()


def guess_mime_type(filename: str) -> str:
    """Guess MIME type from a filename's extension.

    Args:
        filename: Filename with extension

    Returns:
        MIME type string, "application/octet-stream" if unknown
    """
    extension = get_extension(filename)
    if not extension:
        return DEFAULT_MIME_TYPE

    if extension in MIME_TYPES:
        return MIME_TYPES[extension]

    mime_type, _ = mimetypes.guess_type(f"file{extension}")
    return mime_type or DEFAULT_MIME_TYPE
