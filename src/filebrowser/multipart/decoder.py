"""Byte-level multipart/form-data decoder.

The decoder works on a fully buffered body. It scans for the delimiter
``--<boundary>``, splits every part into header text and body at the first
blank line, and classifies the part by its ``Content-Disposition`` header:
parts with a ``filename`` become `UploadedPart` objects, the rest are stored
as UTF-8 text fields.

Malformed fragments (no blank line, no disposition, no ``name``) are skipped
instead of failing the whole request.
"""

import logging
import re

from filebrowser.errors import MalformedRequest
from filebrowser.multipart.models import MultipartForm, UploadedPart

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
HEADER_SEPARATOR = b"\r\n\r\n"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_BOUNDARY_PARAM = re.compile(r"boundary=([^;]+)", re.IGNORECASE)
# Anchored so that "filename=" is never mistaken for "name="
_NAME_PARAM = re.compile(r'(?:^|[;\s])name="([^"]+)"', re.IGNORECASE)
_FILENAME_PARAM = re.compile(r'(?:^|[;\s])filename="([^"]+)"', re.IGNORECASE)


def extract_boundary(content_type: str | None) -> str | None:
    """Extract the boundary parameter from a Content-Type header value.

    Args:
        content_type: Full header value, e.g. 'multipart/form-data; boundary=XYZ'

    Returns:
        Boundary token without surrounding quotes, or None if absent
    """
    if not content_type:
        return None

    match = _BOUNDARY_PARAM.search(content_type)
    if not match:
        return None

    boundary = match.group(1).strip()
    if len(boundary) >= 2 and boundary.startswith('"') and boundary.endswith('"'):
        boundary = boundary[1:-1]

    return boundary or None


def parse_headers(header_text: str) -> dict[str, str]:
    """Parse 'Name: value' lines into a dict keyed by lowercased name.

    Lines without a colon are ignored; a repeated header keeps its last value.
    """
    headers: dict[str, str] = {}
    for line in header_text.split("\r\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        headers[key.strip().lower()] = value.strip()
    return headers


class MultipartDecoder:
    """Decoder for buffered multipart/form-data bodies."""

    def __init__(self, default_content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        """Initialize the decoder.

        Args:
            default_content_type: Content type for file parts that declare none
        """
        self.default_content_type = default_content_type

    def decode(self, buffer: bytes, boundary: str) -> MultipartForm:
        """Split a multipart body into text fields and file parts.

        Args:
            buffer: Complete request body
            boundary: Boundary token from the Content-Type header

        Returns:
            MultipartForm with fields and files in encounter order

        Raises:
            MalformedRequest: If the boundary is empty
        """
        if not boundary:
            raise MalformedRequest("Multipart boundary is empty")

        delimiter = b"--" + boundary.encode("latin-1")
        data = bytes(buffer)
        form = MultipartForm()
        position = 0

        while position < len(data):
            delimiter_index = data.find(delimiter, position)
            if delimiter_index == -1:
                break

            # Skip the delimiter and the line break that ends it
            line_end = data.find(CRLF, delimiter_index + len(delimiter))
            if line_end == -1:
                break
            part_start = line_end + len(CRLF)

            next_delimiter = data.find(delimiter, part_start)
            if next_delimiter == -1:
                break

            self._decode_part(data[part_start:next_delimiter], form)
            position = next_delimiter

        logger.debug(f"Decoded multipart body: {len(form.fields)} field(s), {len(form.files)} file(s)")
        return form

    def _decode_part(self, part: bytes, form: MultipartForm) -> None:
        """Decode one part and add it to the form, skipping malformed parts."""
        separator_index = part.find(HEADER_SEPARATOR)
        if separator_index == -1:
            logger.debug("Skipping multipart part without header separator")
            return

        headers = parse_headers(part[:separator_index].decode("utf-8", errors="replace"))
        body = part[separator_index + len(HEADER_SEPARATOR):]
        if body.endswith(CRLF):
            body = body[: -len(CRLF)]

        disposition = headers.get("content-disposition")
        if not disposition:
            logger.debug("Skipping multipart part without Content-Disposition")
            return

        name_match = _NAME_PARAM.search(disposition)
        if not name_match:
            logger.debug(f"Skipping multipart part without a name: {disposition}")
            return

        field_name = name_match.group(1)
        filename_match = _FILENAME_PARAM.search(disposition)

        if filename_match:
            form.files.append(
                UploadedPart(
                    field_name=field_name,
                    filename=filename_match.group(1),
                    content_type=headers.get("content-type") or self.default_content_type,
                    content=body,
                )
            )
        else:
            form.fields[field_name] = body.decode("utf-8", errors="replace")


def decode_multipart(buffer: bytes, boundary: str) -> MultipartForm:
    """Decode a multipart body with default settings."""
    return MultipartDecoder().decode(buffer, boundary)
