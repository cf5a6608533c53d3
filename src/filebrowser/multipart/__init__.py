"""Multipart/form-data decoding."""

from filebrowser.multipart.decoder import (
    MultipartDecoder,
    decode_multipart,
    extract_boundary,
    parse_headers,
)
from filebrowser.multipart.models import MultipartForm, UploadedPart

__all__ = [
    "MultipartDecoder",
    "MultipartForm",
    "UploadedPart",
    "decode_multipart",
    "extract_boundary",
    "parse_headers",
]
