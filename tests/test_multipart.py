"""Tests for the multipart/form-data decoder."""

import pytest

from filebrowser.errors import MalformedRequest
from filebrowser.multipart import (
    MultipartDecoder,
    decode_multipart,
    extract_boundary,
    parse_headers,
)


def build_body(boundary: str, parts: list[tuple[str, bytes]]) -> bytes:
    """Assemble a multipart body from (header block, body) pairs."""
    chunks = []
    for headers, content in parts:
        chunks.append(f"--{boundary}\r\n{headers}\r\n\r\n".encode() + content + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


class TestExtractBoundary:
    def test_plain(self):
        assert extract_boundary("multipart/form-data; boundary=XYZ") == "XYZ"

    def test_quoted(self):
        assert extract_boundary('multipart/form-data; boundary="abc def"') == "abc def"

    def test_followed_by_other_params(self):
        assert extract_boundary("multipart/form-data; boundary=XYZ; charset=utf-8") == "XYZ"

    def test_case_insensitive_param(self):
        assert extract_boundary("multipart/form-data; Boundary=XYZ") == "XYZ"

    def test_missing(self):
        assert extract_boundary("multipart/form-data") is None
        assert extract_boundary("") is None
        assert extract_boundary(None) is None


class TestParseHeaders:
    def test_lowercases_keys_and_trims_values(self):
        headers = parse_headers("Content-Disposition:  form-data; name=\"a\"\r\nContent-Type: text/plain ")
        assert headers == {
            "content-disposition": 'form-data; name="a"',
            "content-type": "text/plain",
        }

    def test_ignores_lines_without_colon(self):
        assert parse_headers("garbage\r\nX-Test: 1") == {"x-test": "1"}


class TestDecode:
    def test_field_and_file(self):
        body = (
            b"--XYZ\r\n"
            b'Content-Disposition: form-data; name="path"\r\n'
            b"\r\n"
            b"docs\r\n"
            b"--XYZ\r\n"
            b'Content-Disposition: form-data; name="files"; filename="a.txt"\r\n'
            b"Content-Type: text/plain\r\n"
            b"\r\n"
            b"hello\r\n"
            b"--XYZ--\r\n"
        )

        form = decode_multipart(body, "XYZ")

        assert form.fields == {"path": "docs"}
        assert len(form.files) == 1
        part = form.files[0]
        assert part.field_name == "files"
        assert part.filename == "a.txt"
        assert part.content_type == "text/plain"
        assert part.content == b"hello"
        assert part.size == 5

    def test_default_content_type(self):
        body = build_body("b", [('Content-Disposition: form-data; name="f"; filename="x.bin"', b"\x00\x01")])

        form = decode_multipart(body, "b")

        assert form.files[0].content_type == "application/octet-stream"

    def test_custom_default_content_type(self):
        body = build_body("b", [('Content-Disposition: form-data; name="f"; filename="x"', b"1")])

        form = MultipartDecoder(default_content_type="text/plain").decode(body, "b")

        assert form.files[0].content_type == "text/plain"

    def test_binary_payload_is_preserved(self):
        payload = bytes(range(256)) + b"\r\n--XY\r\n\r\n" + bytes(range(255, -1, -1))
        body = build_body("XYZ", [('Content-Disposition: form-data; name="f"; filename="blob.bin"', payload)])

        form = decode_multipart(body, "XYZ")

        assert form.files[0].content == payload
        assert form.files[0].size == len(payload)

    def test_empty_file(self):
        body = build_body("b", [('Content-Disposition: form-data; name="f"; filename="empty.txt"', b"")])

        form = decode_multipart(body, "b")

        assert form.files[0].content == b""
        assert form.files[0].size == 0

    def test_filename_before_name(self):
        body = build_body("b", [('Content-Disposition: form-data; filename="a.txt"; name="files"', b"x")])

        form = decode_multipart(body, "b")

        assert form.files[0].field_name == "files"
        assert form.files[0].filename == "a.txt"

    def test_multiple_files_keep_order(self):
        body = build_body(
            "b",
            [
                ('Content-Disposition: form-data; name="files"; filename="1.txt"', b"one"),
                ('Content-Disposition: form-data; name="files"; filename="2.txt"', b"two"),
                ('Content-Disposition: form-data; name="other"; filename="3.txt"', b"three"),
            ],
        )

        form = decode_multipart(body, "b")

        assert [f.filename for f in form.files] == ["1.txt", "2.txt", "3.txt"]
        assert [f.field_name for f in form.files] == ["files", "files", "other"]
        assert form.fields == {}

    def test_utf8_field_value(self):
        body = build_body("b", [('Content-Disposition: form-data; name="path"', "documentos/año".encode())])

        assert decode_multipart(body, "b").fields == {"path": "documentos/año"}

    def test_part_without_separator_is_skipped(self):
        body = (
            b"--b\r\n"
            b'Content-Disposition: form-data; name="broken"\r\n'
            b"--b\r\n"
            b'Content-Disposition: form-data; name="ok"\r\n\r\n'
            b"yes\r\n"
            b"--b--\r\n"
        )

        form = decode_multipart(body, "b")

        assert form.fields == {"ok": "yes"}

    def test_part_without_disposition_is_skipped(self):
        body = build_body(
            "b",
            [
                ("Content-Type: text/plain", b"orphan"),
                ('Content-Disposition: form-data; name="ok"', b"yes"),
            ],
        )

        assert decode_multipart(body, "b").fields == {"ok": "yes"}

    def test_part_without_name_is_skipped(self):
        body = build_body("b", [("Content-Disposition: form-data", b"x")])

        form = decode_multipart(body, "b")

        assert form.fields == {}
        assert form.files == []

    def test_preamble_and_epilogue_are_ignored(self):
        body = b"preamble text\r\n" + build_body("b", [('Content-Disposition: form-data; name="a"', b"1")]) + b"epilogue"

        assert decode_multipart(body, "b").fields == {"a": "1"}

    def test_unterminated_last_part_is_dropped(self):
        body = (
            b"--b\r\n"
            b'Content-Disposition: form-data; name="a"\r\n\r\n'
            b"1\r\n"
            b"--b\r\n"
            b'Content-Disposition: form-data; name="f"; filename="cut.txt"\r\n\r\n'
            b"truncated"
        )

        form = decode_multipart(body, "b")

        assert form.fields == {"a": "1"}
        assert form.files == []

    def test_no_delimiter(self):
        form = decode_multipart(b"just some bytes", "b")

        assert form.fields == {}
        assert form.files == []

    def test_empty_buffer(self):
        assert decode_multipart(b"", "b").files == []

    def test_empty_boundary_is_malformed(self):
        with pytest.raises(MalformedRequest):
            decode_multipart(b"--\r\n", "")
