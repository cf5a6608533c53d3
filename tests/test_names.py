"""Tests for file and folder name validation."""

import pytest

from filebrowser.filesystem.names import is_valid_name


@pytest.mark.parametrize(
    "name",
    [
        "report_final.pdf",
        "a.txt",
        "Makefile",
        ".bashrc",
        "archive.tar.gz",
        "console.txt",
        "COM10",
        "x" * 255,
        "naïve café.txt",
    ],
)
def test_accepts_valid_names(name):
    assert is_valid_name(name) is True


@pytest.mark.parametrize(
    "name",
    [
        "",
        "x" * 256,
        "x" * 300,
        "CON",
        "con",
        "con.txt",
        "Prn.log",
        "aux",
        "NUL.tar",
        "COM1",
        "lpt9.doc",
        "a<b.txt",
        "a>b",
        "a:b",
        'a"b',
        "a|b",
        "what?",
        "star*",
        "tab\tname",
        "line\nbreak",
        "nul\x00byte",
        ".",
        "..",
        "...",
        "docs/a.txt",
        "docs\\a.txt",
    ],
)
def test_rejects_invalid_names(name):
    assert is_valid_name(name) is False


def test_rejects_non_strings():
    assert is_valid_name(None) is False
    assert is_valid_name(42) is False
