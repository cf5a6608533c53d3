"""Validation of single file and folder names."""

import os
import re

MAX_NAME_LENGTH = 255

# Control characters plus characters Windows refuses in names; slashes because
# a name is always a single path component.
_INVALID_CHARS = re.compile(r'[<>:"|?*\x00-\x1f/\\]')

# Device names reserved on Windows, with or without an extension
_RESERVED_NAMES = re.compile(r"^(con|prn|aux|nul|com[1-9]|lpt[1-9])$", re.IGNORECASE)

_ONLY_DOTS = re.compile(r"^\.+$")


def is_valid_name(name: object) -> bool:
    """Check whether a name is safe to use for a file or folder.

    Args:
        name: Candidate name (a single path component, never a path)

    Returns:
        True if the name is acceptable
    """
    if not isinstance(name, str):
        return False

    if len(name) == 0 or len(name) > MAX_NAME_LENGTH:
        return False

    if _INVALID_CHARS.search(name):
        return False

    stem, _ = os.path.splitext(name)
    if _RESERVED_NAMES.match(stem):
        return False

    return not _ONLY_DOTS.match(name)
