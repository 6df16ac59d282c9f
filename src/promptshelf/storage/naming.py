"""Filename sanitization and display-name derivation."""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePath, PureWindowsPath

from promptshelf.state.errors import ValidationError

_FOLDER_SEPARATORS = re.compile(r"[\\/]")
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*]')
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{index}" for index in range(1, 10)]
    + [f"LPT{index}" for index in range(1, 10)]
)
MAX_FILENAME_LENGTH = 200


def sanitize_filename(value: str) -> str:
    """Return a filename component that is safe on common filesystems.

    Illegal characters and control characters are removed, trailing dots and
    spaces are trimmed, reserved device names get an underscore prefix, and the
    result is capped at ``MAX_FILENAME_LENGTH`` characters.

    Args:
        value: Raw user-supplied name.

    Returns:
        str: Sanitized component, ``"untitled"`` when nothing usable remains.
    """

    cleaned = _ILLEGAL_CHARS.sub("", value)
    cleaned = "".join(char for char in cleaned if unicodedata.category(char) != "Cc")
    cleaned = cleaned.rstrip(". ")
    if not cleaned:
        return "untitled"

    stem = cleaned.split(".", 1)[0]
    if stem.upper() in _RESERVED_NAMES:
        cleaned = f"_{cleaned}"

    truncated = cleaned[:MAX_FILENAME_LENGTH].rstrip(". ")
    return truncated or "untitled"


def normalize_folder(value: str) -> str:
    """Return ``value`` as a slash-joined path relative to the documents root.

    Backslashes count as separators; empty and ``.`` segments are dropped, so
    ``"Work/"``, ``"./Work"`` and ``"Work"`` all name the same folder. An empty
    result means the root.

    Raises:
        ValidationError: If the path is absolute or contains a ``..`` segment.
    """

    if value.startswith(("/", "\\")) or PureWindowsPath(value).drive:
        raise ValidationError(f"Folder '{value}' must be relative to the documents root")
    segments = [
        segment for segment in _FOLDER_SEPARATORS.split(value) if segment not in ("", ".")
    ]
    if ".." in segments:
        raise ValidationError(f"Folder '{value}' must not contain '..'")
    return "/".join(segments)


def title_from_filename(filename: str) -> str:
    """Derive a display name from a prompt filename.

    ``daily_stand-up.md`` becomes ``"daily stand up"``; names that are empty
    after cleaning become ``"Untitled"``.
    """

    stem = PurePath(filename).stem
    cleaned = stem.replace("_", " ").replace("-", " ")
    if not cleaned.strip():
        return "Untitled"
    return cleaned


__all__ = [
    "MAX_FILENAME_LENGTH",
    "normalize_folder",
    "sanitize_filename",
    "title_from_filename",
]
