"""Discovery of prompt files beneath the documents root."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Optional

from promptshelf.state.errors import StoreIOError
from promptshelf.state.models import format_timestamp

DOCUMENT_EXTENSION = ".md"


@dataclass(frozen=True, slots=True)
class ScannedFile:
    """A prompt file found on disk.

    Attributes:
        folder: Slash-joined directory path relative to the root ("" for the root).
        filename: File name including the extension.
        path: Absolute path of the file.
        modified: Modification timestamp, or ``None`` when unavailable.
    """

    folder: str
    filename: str
    path: Path
    modified: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.folder, self.filename)


def file_timestamp(path: Path) -> Optional[str]:
    """Return the modification time of ``path`` as an index timestamp."""
    try:
        mtime = path.stat().st_mtime
    except OSError:
        return None
    if mtime < 0:
        return format_timestamp(datetime.now(timezone.utc))
    return format_timestamp(datetime.fromtimestamp(mtime, tz=timezone.utc))


class DirectoryScanner:
    """Recursively discover files carrying the document extension."""

    def __init__(self, extension: str = DOCUMENT_EXTENSION) -> None:
        normalized = extension if extension.startswith(".") else f".{extension}"
        self.extension = normalized.lower()

    def matches(self, name: str) -> bool:
        """Return whether ``name`` has the document extension (case-insensitive)."""
        return name.lower().endswith(self.extension) and len(name) > len(self.extension)

    def scan(self, root: Path) -> list[ScannedFile]:
        """Return eligible files under ``root`` sorted by ``(folder, filename)``.

        Args:
            root: Documents root. A missing root yields an empty list.

        Returns:
            list[ScannedFile]: Discovered files in deterministic order.

        Raises:
            StoreIOError: If a directory cannot be listed.
        """

        if not root.is_dir():
            return []

        found: list[ScannedFile] = []

        def _on_error(exc: OSError) -> None:
            raise StoreIOError(f"Could not scan {exc.filename}: {exc}") from exc

        for current, _dirnames, filenames in os.walk(root, onerror=_on_error):
            directory = Path(current)
            relative = directory.relative_to(root)
            folder = "" if relative == Path(".") else str(PurePosixPath(*relative.parts))
            for filename in filenames:
                if not self.matches(filename):
                    continue
                path = directory / filename
                if not path.is_file():
                    continue
                found.append(
                    ScannedFile(
                        folder=folder,
                        filename=filename,
                        path=path,
                        modified=file_timestamp(path),
                    )
                )

        found.sort(key=lambda item: item.key)
        return found


__all__ = ["DOCUMENT_EXTENSION", "DirectoryScanner", "ScannedFile", "file_timestamp"]
