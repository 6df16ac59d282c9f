"""Atomic writes and corrupt-file recovery for persisted JSON records."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from promptshelf.state.errors import StoreIOError

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def temporary_path(path: Path) -> Path:
    """Return the sibling path used to stage writes for ``path``."""
    return path.with_name(f"{path.name}.tmp")


def atomic_write(path: Path, content: bytes | str) -> None:
    """Write ``content`` to ``path`` through a temporary sibling and a rename.

    Observers see either the previous content or the complete new content. A
    temporary file left behind by a failed attempt is overwritten next time.

    Args:
        path: Destination file.
        content: Bytes, or text encoded as UTF-8.

    Raises:
        StoreIOError: If writing or renaming fails.
    """

    data = content.encode("utf-8") if isinstance(content, str) else content
    staging = temporary_path(path)
    try:
        staging.write_bytes(data)
        os.replace(staging, path)
    except OSError as exc:
        raise StoreIOError(f"Could not write {path}: {exc}") from exc


def corrupt_path(path: Path, when: datetime | None = None) -> Path:
    """Return the aside path used to preserve an unreadable file."""
    stamp = (when or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    return path.with_suffix(f".corrupt.{stamp}")


def load_with_recovery(path: Path, model: Type[ModelT]) -> tuple[ModelT, bool]:
    """Load a JSON record, substituting defaults when it is missing or corrupt.

    A file that fails to parse or validate is renamed aside with a timestamped
    suffix so the bad data stays available for inspection.

    Args:
        path: JSON file to read.
        model: Pydantic model describing the record.

    Returns:
        tuple[ModelT, bool]: The record and whether it was read from ``path``.
        ``False`` means defaults were substituted and the caller should persist.

    Raises:
        StoreIOError: If the file exists but cannot be read.
    """

    if not path.exists():
        return model(), False

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise StoreIOError(f"Could not read {path}: {exc}") from exc

    try:
        return model.model_validate_json(raw), True
    except (ValidationError, ValueError) as exc:
        aside = corrupt_path(path)
        try:
            path.rename(aside)
        except OSError as rename_exc:
            LOGGER.warning("Unable to move corrupt %s aside: %s", path, rename_exc)
        else:
            LOGGER.warning("Corrupt %s renamed to %s: %s", path.name, aside, exc)
        return model(), False


__all__ = ["atomic_write", "corrupt_path", "load_with_recovery", "temporary_path"]
