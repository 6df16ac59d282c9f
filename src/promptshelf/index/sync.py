"""Reconciliation of the cached index against a filesystem scan."""

from __future__ import annotations

import uuid
from typing import Iterable, Sequence

from promptshelf.state.models import DocumentMetadata, PromptIndex, utc_timestamp
from promptshelf.storage.naming import title_from_filename
from promptshelf.storage.scanner import ScannedFile


def new_document_id() -> str:
    """Return a fresh unique document identifier."""
    return str(uuid.uuid4())


def synthesize_entry(scanned: ScannedFile) -> DocumentMetadata:
    """Build metadata for a file that has no index entry yet."""
    timestamp = scanned.modified or utc_timestamp()
    return DocumentMetadata(
        id=new_document_id(),
        name=title_from_filename(scanned.filename),
        folder=scanned.folder,
        description="",
        filename=scanned.filename,
        use_count=0,
        last_used=None,
        created=timestamp,
        updated=timestamp,
    )


def merge_folders(known: Iterable[str], entries: Iterable[DocumentMetadata]) -> list[str]:
    """Return known folders plus every folder referenced by ``entries``.

    Order follows first appearance and duplicates are dropped. Empty folder
    names (the root) are never listed.
    """

    merged: list[str] = []
    seen: set[str] = set()
    candidates = list(known) + [entry.folder for entry in entries if entry.folder]
    for folder in candidates:
        if folder in seen:
            continue
        seen.add(folder)
        merged.append(folder)
    return merged


def reconcile(index: PromptIndex, scanned: Sequence[ScannedFile]) -> tuple[PromptIndex, bool]:
    """Merge cached index state with a fresh filesystem scan.

    The directory tree decides which documents exist and when their content
    last changed; the cache keeps everything else (names, descriptions, usage,
    decorations) for as long as the backing file exists.

    Args:
        index: Cached index. It is not modified.
        scanned: Files discovered by the scanner, sorted by ``(folder, filename)``.

    Returns:
        tuple[PromptIndex, bool]: The reconciled index and whether anything changed.
    """

    result = index.model_copy(deep=True)
    changed = False
    previous_count = len(result.prompts)

    existing: dict[tuple[str, str], DocumentMetadata] = {}
    for entry in result.prompts:
        existing[(entry.folder, entry.filename)] = entry

    rebuilt: list[DocumentMetadata] = []
    for item in scanned:
        entry = existing.pop(item.key, None)
        if entry is None:
            rebuilt.append(synthesize_entry(item))
            changed = True
            continue
        if item.modified is not None and entry.updated != item.modified:
            entry.updated = item.modified
            changed = True
        rebuilt.append(entry)

    if existing:
        changed = True
    if len(rebuilt) != previous_count:
        changed = True
    result.prompts = rebuilt

    folders = merge_folders(result.folders, rebuilt)
    if folders != result.folders:
        changed = True
    result.folders = folders

    return result, changed


def retarget_folder(
    index: PromptIndex,
    old: str,
    new: str,
    *,
    include_nested: bool = False,
    touch: bool = False,
) -> int:
    """Point every reference to folder ``old`` at ``new``.

    Updates entry folders, the folder list, and the decoration map key.

    Args:
        index: Index to mutate in place.
        old: Current folder name.
        new: Replacement folder name.
        include_nested: Also rewrite ``old/...`` subfolders, for directory moves.
        touch: Refresh ``updated`` on every retargeted entry.

    Returns:
        int: Number of entries whose folder changed.
    """

    def _rewrite(folder: str) -> str | None:
        if folder == old:
            return new
        if include_nested and old and folder.startswith(f"{old}/"):
            return f"{new}{folder[len(old):]}"
        return None

    stamp = utc_timestamp() if touch else None
    moved = 0
    for entry in index.prompts:
        target = _rewrite(entry.folder)
        if target is None:
            continue
        entry.folder = target
        if stamp is not None:
            entry.updated = stamp
        moved += 1

    folders: list[str] = []
    for folder in index.folders:
        target = _rewrite(folder)
        folders.append(folder if target is None else target)
    index.folders = folders

    if index.folder_meta:
        renames = {key: _rewrite(key) for key in index.folder_meta}
        for key, target in renames.items():
            if target is None:
                continue
            record = index.folder_meta.pop(key)
            record.name = target
            index.folder_meta[target] = record

    return moved


__all__ = ["merge_folders", "new_document_id", "reconcile", "retarget_folder", "synthesize_entry"]
