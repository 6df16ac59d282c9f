"""Persistence of the cached prompt index."""

from __future__ import annotations

import logging

from promptshelf.state.errors import ConflictError, NotFoundError
from promptshelf.state.models import PromptIndex
from promptshelf.storage.atomic import atomic_write, load_with_recovery
from promptshelf.storage.paths import StoragePaths
from promptshelf.storage.scanner import DirectoryScanner

from .sync import merge_folders, new_document_id, reconcile, retarget_folder

LOGGER = logging.getLogger(__name__)


class IndexRepository:
    """Load, reconcile, and persist the index cache for a storage root."""

    def __init__(self, paths: StoragePaths, scanner: DirectoryScanner | None = None) -> None:
        """Initialize the repository.

        Args:
            paths: Storage layout to operate on.
            scanner: Scanner used to discover prompt files.
        """
        self._paths = paths
        self._scanner = scanner or DirectoryScanner()

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    def load(self) -> PromptIndex:
        """Return the cached index reconciled against the documents root.

        Missing or corrupt cache files are replaced by an empty index; the
        result is written back when reconciliation changed anything or when
        no readable cache existed.

        Returns:
            PromptIndex: Up-to-date index.

        Raises:
            StoreIOError: If scanning or persisting fails.
        """

        base, loaded = load_with_recovery(self._paths.index_path, PromptIndex)
        scanned = self._scanner.scan(self._paths.prompts_dir)
        index, changed = reconcile(base, scanned)
        if changed or not loaded:
            LOGGER.debug(
                "Index reconciled (changed=%s, loaded=%s); %d prompt(s), %d folder(s)",
                changed,
                loaded,
                len(index.prompts),
                len(index.folders),
            )
            self.save(index)
        return index

    def save(self, index: PromptIndex) -> None:
        """Persist ``index`` to the cache file.

        Raises:
            StoreIOError: If the atomic write fails.
        """
        payload = index.model_dump_json(by_alias=True, indent=2)
        atomic_write(self._paths.index_path, payload)


def add_folder(index: PromptIndex, name: str) -> None:
    """Append ``name`` to the folder list.

    Raises:
        ConflictError: If the folder is already listed.
    """
    if name in index.folders:
        raise ConflictError(f"Folder '{name}' already exists")
    index.folders.append(name)


def rename_folder(index: PromptIndex, old: str, new: str) -> None:
    """Rename a folder in the index, cascading to entries and decorations.

    Raises:
        ConflictError: If ``new`` is already listed.
        NotFoundError: If ``old`` is not listed.
    """
    if new in index.folders:
        raise ConflictError(f"Folder '{new}' already exists")
    if old not in index.folders:
        raise NotFoundError(f"Folder '{old}' not found")
    retarget_folder(index, old, new)


def delete_folder(index: PromptIndex, name: str) -> None:
    """Drop a folder from the index; its entries move to the root."""
    index.folders = [folder for folder in index.folders if folder != name]
    for entry in index.prompts:
        if entry.folder == name:
            entry.folder = ""
    if index.folder_meta:
        index.folder_meta.pop(name, None)


__all__ = [
    "IndexRepository",
    "add_folder",
    "delete_folder",
    "merge_folders",
    "new_document_id",
    "reconcile",
    "rename_folder",
    "retarget_folder",
]
