"""Per-document CRUD against index entries and their backing files."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from promptshelf.index import new_document_id, retarget_folder
from promptshelf.state.errors import (
    ConflictError,
    NotFoundError,
    StoreIOError,
    ValidationError,
)
from promptshelf.state.models import Document, DocumentMetadata, PromptIndex, utc_timestamp
from promptshelf.storage.atomic import atomic_write
from promptshelf.storage.naming import normalize_folder, sanitize_filename
from promptshelf.storage.paths import StoragePaths
from promptshelf.storage.scanner import DOCUMENT_EXTENSION

LOGGER = logging.getLogger(__name__)

MAX_SUFFIX_ATTEMPTS = 999


class DocumentStore:
    """Create, read, update, and delete prompt files and their index entries.

    Every mutation orders filesystem work so that a crash leaves at worst an
    orphan file (absorbed by reconciliation on the next load), never an index
    entry pointing at missing content.
    """

    def __init__(self, paths: StoragePaths, extension: str = DOCUMENT_EXTENSION) -> None:
        self._paths = paths
        self._extension = extension if extension.startswith(".") else f".{extension}"

    @property
    def root(self) -> Path:
        return self._paths.prompts_dir

    # ------------------------------------------------------------------ #
    # Paths and names                                                    #
    # ------------------------------------------------------------------ #

    def folder_path(self, folder: str) -> Path:
        """Return the directory backing ``folder`` ("" is the documents root)."""
        if not folder:
            return self.root
        return self.root / folder

    def path_for(self, folder: str, filename: str) -> Path:
        """Return the file path for ``filename`` inside ``folder``."""
        return self.folder_path(folder) / filename

    def ensure_unique_filename(self, folder: str, base: str) -> str:
        """Return a filename for ``base`` that is free inside ``folder``.

        Tries ``base.md``, then ``base-1.md`` through ``base-999.md``, and
        finally a name carrying a random identifier.

        Args:
            folder: Destination folder.
            base: Desired base name; sanitized before use.

        Returns:
            str: Filename that does not exist yet.
        """

        sanitized = sanitize_filename(base)
        candidate = f"{sanitized}{self._extension}"
        if not self.path_for(folder, candidate).exists():
            return candidate

        for counter in range(1, MAX_SUFFIX_ATTEMPTS + 1):
            candidate = f"{sanitized}-{counter}{self._extension}"
            if not self.path_for(folder, candidate).exists():
                return candidate

        return f"{sanitized}-{new_document_id()}{self._extension}"

    # ------------------------------------------------------------------ #
    # Documents                                                          #
    # ------------------------------------------------------------------ #

    def load(self, index: PromptIndex, doc_id: str) -> Document:
        """Return the metadata and content for ``doc_id``.

        Raises:
            NotFoundError: If no entry carries ``doc_id``.
            StoreIOError: If the indexed file cannot be read.
        """

        entry = self._require(index, doc_id)
        file_path = self.path_for(entry.folder, entry.filename)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreIOError(f"Could not read prompt file {file_path}: {exc}") from exc
        return Document(**entry.model_dump(), content=content)

    def save(self, index: PromptIndex, document: Document) -> DocumentMetadata:
        """Create or update a document.

        An id matching an existing entry updates it; an empty or unknown id
        creates a new document.

        Args:
            index: Index to mutate in place.
            document: Incoming metadata and content.

        Returns:
            DocumentMetadata: Stored metadata (a copy).

        Raises:
            ValidationError: If the folder escapes the documents root.
            StoreIOError: If a directory or file cannot be written.
        """

        document = document.model_copy(update={"folder": normalize_folder(document.folder)})
        existing = index.find(document.id) if document.id else None
        if existing is not None:
            return self._update(index, existing, document)
        return self._create(index, document)

    def _update(
        self, index: PromptIndex, existing: DocumentMetadata, document: Document
    ) -> DocumentMetadata:
        current_path = self.path_for(existing.folder, existing.filename)

        if existing.folder != document.folder:
            filename = self.ensure_unique_filename(document.folder, document.name)
            self._make_dir(self.folder_path(document.folder))
            atomic_write(self.path_for(document.folder, filename), document.content)
            self._remove_file(current_path)
            existing.filename = filename
            if document.folder and document.folder not in index.folders:
                index.folders.append(document.folder)
        else:
            atomic_write(current_path, document.content)

        existing.name = document.name
        existing.folder = document.folder
        existing.description = document.description
        existing.icon = document.icon
        existing.color = document.color
        existing.updated = utc_timestamp()
        LOGGER.info("Updated prompt %s (%s)", existing.id, existing.filename)
        return existing.model_copy()

    def _create(self, index: PromptIndex, document: Document) -> DocumentMetadata:
        doc_id = document.id or new_document_id()
        folder = document.folder
        filename = self.ensure_unique_filename(folder, document.name)

        self._make_dir(self.folder_path(folder))
        # Content first: a crash before the index save leaves an orphan file.
        atomic_write(self.path_for(folder, filename), document.content)

        if folder and folder not in index.folders:
            index.folders.append(folder)

        now = utc_timestamp()
        entry = DocumentMetadata(
            id=doc_id,
            name=document.name,
            folder=folder,
            description=document.description,
            filename=filename,
            use_count=0,
            last_used=None,
            created=now,
            updated=now,
            icon=document.icon,
            color=document.color,
        )
        index.prompts.append(entry)
        LOGGER.info("Created prompt %s at %s", doc_id, self.path_for(folder, filename))
        return entry.model_copy()

    def delete(self, index: PromptIndex, doc_id: str) -> None:
        """Remove the entry for ``doc_id`` and then its file.

        A file that is already gone is ignored.

        Raises:
            NotFoundError: If no entry carries ``doc_id``.
        """

        entry = self._require(index, doc_id)
        # Index first: a crash before the file removal leaves an orphan file.
        index.prompts = [item for item in index.prompts if item.id != doc_id]
        self._remove_file(self.path_for(entry.folder, entry.filename))
        LOGGER.info("Deleted prompt %s", doc_id)

    def record_usage(self, index: PromptIndex, doc_id: str) -> DocumentMetadata:
        """Increment the usage counter and stamp the last-used time.

        Raises:
            NotFoundError: If no entry carries ``doc_id``.
        """

        entry = self._require(index, doc_id)
        entry.use_count += 1
        entry.last_used = utc_timestamp()
        return entry.model_copy()

    # ------------------------------------------------------------------ #
    # Folders                                                            #
    # ------------------------------------------------------------------ #

    def create_folder(self, name: str) -> None:
        """Create the directory for ``name``; existing directories are accepted."""
        self._make_dir(self.folder_path(normalize_folder(name)))

    def rename_folder(self, index: PromptIndex, old: str, new: str) -> None:
        """Rename a folder on disk and in the index.

        Virtual folders (listed but without a directory) get a fresh directory
        under the new name. Subfolders travel with the directory, so their
        entries are retargeted too.

        Raises:
            ValidationError: If ``new`` is empty or ``old`` is the root.
            NotFoundError: If ``old`` is neither listed nor present on disk.
            ConflictError: If ``new`` is already listed or exists on disk.
            StoreIOError: If the directory cannot be renamed or created.
        """

        old = normalize_folder(old)
        new = normalize_folder(new)
        if old == new:
            return
        if not new:
            raise ValidationError("New folder name cannot be empty")
        if not old:
            raise ValidationError("Cannot rename the root folder")
        if new in index.folders:
            raise ConflictError(f"Folder '{new}' already exists")

        old_path = self.folder_path(old)
        new_path = self.folder_path(new)
        if old not in index.folders and not old_path.is_dir():
            raise NotFoundError(f"Folder '{old}' not found")
        if old_path.is_dir():
            if new_path.exists():
                raise ConflictError(f"Folder '{new}' already exists")
            self._make_dir(new_path.parent)
            try:
                old_path.rename(new_path)
            except OSError as exc:
                raise StoreIOError(f"Could not rename {old_path} to {new_path}: {exc}") from exc
        else:
            self._make_dir(new_path)

        moved = retarget_folder(index, old, new, include_nested=True, touch=True)
        LOGGER.info("Renamed folder '%s' to '%s' (%d prompt(s))", old, new, moved)

    def delete_folder(self, index: PromptIndex, name: str) -> None:
        """Delete a folder, relocating its documents to the root.

        Document content is never deleted. Filenames that collide with an
        existing root file are re-derived from the display name.

        Raises:
            ValidationError: If ``name`` is empty.
            StoreIOError: If the directory holds untracked content, or a move
                or directory removal fails.
        """

        name = normalize_folder(name)
        if not name:
            raise ValidationError("Cannot delete the root folder")

        directory = self.folder_path(name)
        affected = [entry for entry in index.prompts if entry.folder == name]
        if directory.is_dir():
            tracked = {entry.filename for entry in affected}
            untracked = sorted(
                child.name for child in directory.iterdir() if child.name not in tracked
            )
            if untracked:
                raise StoreIOError(
                    f"Folder '{name}' contains untracked content: {', '.join(untracked)}"
                )

        for entry in affected:
            old_path = self.path_for(entry.folder, entry.filename)
            filename = entry.filename
            if self.path_for("", filename).exists():
                filename = self.ensure_unique_filename("", entry.name)
            new_path = self.path_for("", filename)
            if old_path.exists():
                try:
                    shutil.move(str(old_path), str(new_path))
                except OSError as exc:
                    raise StoreIOError(f"Could not move {old_path} to {new_path}: {exc}") from exc
            entry.folder = ""
            entry.filename = filename
            entry.updated = utc_timestamp()

        if directory.is_dir():
            try:
                directory.rmdir()
            except OSError as exc:
                raise StoreIOError(f"Could not remove folder {directory}: {exc}") from exc

        index.folders = [folder for folder in index.folders if folder != name]
        if index.folder_meta:
            index.folder_meta.pop(name, None)
        LOGGER.info("Deleted folder '%s'; %d prompt(s) moved to the root", name, len(affected))

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _require(self, index: PromptIndex, doc_id: str) -> DocumentMetadata:
        entry = index.find(doc_id)
        if entry is None:
            raise NotFoundError(f"Prompt '{doc_id}' not found")
        return entry

    def _make_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(f"Could not create directory {directory}: {exc}") from exc

    def _remove_file(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            LOGGER.warning("Unable to remove %s: %s", path, exc)


__all__ = ["DocumentStore", "MAX_SUFFIX_ATTEMPTS"]
