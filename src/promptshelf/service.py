"""Request/response operations exposed to a host shell or the CLI."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from promptshelf.documents import DocumentStore
from promptshelf.index import IndexRepository, add_folder
from promptshelf.search import search
from promptshelf.seed import seed_if_needed
from promptshelf.settings import DEFAULT_HOTKEY, AppSettings, SettingsRepository
from promptshelf.state.errors import StoreError, ValidationError
from promptshelf.state.models import Document, DocumentMetadata, PromptIndex
from promptshelf.storage.naming import normalize_folder
from promptshelf.storage.paths import StoragePaths, ensure_storage_dirs
from promptshelf.storage.scanner import DOCUMENT_EXTENSION, DirectoryScanner

LOGGER = logging.getLogger(__name__)


class AppContext:
    """Storage paths plus the mutable state shared between request handlers.

    The hotkey string and the captured external window handle are only read
    or written while holding ``lock``.
    """

    def __init__(self, paths: StoragePaths) -> None:
        self.paths = paths
        self.lock = threading.Lock()
        self._current_hotkey = DEFAULT_HOTKEY
        self._last_external_window: Optional[int] = None

    @property
    def current_hotkey(self) -> str:
        with self.lock:
            return self._current_hotkey

    @current_hotkey.setter
    def current_hotkey(self, value: str) -> None:
        with self.lock:
            self._current_hotkey = value

    def capture_external_window(self, handle: Optional[int]) -> None:
        """Remember the window that had focus before the launcher opened."""
        with self.lock:
            self._last_external_window = handle

    @property
    def last_external_window(self) -> Optional[int]:
        with self.lock:
            return self._last_external_window


class PromptService:
    """Load the reconciled index, apply one operation, and persist the result.

    Each public method is an independent request: the index is loaded fresh,
    so edits made to the documents root outside the application are picked up.
    """

    def __init__(self, context: AppContext, *, extension: str = DOCUMENT_EXTENSION) -> None:
        self.context = context
        self.repository = IndexRepository(context.paths, DirectoryScanner(extension))
        self.documents = DocumentStore(context.paths, extension)
        self.settings = SettingsRepository(context.paths)

    @property
    def paths(self) -> StoragePaths:
        return self.context.paths

    def startup(self, *, seed: bool = True) -> PromptIndex:
        """Prepare storage, seed sample prompts, and adopt the stored hotkey.

        Failing to create directories or load the index is fatal; seeding
        problems are only logged.

        Args:
            seed: Whether to install sample prompts into an unseeded index.

        Returns:
            PromptIndex: Index after startup.
        """

        ensure_storage_dirs(self.paths)
        index = self.repository.load()
        if seed:
            try:
                seed_if_needed(self.documents, self.repository, index)
            except StoreError as exc:
                LOGGER.warning("Failed to seed sample prompts: %s", exc)
        settings = self.settings.load()
        self.context.current_hotkey = settings.general.hotkey
        return index

    # Index and documents ---------------------------------------------

    def get_index(self) -> PromptIndex:
        return self.repository.load()

    def get_folders(self) -> list[str]:
        return self.repository.load().folders

    def get_prompt(self, doc_id: str) -> Document:
        index = self.repository.load()
        return self.documents.load(index, doc_id)

    def save_prompt(self, document: Document) -> DocumentMetadata:
        index = self.repository.load()
        meta = self.documents.save(index, document)
        self.repository.save(index)
        return meta

    def delete_prompt(self, doc_id: str) -> None:
        index = self.repository.load()
        self.documents.delete(index, doc_id)
        self.repository.save(index)

    def record_usage(self, doc_id: str) -> DocumentMetadata:
        index = self.repository.load()
        meta = self.documents.record_usage(index, doc_id)
        self.repository.save(index)
        return meta

    def search_prompts(self, query: str) -> list[DocumentMetadata]:
        index = self.repository.load()
        return search(index.prompts, query)

    # Folders -----------------------------------------------------------

    def add_folder(self, name: str) -> list[str]:
        """Create a folder directory and list it in the index.

        Raises:
            ValidationError: If ``name`` is empty or escapes the documents root.
            ConflictError: If the folder is already listed.
        """
        name = normalize_folder(name)
        if not name:
            raise ValidationError("Folder name cannot be empty")
        index = self.repository.load()
        self.documents.create_folder(name)
        add_folder(index, name)
        self.repository.save(index)
        return index.folders

    def rename_folder(self, old: str, new: str) -> list[str]:
        index = self.repository.load()
        self.documents.rename_folder(index, old, new)
        self.repository.save(index)
        return index.folders

    def delete_folder(self, name: str) -> list[str]:
        index = self.repository.load()
        self.documents.delete_folder(index, name)
        self.repository.save(index)
        return index.folders

    # Settings and shared state -------------------------------------------

    def get_settings(self) -> AppSettings:
        return self.settings.load()

    def save_settings(self, settings: AppSettings) -> AppSettings:
        self.settings.save(settings)
        return settings

    def editor_always_on_top(self) -> bool:
        """Return whether the editor window should stay above other windows."""
        return self.settings.load().general.editor_always_on_top

    def get_current_hotkey(self) -> str:
        return self.context.current_hotkey

    def set_hotkey(self, hotkey: str) -> str:
        """Adopt ``hotkey`` as the active shortcut and store it in settings.

        Raises:
            ValidationError: If ``hotkey`` is blank.
        """
        hotkey = hotkey.strip()
        if not hotkey:
            raise ValidationError("Hotkey cannot be empty")
        settings = self.settings.load()
        settings.general.hotkey = hotkey
        self.settings.save(settings)
        self.context.current_hotkey = hotkey
        return hotkey


__all__ = ["AppContext", "PromptService"]
