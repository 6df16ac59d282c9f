"""Filesystem primitives: storage layout, atomic writes, naming, and discovery."""

from .atomic import atomic_write, corrupt_path, load_with_recovery
from .naming import normalize_folder, sanitize_filename, title_from_filename
from .paths import DEFAULT_ROOT, StoragePaths, ensure_storage_dirs
from .scanner import DOCUMENT_EXTENSION, DirectoryScanner, ScannedFile, file_timestamp

__all__ = [
    "DEFAULT_ROOT",
    "DOCUMENT_EXTENSION",
    "DirectoryScanner",
    "ScannedFile",
    "StoragePaths",
    "atomic_write",
    "corrupt_path",
    "ensure_storage_dirs",
    "file_timestamp",
    "load_with_recovery",
    "normalize_folder",
    "sanitize_filename",
    "title_from_filename",
]
