"""Shared fixtures for promptshelf tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptshelf.documents import DocumentStore
from promptshelf.index import IndexRepository
from promptshelf.service import AppContext, PromptService
from promptshelf.storage import StoragePaths, ensure_storage_dirs


@pytest.fixture()
def paths(tmp_path: Path) -> StoragePaths:
    """Return a storage layout under a temporary directory with the prompts dir created."""
    layout = StoragePaths.from_root(tmp_path / "shelf")
    ensure_storage_dirs(layout)
    return layout


@pytest.fixture()
def repository(paths: StoragePaths) -> IndexRepository:
    return IndexRepository(paths)


@pytest.fixture()
def store(paths: StoragePaths) -> DocumentStore:
    return DocumentStore(paths)


@pytest.fixture()
def service(paths: StoragePaths) -> PromptService:
    return PromptService(AppContext(paths))
