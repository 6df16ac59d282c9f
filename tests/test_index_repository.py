"""Tests for index persistence and index-level folder operations."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from promptshelf.index import IndexRepository, add_folder, delete_folder, rename_folder
from promptshelf.state import (
    ConflictError,
    DocumentMetadata,
    FolderRecord,
    NotFoundError,
    PromptIndex,
)
from promptshelf.storage import StoragePaths


def _write_prompt(paths: StoragePaths, relative: str, text: str = "body") -> Path:
    target = paths.prompts_dir / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target


def test_load_creates_index_file(paths: StoragePaths, repository: IndexRepository) -> None:
    index = repository.load()

    assert index.prompts == []
    assert paths.index_path.exists()
    payload = json.loads(paths.index_path.read_text(encoding="utf-8"))
    assert payload["prompts"] == []
    assert payload["seeded"] is False


def test_load_discovers_files_and_uses_camel_case(
    paths: StoragePaths, repository: IndexRepository
) -> None:
    _write_prompt(paths, "Writing/daily_notes.md")

    index = repository.load()

    assert [entry.name for entry in index.prompts] == ["daily notes"]
    assert index.folders == ["Writing"]
    payload = json.loads(paths.index_path.read_text(encoding="utf-8"))
    entry = payload["prompts"][0]
    assert "useCount" in entry
    assert "lastUsed" in entry
    assert "use_count" not in entry


def test_unchanged_load_does_not_rewrite(
    paths: StoragePaths, repository: IndexRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_prompt(paths, "a.md")
    first = repository.load()

    calls: list[PromptIndex] = []
    monkeypatch.setattr(repository, "save", calls.append)
    second = repository.load()

    assert calls == []
    assert second == first


def test_ids_are_stable_across_loads(paths: StoragePaths, repository: IndexRepository) -> None:
    _write_prompt(paths, "a.md")

    first = repository.load()
    second = repository.load()

    assert first.prompts[0].id == second.prompts[0].id


def test_corrupt_index_is_renamed_and_rebuilt(
    paths: StoragePaths, repository: IndexRepository
) -> None:
    _write_prompt(paths, "kept.md")
    paths.index_path.write_text("{ not json", encoding="utf-8")

    index = repository.load()

    assert [entry.filename for entry in index.prompts] == ["kept.md"]
    aside = list(paths.root.glob("index.corrupt.*"))
    assert len(aside) == 1
    assert aside[0].read_text(encoding="utf-8") == "{ not json"
    json.loads(paths.index_path.read_text(encoding="utf-8"))


def test_orphaned_entries_are_dropped_on_load(
    paths: StoragePaths, repository: IndexRepository
) -> None:
    target = _write_prompt(paths, "gone.md")
    assert len(repository.load().prompts) == 1

    target.unlink()

    assert repository.load().prompts == []


def test_add_folder_rejects_duplicates() -> None:
    index = PromptIndex(folders=["Writing"])

    add_folder(index, "Code")
    with pytest.raises(ConflictError):
        add_folder(index, "Writing")

    assert index.folders == ["Writing", "Code"]


def test_rename_folder_cascades() -> None:
    index = PromptIndex(
        prompts=[DocumentMetadata(id="a", folder="Old", filename="a.md")],
        folders=["Old"],
        folder_meta={"Old": FolderRecord(name="Old", color="red")},
    )

    rename_folder(index, "Old", "New")

    assert index.folders == ["New"]
    assert index.prompts[0].folder == "New"
    assert index.folder_meta is not None
    assert index.folder_meta["New"].color == "red"


def test_rename_folder_errors() -> None:
    index = PromptIndex(folders=["A", "B"])

    with pytest.raises(ConflictError):
        rename_folder(index, "A", "B")
    with pytest.raises(NotFoundError):
        rename_folder(index, "Missing", "C")


def test_delete_folder_moves_entries_to_root() -> None:
    index = PromptIndex(
        prompts=[DocumentMetadata(id="a", folder="Old", filename="a.md")],
        folders=["Old", "Other"],
        folder_meta={"Old": FolderRecord(name="Old")},
    )

    delete_folder(index, "Old")

    assert index.folders == ["Other"]
    assert index.prompts[0].folder == ""
    assert index.folder_meta == {}
