"""Tests for the pure index reconciliation routine."""

from __future__ import annotations

from pathlib import Path

from promptshelf.index import merge_folders, reconcile, retarget_folder
from promptshelf.state import DocumentMetadata, FolderRecord, PromptIndex
from promptshelf.storage import ScannedFile

STAMP = "2026-01-01T00:00:00.000000Z"
LATER = "2026-02-01T00:00:00.000000Z"


def _scanned(folder: str, filename: str, modified: str | None = STAMP) -> ScannedFile:
    return ScannedFile(
        folder=folder,
        filename=filename,
        path=Path("/virtual") / folder / filename,
        modified=modified,
    )


def _entry(doc_id: str, folder: str, filename: str, **extra: object) -> DocumentMetadata:
    values: dict[str, object] = {
        "id": doc_id,
        "name": filename.rsplit(".", 1)[0],
        "folder": folder,
        "filename": filename,
        "created": STAMP,
        "updated": STAMP,
    }
    values.update(extra)
    return DocumentMetadata(**values)


def test_existing_entries_keep_user_metadata() -> None:
    index = PromptIndex(
        prompts=[_entry("a", "Writing", "summary.md", description="mine", use_count=4)],
        folders=["Writing"],
    )

    result, changed = reconcile(index, [_scanned("Writing", "summary.md")])

    assert changed is False
    assert result.prompts[0].id == "a"
    assert result.prompts[0].description == "mine"
    assert result.prompts[0].use_count == 4


def test_modified_file_refreshes_updated_timestamp() -> None:
    index = PromptIndex(prompts=[_entry("a", "", "note.md")])

    result, changed = reconcile(index, [_scanned("", "note.md", modified=LATER)])

    assert changed is True
    assert result.prompts[0].updated == LATER
    assert result.prompts[0].created == STAMP


def test_unavailable_timestamp_leaves_entry_untouched() -> None:
    index = PromptIndex(prompts=[_entry("a", "", "note.md")])

    result, changed = reconcile(index, [_scanned("", "note.md", modified=None)])

    assert changed is False
    assert result.prompts[0].updated == STAMP


def test_new_file_gets_synthesized_entry() -> None:
    result, changed = reconcile(PromptIndex(), [_scanned("Code", "review_checklist-v2.md")])

    assert changed is True
    entry = result.prompts[0]
    assert entry.id
    assert entry.name == "review checklist v2"
    assert entry.folder == "Code"
    assert entry.use_count == 0
    assert entry.last_used is None
    assert entry.created == entry.updated == STAMP
    assert entry.icon is None and entry.color is None
    assert result.folders == ["Code"]


def test_new_file_without_timestamp_uses_current_time() -> None:
    result, _ = reconcile(PromptIndex(), [_scanned("", "x.md", modified=None)])

    assert result.prompts[0].created
    assert result.prompts[0].created == result.prompts[0].updated


def test_missing_files_are_dropped() -> None:
    index = PromptIndex(prompts=[_entry("a", "", "gone.md"), _entry("b", "", "kept.md")])

    result, changed = reconcile(index, [_scanned("", "kept.md")])

    assert changed is True
    assert [entry.id for entry in result.prompts] == ["b"]


def test_duplicate_keys_collapse_to_one_entry() -> None:
    index = PromptIndex(prompts=[_entry("a", "", "dup.md"), _entry("b", "", "dup.md")])

    result, changed = reconcile(index, [_scanned("", "dup.md")])

    assert changed is True
    assert len(result.prompts) == 1


def test_empty_folders_are_retained_and_order_preserved() -> None:
    index = PromptIndex(
        prompts=[_entry("a", "Writing", "a.md")],
        folders=["Empty", "Writing"],
    )

    result, changed = reconcile(
        index, [_scanned("Writing", "a.md"), _scanned("Zeta", "z.md")]
    )

    assert changed is True
    assert result.folders == ["Empty", "Writing", "Zeta"]


def test_duplicate_folder_names_are_removed() -> None:
    index = PromptIndex(folders=["A", "B", "A"])

    result, changed = reconcile(index, [])

    assert changed is True
    assert result.folders == ["A", "B"]


def test_reconcile_does_not_mutate_input_and_is_idempotent() -> None:
    index = PromptIndex(prompts=[_entry("a", "", "old.md")])
    scanned = [_scanned("", "new.md"), _scanned("Ideas", "one.md")]

    first, first_changed = reconcile(index, scanned)
    second, second_changed = reconcile(first, scanned)

    assert [entry.id for entry in index.prompts] == ["a"]
    assert first_changed is True
    assert second_changed is False
    assert second == first


def test_reconciled_keys_are_unique_and_folders_listed() -> None:
    index = PromptIndex(
        prompts=[_entry("a", "X", "a.md"), _entry("b", "X", "a.md"), _entry("c", "Y/Z", "c.md")]
    )
    scanned = [_scanned("X", "a.md"), _scanned("Y/Z", "c.md"), _scanned("", "d.md")]

    result, _ = reconcile(index, scanned)

    keys = [(entry.folder, entry.filename) for entry in result.prompts]
    assert len(keys) == len(set(keys))
    for entry in result.prompts:
        if entry.folder:
            assert entry.folder in result.folders


def test_merge_folders_skips_root() -> None:
    entries = [_entry("a", "", "a.md"), _entry("b", "B", "b.md")]

    assert merge_folders(["A"], entries) == ["A", "B"]


def test_retarget_folder_moves_entries_list_and_decorations() -> None:
    index = PromptIndex(
        prompts=[_entry("a", "Old", "a.md"), _entry("b", "Old/Sub", "b.md")],
        folders=["Old", "Old/Sub"],
        folder_meta={"Old": FolderRecord(name="Old", icon="star")},
    )

    moved = retarget_folder(index, "Old", "New", include_nested=True)

    assert moved == 2
    assert [entry.folder for entry in index.prompts] == ["New", "New/Sub"]
    assert index.folders == ["New", "New/Sub"]
    assert index.folder_meta is not None
    assert index.folder_meta["New"].name == "New"
    assert index.folder_meta["New"].icon == "star"
    assert "Old" not in index.folder_meta
