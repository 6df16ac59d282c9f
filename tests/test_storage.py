"""Tests for atomic writes, corrupt-file recovery, naming, and discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptshelf.settings import AppSettings
from promptshelf.state import PromptIndex, ValidationError
from promptshelf.storage import (
    DirectoryScanner,
    atomic_write,
    load_with_recovery,
    normalize_folder,
    sanitize_filename,
    title_from_filename,
)
from promptshelf.storage.atomic import temporary_path


def test_atomic_write_replaces_content_and_leaves_no_staging_file(tmp_path: Path) -> None:
    target = tmp_path / "note.md"
    target.write_text("old", encoding="utf-8")

    atomic_write(target, "new content")

    assert target.read_text(encoding="utf-8") == "new content"
    assert not temporary_path(target).exists()


def test_atomic_write_accepts_bytes(tmp_path: Path) -> None:
    target = tmp_path / "data.json"

    atomic_write(target, b'{"a": 1}')

    assert target.read_bytes() == b'{"a": 1}'


def test_load_with_recovery_missing_file_returns_defaults(tmp_path: Path) -> None:
    index, loaded = load_with_recovery(tmp_path / "index.json", PromptIndex)

    assert loaded is False
    assert index == PromptIndex()


def test_load_with_recovery_renames_corrupt_file_aside(tmp_path: Path) -> None:
    path = tmp_path / "index.json"
    path.write_text("{not json", encoding="utf-8")

    index, loaded = load_with_recovery(path, PromptIndex)

    assert loaded is False
    assert index.prompts == []
    assert not path.exists()
    aside = list(tmp_path.glob("index.corrupt.*"))
    assert len(aside) == 1
    assert aside[0].read_text(encoding="utf-8") == "{not json"


def test_load_with_recovery_handles_wrong_shape_for_any_model(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"general": "nope"}', encoding="utf-8")

    settings, loaded = load_with_recovery(path, AppSettings)

    assert loaded is False
    assert settings.general.editor_always_on_top is True
    assert list(tmp_path.glob("settings.corrupt.*"))


def test_sanitize_filename_rules() -> None:
    assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"
    assert sanitize_filename("tab\there") == "tabhere"
    assert sanitize_filename("trailing. . ") == "trailing"
    assert sanitize_filename("CON") == "_CON"
    assert sanitize_filename("lpt9.notes") == "_lpt9.notes"
    assert sanitize_filename("CONSOLE") == "CONSOLE"
    assert sanitize_filename("???") == "untitled"
    assert len(sanitize_filename("x" * 500)) == 200


def test_title_from_filename() -> None:
    assert title_from_filename("daily_stand-up.md") == "daily stand up"
    assert title_from_filename("Plain.MD") == "Plain"
    assert title_from_filename("___.md") == "Untitled"


def test_scanner_discovers_nested_files_case_insensitively(tmp_path: Path) -> None:
    root = tmp_path / "prompts"
    (root / "Writing" / "Drafts").mkdir(parents=True)
    (root / "top.md").write_text("a", encoding="utf-8")
    (root / "Writing" / "essay.MD").write_text("b", encoding="utf-8")
    (root / "Writing" / "Drafts" / "idea.md").write_text("c", encoding="utf-8")
    (root / "Writing" / "notes.txt").write_text("ignored", encoding="utf-8")
    (root / "Empty").mkdir()

    found = DirectoryScanner().scan(root)

    assert [(item.folder, item.filename) for item in found] == [
        ("", "top.md"),
        ("Writing", "essay.MD"),
        ("Writing/Drafts", "idea.md"),
    ]
    assert all(item.modified for item in found)
    assert found[1].path == root / "Writing" / "essay.MD"


def test_scanner_missing_root_returns_empty(tmp_path: Path) -> None:
    assert DirectoryScanner().scan(tmp_path / "missing") == []


def test_scanner_custom_extension(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / "b.md").write_text("b", encoding="utf-8")

    found = DirectoryScanner("txt").scan(tmp_path)

    assert [item.filename for item in found] == ["a.txt"]


def test_sanitize_filename_truncation_does_not_end_in_dot_or_space() -> None:
    value = "a" * 198 + " .b"

    assert sanitize_filename(value) == "a" * 198
    assert sanitize_filename("." * 250 + "x") == "untitled"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", ""),
        ("Work", "Work"),
        ("Work/", "Work"),
        ("./Work", "Work"),
        ("A//B", "A/B"),
        ("A\\B\\", "A/B"),
    ],
)
def test_normalize_folder_canonical_form(raw: str, expected: str) -> None:
    assert normalize_folder(raw) == expected


@pytest.mark.parametrize("raw", ["../x", "A/../B", "/abs", "\\abs", "C:\\Users"])
def test_normalize_folder_rejects_paths_outside_root(raw: str) -> None:
    with pytest.raises(ValidationError):
        normalize_folder(raw)
