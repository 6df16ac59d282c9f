"""Resolution of the on-disk storage layout."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from promptshelf.state.errors import StoreIOError

DEFAULT_ROOT = Path("~/.promptshelf")


@dataclass(frozen=True, slots=True)
class StoragePaths:
    """Locations of the documents root, the index cache, and the settings file.

    Attributes:
        root: Base directory holding every persisted artifact.
        prompts_dir: Documents root containing one file per prompt.
        index_path: Cached index JSON file.
        settings_path: Settings JSON file.
    """

    root: Path
    prompts_dir: Path
    index_path: Path
    settings_path: Path

    @classmethod
    def from_root(cls, root: Path | str = DEFAULT_ROOT) -> "StoragePaths":
        """Build the standard layout beneath ``root``."""
        base = Path(root).expanduser()
        return cls(
            root=base,
            prompts_dir=base / "prompts",
            index_path=base / "index.json",
            settings_path=base / "settings.json",
        )

    @property
    def log_path(self) -> Path:
        """Return the rotating log file location."""
        return self.root / "promptshelf.log"


def ensure_storage_dirs(paths: StoragePaths) -> None:
    """Create the documents root and its parents.

    Raises:
        StoreIOError: If the directories cannot be created.
    """

    try:
        paths.prompts_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreIOError(f"Could not create {paths.prompts_dir}: {exc}") from exc


__all__ = ["DEFAULT_ROOT", "StoragePaths", "ensure_storage_dirs"]
