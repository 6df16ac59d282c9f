"""Settings persistence with defaulting and corrupt-file recovery."""

from __future__ import annotations

from promptshelf.storage.atomic import atomic_write, load_with_recovery
from promptshelf.storage.paths import StoragePaths

from .models import DEFAULT_HOTKEY, AppearanceSettings, AppSettings, GeneralSettings


class SettingsRepository:
    """Read and write the settings file for a storage root."""

    def __init__(self, paths: StoragePaths) -> None:
        self._paths = paths

    def load(self) -> AppSettings:
        """Return stored settings, writing defaults when missing or corrupt.

        Raises:
            StoreIOError: If the file cannot be read or defaults cannot be written.
        """
        settings, loaded = load_with_recovery(self._paths.settings_path, AppSettings)
        if not loaded:
            self.save(settings)
        return settings

    def save(self, settings: AppSettings) -> None:
        """Persist ``settings`` atomically."""
        atomic_write(
            self._paths.settings_path,
            settings.model_dump_json(by_alias=True, indent=2),
        )


__all__ = [
    "AppSettings",
    "AppearanceSettings",
    "DEFAULT_HOTKEY",
    "GeneralSettings",
    "SettingsRepository",
]
