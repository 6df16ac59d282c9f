"""Application settings persisted to ``settings.json``."""

from __future__ import annotations

from pydantic import Field

from promptshelf.state.models import IndexBaseModel

DEFAULT_HOTKEY = "CommandOrControl+8"


class GeneralSettings(IndexBaseModel):
    """General behavior preferences.

    Attributes:
        auto_launch: Whether the application starts at login.
        hotkey: Global shortcut that opens the launcher.
        editor_always_on_top: Whether the editor window stays above others.
        welcome_screen_dismissed: Whether the first-run screen was closed.
    """

    auto_launch: bool = False
    hotkey: str = DEFAULT_HOTKEY
    editor_always_on_top: bool = True
    welcome_screen_dismissed: bool = False


class AppearanceSettings(IndexBaseModel):
    """Visual preferences."""

    theme: str = "dark"
    accent_color: str = "avocado"


class AppSettings(IndexBaseModel):
    """Top-level settings record."""

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)


__all__ = ["AppSettings", "AppearanceSettings", "DEFAULT_HOTKEY", "GeneralSettings"]
