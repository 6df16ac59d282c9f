"""Configuration models describing promptshelf settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PromptshelfBaseModel(BaseModel):
    """Shared configuration for promptshelf configuration models."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(PromptshelfBaseModel):
    """Where prompts, the index cache, and settings live.

    Attributes:
        root: Base directory; prompts are stored under ``<root>/prompts``.
        extension: File extension recognized as a prompt document.
    """

    root: str = "~/.promptshelf"
    extension: str = ".md"

    @field_validator("extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip()
        if not value.strip("."):
            raise ValueError("extension must not be empty")
        return value if value.startswith(".") else f".{value}"


class SearchSettings(PromptshelfBaseModel):
    """Search presentation defaults.

    Attributes:
        limit: Maximum number of results shown by the CLI (0 = unlimited).
    """

    limit: int = Field(default=20, ge=0)


class LoggingSettings(PromptshelfBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    max_size_mb: int = Field(default=10, ge=1)
    backup_count: int = Field(default=3, ge=0)


class CLIOptions(PromptshelfBaseModel):
    """CLI behavior defaults.

    Attributes:
        json_default: Whether commands emit JSON by default.
    """

    json_default: bool = False


class PromptshelfConfig(PromptshelfBaseModel):
    """Top-level configuration struct.

    Attributes:
        storage: Storage layout settings.
        search: Search defaults.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    storage: StorageSettings = Field(default_factory=StorageSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "PromptshelfBaseModel",
    "StorageSettings",
    "SearchSettings",
    "LoggingSettings",
    "CLIOptions",
    "PromptshelfConfig",
]
