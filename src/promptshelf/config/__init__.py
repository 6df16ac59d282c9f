"""Configuration management for promptshelf."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import PromptshelfConfig
from .resolver import (
    ENV_PREFIX,
    assign_path,
    collect_env_overrides,
    flatten_for_env,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.promptshelf/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # promptshelf configuration file
    # Generated automatically; manage via `promptshelf config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
    ) -> PromptshelfConfig:
        """Load configuration data from disk, applying precedence rules.

        Raises:
            ConfigError: If the file or an override is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_data = collect_env_overrides(self._env) if include_env else None
        return resolve_with_precedence(
            defaults=PromptshelfConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: PromptshelfConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, PromptshelfConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def set_value(self, key: str, raw_value: str) -> PromptshelfConfig:
        """Store a YAML-literal value at the dotted ``key`` in the file.

        Returns:
            PromptshelfConfig: Configuration resolved from the updated file.

        Raises:
            ConfigError: If the key, value, or resulting configuration is invalid.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must specify a dotted path such as 'storage.root'.")
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value: {exc}") from exc

        data = self._read_file()
        assign_path(data, segments, value)
        config = resolve_with_precedence(defaults=PromptshelfConfig(), file_overrides=data)
        self._write_file(data)
        return config

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        path = self._config_path
        if not path.exists():
            self._write_file(PromptshelfConfig().model_dump(mode="python"))
        return path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(dict(data), sort_keys=False)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{serialized}", encoding="utf-8"
        )


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "PromptshelfConfig",
    "flatten_for_env",
    "resolve_with_precedence",
]
