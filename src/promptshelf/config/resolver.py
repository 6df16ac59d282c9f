"""Merging of configuration sources."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import PromptshelfConfig

ENV_PREFIX = "PROMPTSHELF__"


def resolve_with_precedence(
    *,
    defaults: PromptshelfConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> PromptshelfConfig:
    """Merge defaults, file, environment, and CLI overrides; later sources win.

    Override keys may be nested mappings or dotted paths such as
    ``"storage.root"``.

    Raises:
        ConfigError: If an override is malformed or the merged result is invalid.
    """

    merged = defaults.model_dump(mode="python")
    sources = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for source_name, source in sources:
        if source is not None:
            merged = _deep_merge(merged, expand_dotted(source, source_name=source_name))

    try:
        return PromptshelfConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def collect_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``PROMPTSHELF__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML scalars so ``"true"`` and ``"5"`` become typed.
    """

    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not path:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_path(overrides, path, value)
    return overrides


def flatten_for_env(config: PromptshelfConfig) -> Dict[str, str]:
    """Render ``config`` as the environment variables that would reproduce it."""
    flat: Dict[str, str] = {}
    for path, value in _walk(config.model_dump(mode="python"), []):
        key = ENV_PREFIX + "__".join(part.upper() for part in path)
        flat[key] = "null" if value is None else str(value)
    return flat


def assign_path(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at the nested ``path`` inside ``target``.

    Raises:
        ConfigError: If a non-mapping value sits on the path.
    """

    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign into '{segment}' because it is not a mapping.")
        node = child
    node[path[-1]] = value


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested mappings."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
        for segment in reversed(key.split(".")):
            value = {segment: value}
        result = _deep_merge(result, value)
    return result


def _walk(value: Any, prefix: list[str]) -> Iterable[tuple[list[str], Any]]:
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _walk(child, prefix + [str(key)])
    else:
        yield prefix, value


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "assign_path",
    "collect_env_overrides",
    "expand_dotted",
    "flatten_for_env",
    "resolve_with_precedence",
]
