"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from promptshelf.config import (
    ConfigError,
    ConfigManager,
    PromptshelfConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from promptshelf.config.resolver import collect_env_overrides, expand_dotted


def _fresh_manager(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, env: dict[str, str] | None = None
) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env=env or {})


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".promptshelf" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "promptshelf configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, PromptshelfConfig)
    assert config.storage.root == "~/.promptshelf"
    assert config.storage.extension == ".md"


def test_precedence_file_env_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env = {
        "PROMPTSHELF__SEARCH__LIMIT": "7",
        "PROMPTSHELF__LOGGING__LEVEL": "DEBUG",
        "UNRELATED": "1",
    }
    manager = _fresh_manager(tmp_path, monkeypatch, env)
    manager.save({"search": {"limit": 50}, "storage": {"extension": "txt"}})

    config = manager.load(cli_overrides={"logging.level": "ERROR"})

    assert config.storage.extension == ".txt"
    # Environment beats the file, CLI beats the environment.
    assert config.search.limit == 7
    assert config.logging.level == "ERROR"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"storage": {"colour": "blue"}})

    with pytest.raises(ConfigError):
        manager.load()


def test_set_value_persists_typed_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    config = manager.set_value("search.limit", "5")

    assert config.search.limit == 5
    assert manager.load_file_overrides()["search"]["limit"] == 5


def test_set_value_rejects_invalid_values(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()
    before = manager.read_text()

    with pytest.raises(ConfigError):
        manager.set_value("search.limit", "-1")
    with pytest.raises(ConfigError):
        manager.set_value("", "1")

    assert manager.read_text() == before


def test_flatten_for_env_round_trips_defaults() -> None:
    flat = flatten_for_env(PromptshelfConfig())

    assert flat["PROMPTSHELF__STORAGE__ROOT"] == "~/.promptshelf"
    assert flat["PROMPTSHELF__SEARCH__LIMIT"] == "20"
    assert collect_env_overrides(flat)["search"]["limit"] == 20


def test_expand_dotted_merges_nested_keys() -> None:
    expanded = expand_dotted(
        {"storage.root": "/tmp/a", "storage": {"extension": ".txt"}}, source_name="cli"
    )

    assert expanded == {"storage": {"root": "/tmp/a", "extension": ".txt"}}


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=PromptshelfConfig(),
            file_overrides={"search": {"limit": "not-an-int"}},
        )


def test_extension_must_not_be_empty() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=PromptshelfConfig(),
            cli_overrides={"storage.extension": "."},
        )


def test_cli_section_only_accepts_json_default() -> None:
    config = resolve_with_precedence(
        defaults=PromptshelfConfig(), cli_overrides={"cli.json_default": True}
    )

    assert config.cli.json_default is True
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=PromptshelfConfig(), cli_overrides={"cli.quiet_default": True}
        )
