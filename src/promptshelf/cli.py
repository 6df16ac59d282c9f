"""Command line interface for promptshelf."""

from __future__ import annotations

from typing import Any, Iterable

import click
import yaml
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from promptshelf.config import ConfigError, ConfigManager, PromptshelfConfig
from promptshelf.config.resolver import assign_path
from promptshelf.log_config import configure_logging
from promptshelf.service import AppContext, PromptService
from promptshelf.settings import AppSettings
from promptshelf.state.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    StoreIOError,
    ValidationError,
)
from promptshelf.state.models import Document, DocumentMetadata
from promptshelf.storage.paths import StoragePaths

console = Console()

_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (NotFoundError, "not_found"),
    (ConflictError, "conflict"),
    (ValidationError, "validation_error"),
    (StoreIOError, "io_error"),
    (StoreError, "store_error"),
    (ConfigError, "config_error"),
)


class CLIState:
    """Per-invocation objects shared between the group and its commands."""

    def __init__(self, root: str | None, seed: bool) -> None:
        self.root = root
        self.seed = seed
        self._config: PromptshelfConfig | None = None
        self._service: PromptService | None = None

    @property
    def config(self) -> PromptshelfConfig:
        if self._config is None:
            overrides = {"storage.root": self.root} if self.root else None
            self._config = ConfigManager().load(cli_overrides=overrides)
        return self._config

    @property
    def service(self) -> PromptService:
        """Return the prompt service, preparing storage on first use."""
        if self._service is None:
            config = self.config
            paths = StoragePaths.from_root(config.storage.root)
            configure_logging(config.logging, paths.log_path)
            service = PromptService(AppContext(paths), extension=config.storage.extension)
            service.startup(seed=self.seed)
            self._service = service
        return self._service

    def json_enabled(self, flag: bool) -> bool:
        try:
            return flag or self.config.cli.json_default
        except ConfigError:
            return flag


def _handle_cli_error(
    exc: Exception,
    *,
    json_output: bool,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        exc: Error raised by the store or configuration layer.
        json_output: Indicates whether JSON mode is active.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    code = "internal_error"
    for error_type, error_code in _ERROR_CODES:
        if isinstance(exc, error_type):
            code = error_code
            break

    if json_output:
        console.print_json(data={"error": {"code": code, "message": str(exc)}})
        raise SystemExit(1)

    raise click.ClickException(str(exc)) from exc


def _entry_payload(entry: DocumentMetadata) -> dict[str, Any]:
    return entry.model_dump(mode="json", by_alias=True)


def _render_entries(entries: Iterable[DocumentMetadata], *, title: str) -> None:
    table = Table(title=title)
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Folder")
    table.add_column("Uses", justify="right")
    table.add_column("Last used")
    for entry in entries:
        table.add_row(
            entry.id[:8],
            entry.name,
            entry.folder or "-",
            str(entry.use_count),
            entry.last_used or "-",
        )
    console.print(table)


def _state(ctx: click.Context) -> CLIState:
    return ctx.obj


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="promptshelf")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=str),
    envvar="PROMPTSHELF_ROOT",
    help="Storage root (defaults to the configured storage.root).",
)
@click.option("--no-seed", is_flag=True, help="Do not install sample prompts on first run.")
@click.pass_context
def cli(ctx: click.Context, root: str | None, no_seed: bool) -> None:
    """promptshelf keeps a searchable library of prompt files."""
    ctx.obj = CLIState(root, seed=not no_seed)


@cli.command("list")
@click.option("--folder", type=str, default=None, help="Only list prompts in FOLDER.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def list_prompts(ctx: click.Context, folder: str | None, json_output: bool) -> None:
    """List prompts, most recently used first."""
    state = _state(ctx)
    json_output = state.json_enabled(json_output)
    try:
        entries = state.service.search_prompts("")
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=json_output)
        return

    if folder is not None:
        entries = [entry for entry in entries if entry.folder == folder]
    if json_output:
        console.print_json(data={"prompts": [_entry_payload(entry) for entry in entries]})
        return
    _render_entries(entries, title="Prompts")


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def folders(ctx: click.Context, json_output: bool) -> None:
    """List known folders."""
    state = _state(ctx)
    json_output = state.json_enabled(json_output)
    try:
        names = state.service.get_folders()
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=json_output)
        return

    if json_output:
        console.print_json(data={"folders": names})
        return
    for name in names:
        console.print(name, markup=False, highlight=False)


@cli.command()
@click.argument("doc_id")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def show(ctx: click.Context, doc_id: str, json_output: bool) -> None:
    """Print the content of the prompt DOC_ID."""
    state = _state(ctx)
    json_output = state.json_enabled(json_output)
    try:
        document = state.service.get_prompt(doc_id)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=json_output)
        return

    if json_output:
        console.print_json(data=document.model_dump(mode="json", by_alias=True))
        return
    click.echo(document.content)


@cli.command()
@click.argument("name")
@click.option("--id", "doc_id", type=str, default="", help="Update the prompt with this id.")
@click.option("--folder", type=str, default=None, help="Folder to store the prompt in.")
@click.option("--description", type=str, default=None, help="Short description.")
@click.option("--icon", type=str, default=None, help="Icon tag.")
@click.option("--color", type=str, default=None, help="Color tag.")
@click.option("--content", type=str, default=None, help="Prompt text.")
@click.option(
    "--file",
    "content_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read the prompt text from a file ('-' for stdin).",
)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def save(
    ctx: click.Context,
    name: str,
    doc_id: str,
    folder: str | None,
    description: str | None,
    icon: str | None,
    color: str | None,
    content: str | None,
    content_file: Any,
    json_output: bool,
) -> None:
    """Create a prompt called NAME, or update one when --id is given.

    Options that are omitted keep their stored values on update.
    """
    state = _state(ctx)
    json_output = state.json_enabled(json_output)
    if content is not None and content_file is not None:
        raise click.UsageError("--content and --file cannot be combined.")
    if content_file is not None:
        content = content_file.read()

    try:
        service = state.service
        current = service.get_prompt(doc_id) if doc_id else Document()
        document = Document(
            id=doc_id,
            name=name,
            folder=folder if folder is not None else current.folder,
            description=description if description is not None else current.description,
            icon=icon if icon is not None else current.icon,
            color=color if color is not None else current.color,
            content=content if content is not None else current.content,
        )
        meta = service.save_prompt(document)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=json_output)
        return

    if json_output:
        console.print_json(data=_entry_payload(meta))
        return
    console.print(f"[green]Saved {meta.name} ({meta.id}) as {meta.filename}.[/green]")


@cli.command()
@click.argument("doc_id")
@click.pass_context
def rm(ctx: click.Context, doc_id: str) -> None:
    """Delete the prompt DOC_ID."""
    state = _state(ctx)
    try:
        state.service.delete_prompt(doc_id)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print(f"[green]Deleted prompt {doc_id}.[/green]")


@cli.command()
@click.argument("query", required=False, default="")
@click.option("--limit", type=int, default=None, help="Maximum number of results.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON.")
@click.pass_context
def search(ctx: click.Context, query: str, limit: int | None, json_output: bool) -> None:
    """Fuzzy-search prompt names, descriptions, and folders."""
    state = _state(ctx)
    json_output = state.json_enabled(json_output)
    try:
        results = state.service.search_prompts(query)
        limit = state.config.search.limit if limit is None else limit
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=json_output)
        return

    total = len(results)
    if limit > 0:
        results = results[:limit]
    if json_output:
        console.print_json(
            data={
                "query": query,
                "counts": {"matches": total, "shown": len(results)},
                "results": [_entry_payload(entry) for entry in results],
            }
        )
        return
    _render_entries(results, title=f"Results for '{query}'" if query.strip() else "Recent")


@cli.command()
@click.argument("doc_id")
@click.pass_context
def use(ctx: click.Context, doc_id: str) -> None:
    """Record a use of DOC_ID and print its content."""
    state = _state(ctx)
    try:
        document = state.service.get_prompt(doc_id)
        state.service.record_usage(doc_id)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    click.echo(document.content)


@cli.group()
def folder() -> None:
    """Create, rename, and delete folders."""


@folder.command("add")
@click.argument("name")
@click.pass_context
def folder_add(ctx: click.Context, name: str) -> None:
    """Create the folder NAME."""
    try:
        names = _state(ctx).service.add_folder(name)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print(f"[green]Folder '{name}' created ({len(names)} folder(s)).[/green]")


@folder.command("rename")
@click.argument("old")
@click.argument("new")
@click.pass_context
def folder_rename(ctx: click.Context, old: str, new: str) -> None:
    """Rename folder OLD to NEW, moving its prompts along."""
    try:
        _state(ctx).service.rename_folder(old, new)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print(f"[green]Folder '{old}' renamed to '{new}'.[/green]")


@folder.command("rm")
@click.argument("name")
@click.pass_context
def folder_rm(ctx: click.Context, name: str) -> None:
    """Delete folder NAME; its prompts move to the root."""
    try:
        _state(ctx).service.delete_folder(name)
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print(f"[green]Folder '{name}' deleted; its prompts moved to the root.[/green]")


@cli.command()
@click.argument("value", required=False)
@click.pass_context
def hotkey(ctx: click.Context, value: str | None) -> None:
    """Show the launcher hotkey, or store VALUE as the new one."""
    try:
        service = _state(ctx).service
        current = service.set_hotkey(value) if value is not None else service.get_current_hotkey()
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    click.echo(current)


@cli.group()
def settings() -> None:
    """View and change application settings."""


@settings.command("view")
@click.pass_context
def settings_view(ctx: click.Context) -> None:
    """Display the stored application settings."""
    try:
        current = _state(ctx).service.get_settings()
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print_json(data=current.model_dump(mode="json", by_alias=True))


@settings.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML-literal value to assign to KEY.")
@click.pass_context
def settings_set(ctx: click.Context, key: str, value: str) -> None:
    """Assign a value to the dotted settings KEY (e.g. general.editorAlwaysOnTop)."""
    state = _state(ctx)
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'general.hotkey'.")
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        service = state.service
        data = service.get_settings().model_dump(mode="json", by_alias=True)
        node: Any = data
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                raise click.ClickException(f"Unknown settings key: {key}")
            node = node[segment]
        assign_path(data, segments, parsed)
        updated = AppSettings.model_validate(data)
        service.save_settings(updated)
    except PydanticValidationError as exc:
        raise click.ClickException(f"Invalid settings value: {exc}") from exc
    except (StoreError, ConfigError) as exc:
        _handle_cli_error(exc, json_output=False)
        return
    console.print(f"[green]Settings updated: {'.'.join(segments)} = {parsed!r}[/green]")


@cli.group()
def config() -> None:
    """Manage promptshelf configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML-literal value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        manager.set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Updated {key} in {manager.config_path}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
