"""
Pagesmith CLI.

Commands:
- compile: compile a page JSON (plus optional header/footer) to a render document
- css: live-preview CSS for an editor tree
- section save/show: manage stored theme sections
- validate: list the sections a theme still needs before publishing
- publish: write a theme's master stylesheet and print its URL
- logs: recent entries from the JSONL log file
"""

from __future__ import annotations

import json
import sys
import tomllib
from pathlib import Path
from typing import Any

import typer

from pagesmith._version import get_version
from pagesmith.compiler.cache import InMemoryCache
from pagesmith.compiler.content_compiler import ContentCompiler
from pagesmith.compiler.metadata import MetadataGatherer
from pagesmith.compiler.stores import (
    InMemoryFragmentStore,
    InMemoryNavigationStore,
    InMemorySettingsStore,
)
from pagesmith.config import PagesmithConfig, load_config
from pagesmith.css.aggregator import build_preview_css
from pagesmith.errors import InvalidSectionError, MissingSectionsError, StorageError
from pagesmith.logging import get_log_file, get_recent_logs, setup_logging
from pagesmith.publish.pipeline import PublishPipeline
from pagesmith.publish.sections import SectionStore
from pagesmith.publish.storage import LocalBlobStorage
from pagesmith.specs.document import FragmentKind, FragmentSpec, PageSpec
from pagesmith.specs.theme import ThemeSpec
from pagesmith.themes.store import ThemeStore


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pagesmith {get_version()}")
        typer.echo(f"Python {sys.version.split()[0]}")
        raise typer.Exit()


app = typer.Typer(
    help="Pagesmith – page compilation and theme stylesheet publishing",
    no_args_is_help=True,
)
section_app = typer.Typer(help="Manage stored theme CSS sections")
app.add_typer(section_app, name="section")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to pagesmith.toml (default: ./pagesmith.toml)"
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    try:
        settings = load_config(config)
    except tomllib.TOMLDecodeError as e:
        typer.echo(f"Invalid config file: {e}", err=True)
        raise typer.Exit(code=1)
    setup_logging(log_dir=settings.logging.log_dir, level=settings.logging.level)
    ctx.obj = settings


# =============================================================================
# Helpers
# =============================================================================


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid JSON in {path}: {e}", err=True)
        raise typer.Exit(code=1)


def _read_tree(path: Path) -> dict[str, Any]:
    data = _read_json(path)
    if isinstance(data, list):
        return {"content": data}
    if not isinstance(data, dict):
        typer.echo(f"Expected an object or a list of nodes in {path}", err=True)
        raise typer.Exit(code=1)
    return data


def _read_theme(path: Path, site_id: str | None = None) -> ThemeSpec:
    """Accepts a bare token tree, an exported theme or a theme with ``tokens``."""
    data = _read_json(path)
    if not isinstance(data, dict):
        typer.echo(f"Expected a theme object in {path}", err=True)
        raise typer.Exit(code=1)
    if isinstance(data.get("tokens"), dict):
        tokens = data["tokens"]
    elif isinstance(data.get("data"), dict):
        tokens = data["data"]
    else:
        tokens = data
    name = str(data.get("name") or path.stem)
    return ThemeSpec(id=0, site_id=site_id, name=name, slug=path.stem, active=True, tokens=tokens)


def _section_store(settings: PagesmithConfig) -> SectionStore:
    storage = LocalBlobStorage(settings.storage.base_path, settings.storage.base_url)
    return SectionStore(storage)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


# =============================================================================
# Compile / CSS
# =============================================================================


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    page_file: Path = typer.Argument(..., help="Page JSON ({content, root, zones})"),
    theme_file: Path | None = typer.Option(None, "--theme", "-t", help="Theme JSON"),
    header_file: Path | None = typer.Option(None, "--header", help="Header fragment JSON"),
    footer_file: Path | None = typer.Option(None, "--footer", help="Footer fragment JSON"),
    site: str | None = typer.Option(None, "--site", help="Site id (default: central)"),
    settings_file: Path | None = typer.Option(
        None, "--settings", help="Site settings JSON attached as metadata"
    ),
) -> None:
    """Compile a page into a render document and print it as JSON."""
    settings: PagesmithConfig = ctx.obj
    page_data = _read_tree(page_file)

    fragments = InMemoryFragmentStore()
    header_id = footer_id = None
    if header_file is not None:
        header_id = "cli-header"
        fragments.add_fragment(_fragment(header_id, FragmentKind.HEADER, header_file, site))
    if footer_file is not None:
        footer_id = "cli-footer"
        fragments.add_fragment(_fragment(footer_id, FragmentKind.FOOTER, footer_file, site))

    page = PageSpec(
        id=page_file.stem,
        site_id=site,
        content=page_data.get("content") or [],
        root=page_data.get("root") or {},
        zones=page_data.get("zones") or {},
        header_id=header_id,
        footer_id=footer_id,
    )

    themes = ThemeStore()
    if theme_file is not None:
        themes.add(_read_theme(theme_file, site))

    site_settings = InMemorySettingsStore()
    if settings_file is not None:
        data = _read_json(settings_file)
        if not isinstance(data, dict):
            typer.echo(f"Expected a settings object in {settings_file}", err=True)
            raise typer.Exit(code=1)
        site_settings.put(site, data)

    navigations = InMemoryNavigationStore()
    metadata = MetadataGatherer(
        navigations,
        site_settings,
        themes,
        InMemoryCache(),
        ttl=settings.cache.metadata_ttl,
    )
    compiler = ContentCompiler(
        fragments,
        navigations,
        themes,
        metadata,
        max_alias_depth=settings.resolver.max_alias_depth,
    )
    _echo_json(compiler.compile(page).to_dict())


def _fragment(fragment_id: str, kind: FragmentKind, path: Path, site: str | None) -> FragmentSpec:
    data = _read_tree(path)
    return FragmentSpec(
        id=fragment_id,
        site_id=site,
        kind=kind,
        content=data.get("content") or [],
        root=data.get("root") or {},
        zones=data.get("zones") or {},
    )


@app.command("css")
def css_command(
    tree_file: Path = typer.Argument(..., help="Editor tree JSON"),
    theme_file: Path | None = typer.Option(None, "--theme", "-t", help="Theme JSON"),
    no_variables: bool = typer.Option(
        False, "--no-variables", help="Omit the :root variables block"
    ),
) -> None:
    """Print the live-preview CSS for an editor tree."""
    tree = _read_tree(tree_file)
    tokens = _read_theme(theme_file).tokens if theme_file is not None else None
    typer.echo(build_preview_css(tree, tokens, include_variables=not no_variables))


# =============================================================================
# Sections
# =============================================================================


@section_app.command("save")
def section_save(
    ctx: typer.Context,
    theme_id: str = typer.Argument(..., help="Theme id"),
    section: str = typer.Argument(..., help="variables, header, footer or template-<name>"),
    css_file: Path = typer.Argument(..., help="CSS file to store"),
) -> None:
    """Store a CSS file as one section of a theme."""
    if not css_file.is_file():
        typer.echo(f"File not found: {css_file}", err=True)
        raise typer.Exit(code=1)
    store = _section_store(ctx.obj)
    try:
        path = store.save(theme_id, section, css_file.read_text(encoding="utf-8"))
    except (InvalidSectionError, StorageError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Saved {section} -> {path}")


@section_app.command("show")
def section_show(
    ctx: typer.Context,
    theme_id: str = typer.Argument(..., help="Theme id"),
    section: str = typer.Argument(..., help="Section name"),
) -> None:
    """Print a stored section."""
    store = _section_store(ctx.obj)
    try:
        css = store.get(theme_id, section)
    except InvalidSectionError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    if css is None:
        typer.echo(f"Section {section} not found for theme {theme_id}", err=True)
        raise typer.Exit(code=1)
    typer.echo(css)


# =============================================================================
# Publish
# =============================================================================


@app.command("validate")
def validate_command(
    ctx: typer.Context,
    theme_id: str = typer.Argument(..., help="Theme id"),
) -> None:
    """Print the sections a theme is missing; exit 1 if any."""
    store = _section_store(ctx.obj)
    validation = PublishPipeline(store).validate(theme_id)
    _echo_json(validation.to_dict())
    if not validation.ok:
        raise typer.Exit(code=1)


@app.command("publish")
def publish_command(
    ctx: typer.Context,
    theme_id: str = typer.Argument(..., help="Theme id"),
) -> None:
    """Merge a theme's sections into its master stylesheet and print the URL."""
    store = _section_store(ctx.obj)
    try:
        result = PublishPipeline(store).publish(theme_id)
    except MissingSectionsError as e:
        typer.echo(f"Cannot publish theme {theme_id}: missing {', '.join(e.missing)}", err=True)
        raise typer.Exit(code=1)
    except StorageError as e:
        typer.echo(f"Publish failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(result.url)


# =============================================================================
# Logs
# =============================================================================


@app.command("logs")
def logs_command(
    count: int = typer.Option(50, "--count", "-n", help="Number of recent entries"),
    level: str | None = typer.Option(
        None, "--level", "-l", help="Filter by level (ERROR, WARNING, INFO, DEBUG)"
    ),
) -> None:
    """Print recent entries from the JSONL log file."""
    log_file = get_log_file()
    if log_file is None:
        typer.echo("File logging is disabled; set [logging] log_dir", err=True)
        raise typer.Exit(code=1)
    entries = get_recent_logs(count=count, level=level)
    _echo_json({"count": len(entries), "log_file": str(log_file), "entries": entries})


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
