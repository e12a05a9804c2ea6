"""CLI for managing spreadsheet-backed sites."""

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from sheetsite.config import DATABASE_FILENAME, SheetsConfig, resolve_data_directory
from sheetsite.core.database.schema import migrate_schema
from sheetsite.core.database.sites import SqliteSiteStore
from sheetsite.core.site.navigation import navigation, orphaned_pages, static_paths
from sheetsite.core.site.theme import resolve_theme
from sheetsite.errors import (
    CacheUnavailableError,
    SheetsFetchError,
    SiteNotFoundError,
    SiteStoreError,
)
from sheetsite.logging_config import configure_logging
from sheetsite.models.site import SiteSnapshot
from sheetsite.service import SiteDataService, build_cached_service, build_static_service

app = typer.Typer(help="Sheetsite: websites built from a Google spreadsheet.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Site database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_db(data_dir: Path | None) -> sqlite3.Connection:
    """Open (creating if needed) the site database."""
    dst = data_dir or resolve_data_directory()
    dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(dst / DATABASE_FILENAME))
    migrate_schema(conn)
    return conn


def _snapshot_json(snapshot: SiteSnapshot) -> str:
    return json.dumps({**snapshot.tab_payloads(), "fetched_at": snapshot.fetched_at}, indent=2)


def _print_summary(snapshot: SiteSnapshot) -> None:
    fetched = datetime.fromtimestamp(snapshot.fetched_at, tz=UTC)
    typer.echo(f"Fetched {fetched:%Y-%m-%d %H:%M:%S} UTC")
    theme = resolve_theme(snapshot.settings)
    if theme.site_name:
        typer.echo(f"{theme.site_name}  (primary {theme.primary_color})")
    for entry in navigation(snapshot):
        typer.echo(f"  /{entry.folder.slug}  {entry.folder.name}")
        for page in entry.pages:
            typer.echo(f"    /{entry.folder.slug}/{page.slug}  {page.name}")
    orphans = orphaned_pages(snapshot)
    if orphans:
        typer.echo(f"  ({len(orphans)} pages unreachable: folder missing or inactive)")


def _load_or_exit(service: SiteDataService, site_id: str, *, refresh: bool) -> SiteSnapshot:
    try:
        return service.refresh_site(site_id) if refresh else service.load_site(site_id)
    except SiteNotFoundError:
        typer.echo(f"Site '{site_id}' not found.")
        raise typer.Exit(1) from None
    except SheetsFetchError as e:
        logger.debug("Fetch failed: {}", e)
        typer.echo("Could not load site data.")
        raise typer.Exit(1) from None
    except SiteStoreError as e:
        logger.debug("Site store failed: {}", e)
        typer.echo("Could not read the site database.")
        raise typer.Exit(1) from None


@app.command()
def validate(
    spreadsheet_id: str = typer.Argument(..., help="Google spreadsheet id"),
) -> None:
    """Check that a spreadsheet exposes all required tabs."""
    result = build_static_service(SheetsConfig.from_env()).validate_spreadsheet(spreadsheet_id)
    if result.valid:
        typer.echo("Spreadsheet is valid.")
    else:
        typer.echo(result.message)
        raise typer.Exit(1)


@app.command()
def fetch(
    spreadsheet_id: str = typer.Argument(..., help="Google spreadsheet id"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Fetch a spreadsheet live, without touching the site cache."""
    service = build_static_service(SheetsConfig.from_env())
    try:
        snapshot = service.assembler.assemble_all(spreadsheet_id)
    except SheetsFetchError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from None

    if output_json:
        typer.echo(_snapshot_json(snapshot))
    else:
        _print_summary(snapshot)


@app.command()
def register(
    site_id: str = typer.Argument(..., help="Site identifier"),
    spreadsheet_id: str = typer.Argument(..., help="Google spreadsheet id"),
    title: str = typer.Option("", "--title", "-t", help="Site title"),
    skip_validation: bool = typer.Option(
        False, "--skip-validation", help="Register without checking the spreadsheet"
    ),
    data_dir: DataDirOption = None,
) -> None:
    """Link a spreadsheet to a site."""
    config = SheetsConfig.from_env()
    if not skip_validation:
        result = build_static_service(config).validate_spreadsheet(spreadsheet_id)
        if not result.valid:
            typer.echo(result.message)
            raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        record = SqliteSiteStore(conn).add(site_id, spreadsheet_id, title=title)
        typer.echo(f"Registered site '{record.id}' -> {record.spreadsheet_id}")
    finally:
        conn.close()


@app.command()
def show(
    site_id: str = typer.Argument(..., help="Site identifier"),
    refresh: bool = typer.Option(False, "--refresh", "-r", help="Bypass the cache"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    data_dir: DataDirOption = None,
) -> None:
    """Show a site's data, served from cache when available."""
    conn = _open_db(data_dir)
    try:
        service = build_cached_service(conn, SheetsConfig.from_env())
        snapshot = _load_or_exit(service, site_id, refresh=refresh)
        if output_json:
            typer.echo(_snapshot_json(snapshot))
        else:
            _print_summary(snapshot)
    finally:
        conn.close()


@app.command()
def refresh(
    site_id: str = typer.Argument(..., help="Site identifier"),
    data_dir: DataDirOption = None,
) -> None:
    """Refetch a site's spreadsheet and replace its cached data."""
    conn = _open_db(data_dir)
    try:
        service = build_cached_service(conn, SheetsConfig.from_env())
        snapshot = _load_or_exit(service, site_id, refresh=True)
        typer.echo(
            f"Refreshed '{site_id}': {len(snapshot.folders)} folders, "
            f"{len(snapshot.pages)} pages, {len(snapshot.blocks)} blocks"
        )
    finally:
        conn.close()


@app.command()
def invalidate(
    site_id: str = typer.Argument(..., help="Site identifier"),
    data_dir: DataDirOption = None,
) -> None:
    """Drop a site's cached data."""
    conn = _open_db(data_dir)
    try:
        try:
            build_cached_service(conn, SheetsConfig.from_env()).invalidate(site_id)
        except CacheUnavailableError as e:
            logger.debug("Invalidation failed: {}", e)
            typer.echo(f"Could not clear the cache for '{site_id}'.")
            raise typer.Exit(1) from None
        typer.echo(f"Cache cleared for '{site_id}'")
    finally:
        conn.close()


@app.command()
def paths(
    site_id: str = typer.Argument(..., help="Site identifier"),
    data_dir: DataDirOption = None,
) -> None:
    """List the folder/page paths of a site, one per line."""
    conn = _open_db(data_dir)
    try:
        service = build_cached_service(conn, SheetsConfig.from_env())
        snapshot = _load_or_exit(service, site_id, refresh=False)
        for folder_slug, page_slug in static_paths(snapshot):
            typer.echo(f"/{folder_slug}/{page_slug}")
    finally:
        conn.close()
