"""agentnav CLI — browse the agent directory and administer the local overlay."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentnav import __version__
from agentnav.auth.gate import AuthGate
from agentnav.catalog.loader import SourceReader
from agentnav.catalog.query import SearchQuery, records_of, search, unique_categories
from agentnav.catalog.writer import CatalogWriter
from agentnav.core.config import Settings, get_settings
from agentnav.core.logging import configure_logging
from agentnav.errors import CatalogError, DataUnavailable
from agentnav.exchange.codec import read_import, write_export
from agentnav.models.input import RecordInput, input_issues
from agentnav.storage.local import DirectoryStorage
from agentnav.storage.overlay import OverlayStore

console = Console()


@dataclass
class Services:
    settings: Settings
    overlay: OverlayStore
    reader: SourceReader
    writer: CatalogWriter
    gate: AuthGate


def build_services(settings: Settings) -> Services:
    storage = DirectoryStorage(settings.storage_dir)
    overlay = OverlayStore(storage)
    reader = SourceReader(overlay, settings.bundled_source)
    return Services(
        settings=settings,
        overlay=overlay,
        reader=reader,
        writer=CatalogWriter(overlay, reader),
        gate=AuthGate(
            storage,
            password=settings.admin_password,
            expiry=timedelta(hours=settings.token_expiry_hours),
        ),
    )


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/] {escape(message)}")
    raise click.exceptions.Exit(1)


def _require_admin(services: Services) -> None:
    if not services.gate.is_authenticated():
        console.print("[yellow]Admin login required.[/] Run 'agentnav login' first.")
        raise click.exceptions.Exit(1)


def _submit(data: dict) -> RecordInput:
    issues = input_issues(data)
    if issues:
        console.print("[red]Invalid item:[/]")
        for issue in issues:
            console.print(f"  [red]x[/] {escape(issue)}")
        raise click.exceptions.Exit(1)
    return RecordInput.model_validate(data)


@click.group()
@click.version_option(version=__version__)
@click.option("--data-dir", "-d", default=None, help="Directory holding local data and config")
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[str]):
    """agentnav — a directory of AI agents.

    Browse the catalog, and (after logging in) add, edit, delete, import
    and export entries. Changes are kept in a local overlay that shadows
    the bundled dataset.
    """
    try:
        settings = get_settings(data_dir=data_dir)
    except (OSError, ValueError) as e:
        _fail(f"Invalid configuration: {e}")
    configure_logging(settings)
    ctx.obj = build_services(settings)


# ── Browse ───────────────────────────────────────────────────────────


@main.command(name="list")
@click.option("--category", "-c", default=None, help="Only show items in this category")
@click.option("--search", "-s", "text", default="", help="Match name or description")
@click.option("--match-id", is_flag=True, help="Let --search also match item ids")
@click.pass_obj
def list_items(services: Services, category: Optional[str], text: str, match_id: bool):
    """List catalog entries, newest first."""
    try:
        collection = services.reader.resolve_collection()
    except DataUnavailable as e:
        _fail(f"Failed to load navigation data. Please try again later. ({e})")

    result = search(collection, SearchQuery(text=text, category=category, include_id=match_id))
    if not result.records:
        console.print("[yellow]No items found.[/] Try adjusting your search term or category filter.")
        return

    table = Table(title=f"Agents ({result.total_count})")
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Categories")
    table.add_column("OSS", justify="center")
    table.add_column("Description")

    for record in result.records:
        table.add_row(
            escape(record.name),
            escape(record.id),
            escape(", ".join(record.category)),
            "[green]Y[/]" if record.is_open_source else "N",
            escape(record.description[:50]),
        )

    console.print(table)
    if result.skipped:
        console.print(f"[yellow]{result.skipped} malformed item(s) skipped.[/]")


@main.command()
@click.pass_obj
def categories(services: Services):
    """List every category in use."""
    try:
        collection = services.reader.resolve_collection()
    except DataUnavailable as e:
        _fail(f"Failed to load navigation data. Please try again later. ({e})")

    records, _ = records_of(collection)
    for name in unique_categories(records):
        console.print(f"  {escape(name)}")


@main.command()
@click.argument("item_id")
@click.pass_obj
def show(services: Services, item_id: str):
    """Show a single entry."""
    try:
        record = services.writer.get(item_id)
    except CatalogError as e:
        _fail(str(e))

    lines = [
        f"[bold]{escape(record.name)}[/]  ({escape(record.id)})",
        escape(record.description),
        "",
        f"Website:     {escape(record.website)}",
        f"Categories:  {escape(', '.join(record.category))}",
        f"Open source: {'yes' if record.is_open_source else 'no'}",
        f"Updated:     {escape(record.last_updated)}",
    ]
    for label in ("github", "twitter", "discord"):
        value = getattr(record, label)
        if value:
            lines.append(f"{label.capitalize() + ':':<13}{escape(value)}")
    if record.logo:
        lines.append(f"Logo:        {escape(record.logo.initials)} on {escape(record.logo.background_color)}")
    console.print(Panel("\n".join(lines), title="Agent"))


# ── Admin ────────────────────────────────────────────────────────────


def _item_options(func):
    options = [
        click.option("--name", default=None, help="Display name"),
        click.option("--website", default=None, help="Absolute URL"),
        click.option("--description", default=None, help="Short description"),
        click.option("--category", "-c", "category", multiple=True, help="Category (repeatable)"),
        click.option("--open-source/--closed-source", "open_source", default=None),
        click.option("--github", default=None),
        click.option("--twitter", default=None),
        click.option("--discord", default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _collect(base: dict, **given) -> dict:
    data = dict(base)
    mapping = {
        "name": "name",
        "website": "website",
        "description": "description",
        "open_source": "isOpenSource",
        "github": "github",
        "twitter": "twitter",
        "discord": "discord",
    }
    for option, key in mapping.items():
        if given.get(option) is not None:
            data[key] = given[option]
    if given.get("category"):
        data["category"] = list(given["category"])
    return data


@main.command()
@_item_options
@click.pass_obj
def add(services: Services, **given):
    """Add a new entry. Requires login."""
    _require_admin(services)

    data = _collect({"isOpenSource": False, "category": []}, **given)
    record_input = _submit(data)
    try:
        items = services.writer.create(record_input)
    except CatalogError as e:
        _fail(f"Failed to save item: {e}")

    console.print(f"[green]Added[/] {escape(items[-1]['id'])}")


@main.command()
@click.argument("item_id")
@_item_options
@click.pass_obj
def edit(services: Services, item_id: str, **given):
    """Edit an existing entry. Requires login."""
    _require_admin(services)

    try:
        record = services.writer.get(item_id)
    except CatalogError as e:
        _fail(str(e))

    base = {
        "name": record.name,
        "website": record.website,
        "description": record.description,
        "category": record.category,
        "isOpenSource": record.is_open_source,
        "github": record.github,
        "twitter": record.twitter,
        "discord": record.discord,
    }
    record_input = _submit(_collect(base, **given))
    try:
        services.writer.update(item_id, record_input)
    except CatalogError as e:
        _fail(f"Failed to save item: {e}")

    console.print(f"[green]Updated[/] {escape(item_id)}")


@main.command()
@click.argument("item_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def delete(services: Services, item_id: str, yes: bool):
    """Delete an entry. Requires login."""
    _require_admin(services)

    if not yes:
        click.confirm(f"Delete {item_id}?", abort=True)
    try:
        items = services.writer.delete(item_id)
    except CatalogError as e:
        _fail(f"Failed to delete item: {e}")

    console.print(f"[green]Deleted[/] {escape(item_id)} ({len(items)} items remain)")


# ── Exchange ─────────────────────────────────────────────────────────


@main.command(name="export")
@click.option("--output", "-o", default=".", help="Directory to write navigation.json into")
@click.pass_obj
def export_data(services: Services, output: str):
    """Export the current catalog as navigation.json."""
    try:
        collection = services.reader.resolve_collection()
        path = write_export(collection, output)
    except DataUnavailable as e:
        _fail(f"Failed to export data. Please try again. ({e})")
    except OSError as e:
        _fail(f"Failed to write export: {e}")

    console.print(f"[green]Exported[/] {len(collection.items)} items to {escape(str(path))}")


@main.command(name="import")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.pass_obj
def import_data(services: Services, file_path: str):
    """Replace the catalog with the contents of FILE_PATH. Requires login."""
    _require_admin(services)

    try:
        collection = read_import(file_path)
        services.writer.replace(collection)
    except CatalogError as e:
        _fail(f"Failed to import data. Please check the file format and try again. ({e})")

    console.print(f"[green]Data imported successfully![/] ({len(collection.items)} items)")


# ── Session ──────────────────────────────────────────────────────────


@main.command()
@click.password_option("--password", confirmation_prompt=False, prompt="Admin password")
@click.pass_obj
def login(services: Services, password: str):
    """Log in as the administrator."""
    if not services.gate.is_password_configured():
        console.print(
            "[yellow]![/] Using the default development password. "
            "Set AGENTNAV_ADMIN_PASSWORD to change it."
        )
    if not services.gate.login(password):
        _fail("Invalid password")
    console.print("[green]Logged in.[/]")


@main.command()
@click.pass_obj
def logout(services: Services):
    """End the admin session."""
    services.gate.logout()
    console.print("Logged out.")


@main.command()
@click.pass_obj
def status(services: Services):
    """Show session and data source status."""
    signed_in = "[green]yes[/]" if services.gate.is_authenticated() else "[red]no[/]"
    console.print(f"  Logged in:   {signed_in}")

    overlay = services.overlay.read()
    if overlay is not None:
        source, collection = "local overlay", overlay
    else:
        source = escape(services.reader.bundled_source)
        try:
            collection = services.reader.load_bundled()
        except DataUnavailable as e:
            console.print(f"  Source:      {source} [red](unavailable: {escape(str(e))})[/]")
            return

    console.print(f"  Source:      {source}")
    console.print(f"  Items:       {len(collection.items)}")
    console.print(f"  Updated:     {escape(collection.last_updated)}")


if __name__ == "__main__":
    main()
