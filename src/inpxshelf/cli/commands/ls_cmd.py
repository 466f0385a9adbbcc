# ABOUTME: The `inpxshelf ls` command for browsing authors, series, and genres.
# ABOUTME: Pages through a dimension table alphabetically with a total count.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inpxshelf.cli.options import db_option, limit_option, offset_option
from inpxshelf.db.catalog import CatalogError, LibraryCatalog
from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library

console = Console()


@click.command("ls")
@click.argument(
    "kind",
    type=click.Choice(["authors", "series", "genres"], case_sensitive=False),
)
@limit_option
@offset_option
@db_option
def ls(kind: str, limit: int, offset: int, db_path: Path | None) -> None:
    """List catalog authors, series, or genres alphabetically."""
    try:
        conn = open_library(db_path or DEFAULT_DB_PATH)
    except DatabaseOpenError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    catalog = LibraryCatalog(conn)
    listers = {
        "authors": catalog.list_authors,
        "series": catalog.list_series,
        "genres": catalog.list_genres,
    }
    try:
        items, total = listers[kind.lower()](limit, offset)
    except CatalogError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    if not items:
        console.print(f"[yellow]No {kind.lower()} in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    for item in items:
        table.add_row(str(item.id), item.name)

    console.print(table)
    console.print(f"\n[dim]{len(items)} of {total} {kind.lower()}[/dim]")
