# ABOUTME: The `inpxshelf info` command for displaying detailed book metadata.
# ABOUTME: Shows all fields for a single cataloged book by ID.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inpxshelf.cli.options import db_option
from inpxshelf.db.catalog import CatalogError, LibraryCatalog
from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library

console = Console()


@click.command("info")
@click.argument("book_id")
@click.option("--json", "json_output", is_flag=True, default=False, help="Output as JSON.")
@db_option
def info(book_id: str, json_output: bool, db_path: Path | None) -> None:
    """Show detailed metadata for a book by ID."""
    try:
        conn = open_library(db_path or DEFAULT_DB_PATH)
    except DatabaseOpenError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    try:
        book = LibraryCatalog(conn).get_by_id(book_id)
    except CatalogError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    if book is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps(book.to_dict(), indent=2, ensure_ascii=False))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", book.id)
    table.add_row("Title", book.title)
    table.add_row("Author", book.author or "unknown")
    if book.series is not None:
        series_str = book.series.name
        if book.series_num:
            series_str += f" #{book.series_num}"
        table.add_row("Series", series_str)
    if book.genre is not None:
        table.add_row("Genre", book.genre.name)
    if book.year:
        table.add_row("Year", str(book.year))
    table.add_row("Language", book.language or "?")
    table.add_row("Format", book.format or "?")
    table.add_row("Size", f"{book.file_size} bytes")
    table.add_row("Archive", f"{book.archive_path} / {book.file_num}")
    if book.rating:
        table.add_row("Rating", str(book.rating))
    if book.annotation:
        table.add_row("Annotation", book.annotation)
    if book.date_added is not None:
        table.add_row("Added", book.date_added.date().isoformat())
    table.add_row("Updated", book.updated_at)

    console.print(table)
