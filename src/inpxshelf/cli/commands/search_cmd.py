# ABOUTME: The `inpxshelf search` command for field-aware full-text search of the catalog.
# ABOUTME: Accepts author:/title:/series:/annotation: qualifiers plus structured filters.

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inpxshelf.cli.options import db_option, limit_option, offset_option
from inpxshelf.db.catalog import CatalogError, LibraryCatalog
from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library
from inpxshelf.search.types import SORT_KEYS, BookFilter, BookList

console = Console()


@click.command("search")
@click.argument("query", required=False, default="")
@click.option("--author", "authors", multiple=True, help="Exact author name (repeatable).")
@click.option("--series", "series", multiple=True, help="Exact series name (repeatable).")
@click.option("--genre", "genres", multiple=True, help="Exact genre name (repeatable).")
@click.option("--lang", "languages", multiple=True, help="Language code (repeatable).")
@click.option("--format", "formats", multiple=True, help="File format, e.g. fb2 (repeatable).")
@click.option("--year-from", type=int, default=0, help="Earliest year, inclusive.")
@click.option("--year-to", type=int, default=0, help="Latest year, inclusive.")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(SORT_KEYS, case_sensitive=False),
    default=None,
    help="Sort key (default: title, or relevance for text queries).",
)
@click.option("--desc", is_flag=True, default=False, help="Reverse the sort order.")
@click.option("--json", "json_output", is_flag=True, default=False, help="Output results as JSON.")
@limit_option
@offset_option
@db_option
def search(
    query: str,
    authors: tuple[str, ...],
    series: tuple[str, ...],
    genres: tuple[str, ...],
    languages: tuple[str, ...],
    formats: tuple[str, ...],
    year_from: int,
    year_to: int,
    sort_by: str | None,
    desc: bool,
    json_output: bool,
    limit: int,
    offset: int,
    db_path: Path | None,
) -> None:
    """Search the catalog by title, author, series, or annotation."""
    book_filter = BookFilter(
        query=query,
        authors=list(authors),
        series=list(series),
        genres=list(genres),
        languages=list(languages),
        formats=list(formats),
        year_from=year_from,
        year_to=year_to,
        limit=limit,
        offset=offset,
        sort_by=sort_by or "",
        sort_order="desc" if desc else "",
    )

    try:
        conn = open_library(db_path or DEFAULT_DB_PATH)
    except DatabaseOpenError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    try:
        results = LibraryCatalog(conn).search(book_filter)
    except CatalogError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    if json_output:
        click.echo(json.dumps(results.to_dict(), indent=2, ensure_ascii=False))
        return

    _print_rich(results)


def _print_rich(results: BookList) -> None:
    if not results.books:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Series")
    table.add_column("Year", width=5)
    table.add_column("Lang", width=5)

    for book in results.books:
        series_display = ""
        if book.series is not None:
            series_display = book.series.name
            if book.series_num:
                series_display += f" #{book.series_num}"

        table.add_row(
            book.id,
            book.title,
            book.author or "[dim]unknown[/dim]",
            series_display,
            str(book.year) if book.year else "",
            book.language or "?",
        )

    console.print(table)
    first = results.offset + 1
    last = results.offset + len(results.books)
    more = ", more available" if results.has_more else ""
    console.print(f"\n[dim]{first}-{last} of {results.total} result(s){more}[/dim]")
