# ABOUTME: The `inpxshelf reindex` command for rebuilding the catalog from an INPX file.
# ABOUTME: Clears the database and bulk-imports every book listed in the index.

from pathlib import Path

import click
from rich.console import Console

from inpxshelf.cli.options import db_option, inpx_option
from inpxshelf.core.indexer import InpxPathEmptyError, InpxPathError, reindex_from_inpx
from inpxshelf.db.catalog import CatalogError, LibraryCatalog
from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library
from inpxshelf.formats.inpx import InpxReadError

console = Console()


@click.command("reindex")
@inpx_option
@db_option
def reindex(inpx_path: Path | None, db_path: Path | None) -> None:
    """Replace the catalog with the books listed in an INPX index."""
    try:
        conn = open_library(db_path or DEFAULT_DB_PATH)
    except DatabaseOpenError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    try:
        catalog = LibraryCatalog(conn)
        result = reindex_from_inpx(catalog, inpx_path)
    except InpxPathEmptyError as exc:
        console.print("[red]No INPX path given. Use --inpx or INPXSHELF_INPX.[/red]")
        raise SystemExit(1) from exc
    except (InpxPathError, InpxReadError, CatalogError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    collection = "INPX"
    if result.collection is not None and result.collection.name:
        collection = result.collection.name

    console.print(
        f"[green]Imported {result.imported} book(s)[/green] from {collection} "
        f"in {result.duration:.2f}s"
    )
    console.print(
        f"[dim]parse {result.parse_duration:.2f}s, "
        f"clear {result.clear_duration:.2f}s, "
        f"insert {result.insert_duration:.2f}s[/dim]"
    )
