# ABOUTME: Shared Click options for inpxshelf CLI commands.
# ABOUTME: Each option can also be set from an INPXSHELF_* environment variable.

from pathlib import Path

import click

from inpxshelf.db.connection import DEFAULT_DB_PATH
from inpxshelf.search.types import DEFAULT_LIMIT

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="INPXSHELF_DB",
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)

inpx_option = click.option(
    "--inpx",
    "inpx_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="INPXSHELF_INPX",
    help="Path to the .inpx index file.",
)

limit_option = click.option(
    "--limit",
    type=int,
    default=DEFAULT_LIMIT,
    show_default=True,
    envvar="INPXSHELF_PAGE_SIZE",
    help="Page size.",
)

offset_option = click.option(
    "--offset",
    type=int,
    default=0,
    show_default=True,
    help="Number of rows to skip.",
)
