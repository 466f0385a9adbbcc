# ABOUTME: CLI package for inpxshelf, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from inpxshelf.cli.commands import info_cmd, ls_cmd, reindex_cmd, search_cmd


@click.group()
@click.version_option(package_name="inpxshelf")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show progress logging.")
def cli(verbose: bool) -> None:
    """inpxshelf - search and browse an INPX e-book library."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


cli.add_command(reindex_cmd.reindex)
cli.add_command(search_cmd.search)
cli.add_command(info_cmd.info)
cli.add_command(ls_cmd.ls)
