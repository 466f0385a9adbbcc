# ABOUTME: Full catalog rebuild from an INPX index.
# ABOUTME: Parses the index, clears the catalog, and bulk-inserts every book with timings.

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from inpxshelf.db.catalog import LibraryCatalog
from inpxshelf.formats.inpx import read_inpx
from inpxshelf.metadata.types import CollectionInfo

logger = logging.getLogger(__name__)


class InpxPathError(Exception):
    """Raised when the INPX path given for a reindex is unusable."""


class InpxPathEmptyError(InpxPathError):
    """Raised when no INPX path was configured."""


class InpxNotFoundError(InpxPathError):
    """Raised when the INPX file does not exist."""


@dataclass
class ReindexResult:
    """Summary of a reindex run. Durations are in seconds."""

    imported: int
    collection: CollectionInfo | None
    duration: float
    parse_duration: float
    clear_duration: float
    insert_duration: float


def reindex_from_inpx(catalog: LibraryCatalog, inpx_path: Path | None) -> ReindexResult:
    """Replace the whole catalog with the contents of an INPX file.

    Parsing happens before anything is deleted, so a broken file leaves the
    existing catalog untouched.

    Args:
        catalog: The library catalog to rebuild.
        inpx_path: Path to the .inpx file.

    Returns:
        A ReindexResult with the imported count and per-phase timings.

    Raises:
        InpxPathEmptyError: If no inpx_path was given.
        InpxNotFoundError: If inpx_path does not exist.
        InpxReadError: If the file cannot be parsed.
        CatalogError: If clearing or inserting fails.
    """
    if inpx_path is None:
        raise InpxPathEmptyError("INPX path is empty")
    if not inpx_path.exists():
        raise InpxNotFoundError(f"INPX file not found: {inpx_path}")

    total_start = time.monotonic()

    logger.info("Parsing INPX file %s", inpx_path)
    parse_start = time.monotonic()
    parsed = read_inpx(inpx_path)
    parse_duration = time.monotonic() - parse_start
    logger.info("Parsed %d books in %.3fs", len(parsed.books), parse_duration)

    logger.info("Clearing existing data")
    clear_start = time.monotonic()
    catalog.clear_all()
    clear_duration = time.monotonic() - clear_start
    logger.info("Cleared existing data in %.3fs", clear_duration)

    logger.info("Inserting books into database")
    insert_start = time.monotonic()
    catalog.insert_books(parsed.books)
    insert_duration = time.monotonic() - insert_start
    logger.info("Inserted books in %.3fs", insert_duration)

    return ReindexResult(
        imported=len(parsed.books),
        collection=parsed.collection,
        duration=time.monotonic() - total_start,
        parse_duration=parse_duration,
        clear_duration=clear_duration,
        insert_duration=insert_duration,
    )
