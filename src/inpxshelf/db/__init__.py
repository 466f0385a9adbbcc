# ABOUTME: Public API for the inpxshelf library database layer.
# ABOUTME: Exports connection management, catalog operations, and error types.

from inpxshelf.db.catalog import CatalogError, FreshnessFlag, LibraryCatalog
from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library

__all__ = [
    "DEFAULT_DB_PATH",
    "DatabaseOpenError",
    "CatalogError",
    "FreshnessFlag",
    "LibraryCatalog",
    "open_library",
]
