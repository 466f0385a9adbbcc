# ABOUTME: SQLite database connection management for the inpxshelf catalog.
# ABOUTME: Opens or creates the database, applies schema, and configures pragmas.

import sqlite3
from pathlib import Path

from inpxshelf.db.schema import SCHEMA_V1

DEFAULT_DB_PATH = Path.home() / ".inpxshelf" / "library.db"


class DatabaseOpenError(Exception):
    """Raised when the library database cannot be opened or initialized."""


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _configure(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    if not _schema_exists(conn):
        # Fails with "no such module: fts5" on SQLite builds without FTS5
        conn.executescript(SCHEMA_V1)


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the inpxshelf library database.

    Creates the database file and parent directories if they don't exist.
    Applies the schema on first creation. Sets WAL journal mode, enables
    foreign keys, and installs the sqlite3.Row factory.

    The connection may be shared across threads; SQLite serializes writers.

    Args:
        path: Path to the database file. Defaults to ~/.inpxshelf/library.db.

    Returns:
        A configured sqlite3.Connection.

    Raises:
        DatabaseOpenError: If the file cannot be opened or the schema cannot
            be applied. No connection is left open in that case.
    """
    db_path = path or DEFAULT_DB_PATH
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DatabaseOpenError(f"Failed to create database directory: {exc}") from exc

    try:
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
    except sqlite3.Error as exc:
        raise DatabaseOpenError(f"Failed to open database {db_path}: {exc}") from exc

    try:
        _configure(conn)
    except sqlite3.Error as exc:
        conn.close()
        raise DatabaseOpenError(f"Failed to initialize schema in {db_path}: {exc}") from exc

    return conn
