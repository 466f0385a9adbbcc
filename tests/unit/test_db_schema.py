# ABOUTME: Unit tests for database schema creation and connection management.
# ABOUTME: Validates tables, indexes, the FTS5 index, WAL mode, and default paths.

import sqlite3
from pathlib import Path

import pytest

from inpxshelf.db.connection import DEFAULT_DB_PATH, DatabaseOpenError, open_library


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "test_library.db"


def _table_names(conn: sqlite3.Connection) -> set[str]:
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    return {row[0] for row in cursor.fetchall()}


class TestOpenLibrary:
    """Tests for open_library() connection factory."""

    def test_creates_database_file(self, db_path: Path) -> None:
        conn = open_library(db_path)
        conn.close()
        assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        nested = tmp_path / "deep" / "nested" / "library.db"
        conn = open_library(nested)
        conn.close()
        assert nested.exists()

    def test_creates_all_tables(self, db_path: Path) -> None:
        conn = open_library(db_path)
        names = _table_names(conn)
        conn.close()

        for table in ("books", "authors", "series", "genres", "book_authors", "books_fts"):
            assert table in names

    def test_books_columns(self, db_path: Path) -> None:
        conn = open_library(db_path)
        columns = {row[1] for row in conn.execute("PRAGMA table_info(books)").fetchall()}
        conn.close()

        assert columns == {
            "id",
            "title",
            "series_id",
            "series_num",
            "genre_id",
            "year",
            "language",
            "file_size",
            "archive_path",
            "file_num",
            "format",
            "date_added",
            "rating",
            "annotation",
            "created_at",
            "updated_at",
        }

    def test_fts_table_is_fts5(self, db_path: Path) -> None:
        conn = open_library(db_path)
        row = conn.execute(
            "SELECT sql FROM sqlite_master WHERE type='table' AND name='books_fts'"
        ).fetchone()
        conn.close()
        assert row is not None
        assert "fts5" in row[0].lower()

    def test_dimension_names_are_unique(self, db_path: Path) -> None:
        conn = open_library(db_path)
        conn.execute("INSERT INTO authors (name) VALUES ('Umberto Eco')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO authors (name) VALUES ('Umberto Eco')")
        conn.close()

    def test_creates_schema_version(self, db_path: Path) -> None:
        conn = open_library(db_path)
        row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
        conn.close()
        assert row[0] == 1

    def test_creates_indexes(self, db_path: Path) -> None:
        conn = open_library(db_path)
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND tbl_name='books'"
        )
        index_names = {row[0] for row in cursor.fetchall()}
        conn.close()

        assert "idx_books_title" in index_names
        assert "idx_books_year" in index_names
        assert "idx_books_series" in index_names

    def test_default_path(self) -> None:
        """Default path resolves to ~/.inpxshelf/library.db."""
        assert Path.home() / ".inpxshelf" / "library.db" == DEFAULT_DB_PATH

    def test_reopen_existing_database(self, db_path: Path) -> None:
        """Opening an existing DB does not recreate or destroy data."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO books (id, title) VALUES ('b1', 'Test Book')")
        conn.commit()
        conn.close()

        conn2 = open_library(db_path)
        row = conn2.execute("SELECT title FROM books").fetchone()
        version_rows = conn2.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
        conn2.close()
        assert row[0] == "Test Book"
        assert version_rows == 1

    def test_connection_is_wal_mode(self, db_path: Path) -> None:
        conn = open_library(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_foreign_keys_enabled(self, db_path: Path) -> None:
        conn = open_library(db_path)
        enabled = conn.execute("PRAGMA foreign_keys").fetchone()[0]
        conn.close()
        assert enabled == 1

    def test_connection_has_row_factory(self, db_path: Path) -> None:
        conn = open_library(db_path)
        assert conn.row_factory == sqlite3.Row
        conn.close()

    def test_not_a_database(self, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.db"
        bogus.write_bytes(b"this is not an sqlite file" * 100)
        with pytest.raises(DatabaseOpenError, match="bogus.db"):
            open_library(bogus)
