# ABOUTME: Data access for the inpxshelf catalog: bulk import, search, and lookups.
# ABOUTME: Keeps the books_fts index in sync with books and hydrates Book aggregates.

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from typing import Any

from inpxshelf.db.mapping import entry_to_row, row_to_book
from inpxshelf.metadata.types import Author, Book, BookEntry, Genre, Series
from inpxshelf.search.sql import BOOK_SELECT_COLUMNS, build_search_sql
from inpxshelf.search.types import DEFAULT_LIMIT, BookFilter, BookList

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 50_000

# Batches at least this large get the relaxed-durability pragmas.
DEFAULT_BULK_THRESHOLD = 1_000

# Stay well under SQLITE_MAX_VARIABLE_NUMBER on older builds.
_IN_CHUNK_SIZE = 500

_UPSERT_BOOK_SQL = (
    "INSERT OR REPLACE INTO books "
    "(id, title, series_id, series_num, genre_id, year, language, "
    "file_size, archive_path, file_num, format, date_added, rating, annotation, "
    "updated_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, "
    "strftime('%Y-%m-%dT%H:%M:%S', 'now'))"
)

# (name, value) pairs applied for the duration of a bulk import.
_BULK_PRAGMAS = (
    ("synchronous", 0),
    ("temp_store", 2),
    ("cache_size", -200000),
)

# Tables cleared by clear_all, children before parents.
_CLEAR_ORDER = ("book_authors", "books", "authors", "series", "genres", "books_fts")

_DIMENSION_TABLES = ("authors", "series", "genres")


class CatalogError(Exception):
    """Raised when a catalog operation fails inside the storage engine."""


class FreshnessFlag:
    """Single-use marker that the books_fts table is known to be empty.

    Set after a successful clear_all and consumed by the next insert_books,
    which may then skip per-book index deletes.
    """

    def __init__(self) -> None:
        self._fresh = False
        self._lock = threading.Lock()

    def mark(self) -> None:
        with self._lock:
            self._fresh = True

    def consume(self) -> bool:
        """Return the current state and reset it to not fresh."""
        with self._lock:
            fresh, self._fresh = self._fresh, False
            return fresh


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides import and search over the catalog."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        bulk_threshold: int = DEFAULT_BULK_THRESHOLD,
    ) -> None:
        self._conn = conn
        self._bulk_threshold = bulk_threshold
        self._fts_fresh = FreshnessFlag()

    # --- Bulk import ---

    def insert_books(self, entries: list[BookEntry]) -> None:
        """Insert or replace books from an INPX index in one transaction.

        Authors, series and genres are created on first reference. Each book's
        author links and full-text row are rebuilt. Any failure rolls back the
        whole batch.

        Raises:
            CatalogError: If the storage engine rejects a statement.
        """
        skip_deletes = self._fts_fresh.consume()
        if not entries:
            return

        tuning = nullcontext()
        if len(entries) >= self._bulk_threshold:
            tuning = self._bulk_import_pragmas()

        with tuning:
            try:
                self._insert_all(entries, skip_deletes)
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                raise CatalogError(f"Failed to commit book import: {exc}") from exc
            except Exception:
                self._conn.rollback()
                raise

    def _insert_all(self, entries: list[BookEntry], skip_deletes: bool) -> None:
        caches: dict[str, dict[str, int]] = {table: {} for table in _DIMENSION_TABLES}
        seen_ids: set[str] = set()
        total = len(entries)

        for i, entry in enumerate(entries, start=1):
            # A repeated id within a fresh batch still has rows to replace
            fresh = skip_deletes and entry.id not in seen_ids
            seen_ids.add(entry.id)
            try:
                self._insert_book(entry, caches, fresh)
            except sqlite3.Error as exc:
                raise CatalogError(f"Failed to insert book {entry.id}: {exc}") from exc

            if i % PROGRESS_INTERVAL == 0 or i == total:
                logger.info("Inserted %d/%d books", i, total)

    def _insert_book(
        self,
        entry: BookEntry,
        caches: dict[str, dict[str, int]],
        skip_deletes: bool,
    ) -> None:
        series_id = None
        if entry.series:
            series_id = self._get_or_create("series", entry.series, caches["series"])

        genre_id = None
        if entry.genre:
            genre_id = self._get_or_create("genres", entry.genre, caches["genres"])

        self._conn.execute(_UPSERT_BOOK_SQL, entry_to_row(entry, series_id, genre_id))

        if not skip_deletes:
            self._conn.execute("DELETE FROM book_authors WHERE book_id = ?", (entry.id,))
        for name in entry.authors:
            if not name:
                continue
            author_id = self._get_or_create("authors", name, caches["authors"])
            self._conn.execute(
                "INSERT OR IGNORE INTO book_authors (book_id, author_id) VALUES (?, ?)",
                (entry.id, author_id),
            )

        if not skip_deletes:
            self._conn.execute("DELETE FROM books_fts WHERE book_id = ?", (entry.id,))
        self._conn.execute(
            "INSERT INTO books_fts (book_id, title, annotation, authors, series) "
            "VALUES (?, ?, ?, ?, ?)",
            (entry.id, entry.title, entry.annotation, " ".join(entry.authors), entry.series),
        )

    def _get_or_create(self, table: str, name: str, cache: dict[str, int]) -> int:
        """Resolve a dimension name to its id, inserting the row if needed.

        Inserts first; a UNIQUE violation means the row already exists (or
        another writer just created it) and is resolved with a lookup.
        """
        cached = cache.get(name)
        if cached is not None:
            return cached

        try:
            cursor = self._conn.execute(f"INSERT INTO {table} (name) VALUES (?)", (name,))
            row_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            row = self._conn.execute(
                f"SELECT id FROM {table} WHERE name = ?", (name,)
            ).fetchone()
            if row is None:
                raise
            row_id = row[0]

        cache[name] = row_id
        return row_id  # type: ignore[return-value]

    @contextmanager
    def _bulk_import_pragmas(self) -> Iterator[None]:
        """Relax durability and caching pragmas, restoring the prior values on exit.

        Each pragma is independent: one the engine rejects is logged and skipped.
        """
        try:
            snapshot = {name: self._read_pragma(name) for name, _ in _BULK_PRAGMAS}
            journal_mode = str(self._read_pragma("journal_mode")).lower()
        except sqlite3.Error as exc:
            logger.warning("Could not capture PRAGMA snapshot, skipping tuning: %s", exc)
            snapshot = None

        if snapshot is None:
            yield
            return

        applied = []
        for name, value in _BULK_PRAGMAS:
            try:
                self._conn.execute(f"PRAGMA {name} = {int(value)}")
            except sqlite3.Error as exc:
                logger.warning("PRAGMA %s optimization skipped: %s", name, exc)
                continue
            applied.append(name)

        journal_changed = False
        try:
            new_mode = self._set_journal_mode("memory")
        except sqlite3.Error as exc:
            logger.warning("PRAGMA journal_mode optimization skipped: %s", exc)
        else:
            journal_changed = new_mode == "memory"
            if not journal_changed:
                logger.warning("journal_mode remained %s, expected memory", new_mode)

        try:
            yield
        finally:
            if journal_changed:
                self._restore_journal_mode(journal_mode)
            for name in reversed(applied):
                self._restore_pragma(name, snapshot[name])

    def _read_pragma(self, name: str) -> Any:
        return self._conn.execute(f"PRAGMA {name}").fetchone()[0]

    def _set_journal_mode(self, mode: str) -> str:
        row = self._conn.execute(f"PRAGMA journal_mode = {mode}").fetchone()
        return str(row[0]).lower()

    def _restore_pragma(self, name: str, value: Any) -> None:
        try:
            self._conn.execute(f"PRAGMA {name} = {int(value)}")
        except sqlite3.Error as exc:
            logger.warning("Failed to restore PRAGMA %s: %s", name, exc)

    def _restore_journal_mode(self, mode: str) -> None:
        try:
            self._set_journal_mode(mode)
        except sqlite3.Error as exc:
            logger.warning("Failed to restore PRAGMA journal_mode=%s: %s", mode, exc)

    def clear_all(self) -> None:
        """Delete every book, dimension row, link, and full-text row atomically.

        Raises:
            CatalogError: If the storage engine rejects a statement.
        """
        try:
            for table in _CLEAR_ORDER:
                self._conn.execute(f"DELETE FROM {table}")
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise CatalogError(f"Failed to clear catalog: {exc}") from exc

        self._fts_fresh.mark()

    # --- Search and lookup ---

    def search(self, book_filter: BookFilter) -> BookList:
        """Run a filtered, paginated search and hydrate the matching books.

        Args:
            book_filter: Query text, structured filters, paging, and sort.

        Returns:
            A BookList whose total ignores paging.

        Raises:
            CatalogError: If the count or page query fails.
        """
        limit, offset = book_filter.sanitized_paging()
        query_sql, query_args, count_sql, count_args = build_search_sql(book_filter)

        try:
            total = self._conn.execute(count_sql, count_args).fetchone()[0]
        except sqlite3.Error as exc:
            raise CatalogError(f"Failed to count books: {exc}") from exc

        try:
            rows = self._conn.execute(query_sql, query_args).fetchall()
            books = [row_to_book(row) for row in rows]
            self._attach_authors(books)
        except sqlite3.Error as exc:
            raise CatalogError(f"Failed to execute search query: {exc}") from exc

        return BookList(books=books, total=total, limit=limit, offset=offset)

    def get_by_id(self, book_id: str) -> Book | None:
        """Retrieve a book by id, or None if there is no such book."""
        try:
            row = self._conn.execute(
                f"SELECT {BOOK_SELECT_COLUMNS} FROM books b "
                "LEFT JOIN series s ON b.series_id = s.id "
                "LEFT JOIN genres g ON b.genre_id = g.id "
                "WHERE b.id = ? LIMIT 1",
                (book_id,),
            ).fetchone()
            if row is None:
                return None
            book = row_to_book(row)
            self._attach_authors([book])
        except sqlite3.Error as exc:
            raise CatalogError(f"Failed to get book {book_id}: {exc}") from exc
        return book

    def _attach_authors(self, books: list[Book]) -> None:
        """Load authors for a page of books, ordered by name within each book."""
        by_id = {book.id: book for book in books}
        ids = list(by_id)
        for start in range(0, len(ids), _IN_CHUNK_SIZE):
            chunk = ids[start:start + _IN_CHUNK_SIZE]
            placeholders = ", ".join("?" for _ in chunk)
            cursor = self._conn.execute(
                "SELECT ba.book_id, a.id, a.name FROM authors a "
                "JOIN book_authors ba ON a.id = ba.author_id "
                f"WHERE ba.book_id IN ({placeholders}) "
                "ORDER BY a.name, a.id",
                chunk,
            )
            for row in cursor.fetchall():
                by_id[row[0]].authors.append(Author(id=row[1], name=row[2]))

    # --- Dimension listings ---

    def list_authors(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> tuple[list[Author], int]:
        """Page through authors alphabetically; returns (page, total)."""
        rows, total = self._list_dimension("authors", limit, offset)
        return [Author(id=r[0], name=r[1]) for r in rows], total

    def list_series(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> tuple[list[Series], int]:
        """Page through series alphabetically; returns (page, total)."""
        rows, total = self._list_dimension("series", limit, offset)
        return [Series(id=r[0], name=r[1]) for r in rows], total

    def list_genres(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> tuple[list[Genre], int]:
        """Page through genres alphabetically; returns (page, total)."""
        rows, total = self._list_dimension("genres", limit, offset)
        return [Genre(id=r[0], name=r[1]) for r in rows], total

    def _list_dimension(self, table: str, limit: int, offset: int) -> tuple[list[Any], int]:
        if limit <= 0:
            limit = DEFAULT_LIMIT
        offset = max(offset, 0)
        try:
            rows = self._conn.execute(
                f"SELECT id, name FROM {table} ORDER BY LOWER(name), id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
            total = self._conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        except sqlite3.Error as exc:
            raise CatalogError(f"Failed to list {table}: {exc}") from exc
        return rows, total

    def get_author(self, author_id: int) -> Author | None:
        row = self._get_dimension("authors", author_id)
        return Author(id=row[0], name=row[1]) if row else None

    def get_series(self, series_id: int) -> Series | None:
        row = self._get_dimension("series", series_id)
        return Series(id=row[0], name=row[1]) if row else None

    def get_genre(self, genre_id: int) -> Genre | None:
        row = self._get_dimension("genres", genre_id)
        return Genre(id=row[0], name=row[1]) if row else None

    def _get_dimension(self, table: str, row_id: int) -> Any:
        try:
            return self._conn.execute(
                f"SELECT id, name FROM {table} WHERE id = ?", (row_id,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise CatalogError(f"Failed to load {table} row {row_id}: {exc}") from exc
