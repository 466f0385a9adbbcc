# ABOUTME: Converts between BookEntry records, SQLite rows, and hydrated Book objects.
# ABOUTME: Handles nullable dimension references and ISO timestamp text columns.

from datetime import datetime
from typing import Any

from inpxshelf.metadata.types import Book, BookEntry, Genre, Series


def entry_to_row(
    entry: BookEntry,
    series_id: int | None,
    genre_id: int | None,
) -> tuple[Any, ...]:
    """Build the positional values for the books upsert statement.

    Order matches the column list of the upsert in LibraryCatalog.
    """
    return (
        entry.id,
        entry.title,
        series_id,
        entry.series_num,
        genre_id,
        entry.year,
        entry.language,
        entry.file_size,
        entry.archive_path,
        entry.file_num,
        entry.format,
        entry.date.isoformat() if entry.date else None,
        entry.rating,
        entry.annotation,
    )


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def row_to_book(row: Any) -> Book:
    """Convert a row selected with BOOK_SELECT_COLUMNS into a Book.

    Authors are not part of the row; the caller attaches them afterwards.
    """
    series = None
    if row["series_id"] is not None and row["series_name"] is not None:
        series = Series(id=row["series_id"], name=row["series_name"])

    genre = None
    if row["genre_id"] is not None and row["genre_name"] is not None:
        genre = Genre(id=row["genre_id"], name=row["genre_name"])

    return Book(
        id=row["id"],
        title=row["title"],
        series=series,
        series_num=row["series_num"] or 0,
        genre=genre,
        year=row["year"] or 0,
        language=row["language"] or "",
        file_size=row["file_size"] or 0,
        archive_path=row["archive_path"] or "",
        file_num=row["file_num"] or "",
        format=row["format"] or "",
        date_added=_parse_timestamp(row["date_added"]),
        rating=row["rating"] or 0,
        annotation=row["annotation"] or "",
        created_at=row["created_at"] or "",
        updated_at=row["updated_at"] or "",
    )
