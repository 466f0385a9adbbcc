# ABOUTME: Unit tests for BookEntry to row and row to Book mapping.
# ABOUTME: Validates column order, null dimension handling, timestamps, and Book.to_dict.

from datetime import datetime
from typing import Any

from inpxshelf.db.mapping import entry_to_row, row_to_book
from inpxshelf.metadata.types import Author, Book, BookEntry, Genre, Series


def _row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": "b1",
        "title": "The Name of the Rose",
        "series_id": None,
        "series_num": None,
        "genre_id": 4,
        "year": 1980,
        "language": "en",
        "file_size": 2048,
        "archive_path": "fb2-000001-100000",
        "file_num": "b1",
        "format": "fb2",
        "date_added": "2020-01-15T00:00:00",
        "rating": None,
        "annotation": None,
        "created_at": "2024-01-01T10:00:00",
        "updated_at": "2024-01-01T10:00:00",
        "series_name": None,
        "genre_name": "det_history",
    }
    row.update(overrides)
    return row


class TestEntryToRow:
    """Tests for entry_to_row()."""

    def test_column_order(self) -> None:
        entry = BookEntry(
            id="b1",
            title="Title",
            series_num=3,
            year=1999,
            language="ru",
            file_size=100,
            archive_path="arc",
            file_num="b1",
            format="fb2",
            date=datetime(2021, 5, 6),
            rating=4,
            annotation="Text",
        )
        assert entry_to_row(entry, 7, 9) == (
            "b1", "Title", 7, 3, 9, 1999, "ru", 100, "arc", "b1", "fb2",
            "2021-05-06T00:00:00", 4, "Text",
        )

    def test_missing_date_and_dimensions(self) -> None:
        row = entry_to_row(BookEntry(id="b2", title="T"), None, None)
        assert row[2] is None
        assert row[4] is None
        assert row[11] is None


class TestRowToBook:
    """Tests for row_to_book()."""

    def test_resolves_genre_and_skips_missing_series(self) -> None:
        book = row_to_book(_row())
        assert book.series is None
        assert book.genre == Genre(id=4, name="det_history")
        assert book.authors == []

    def test_series_present(self) -> None:
        book = row_to_book(_row(series_id=2, series_name="Cotton Malone", series_num=2))
        assert book.series == Series(id=2, name="Cotton Malone")
        assert book.series_num == 2

    def test_nulls_become_zero_values(self) -> None:
        book = row_to_book(_row())
        assert book.series_num == 0
        assert book.rating == 0
        assert book.annotation == ""

    def test_date_added_parsed(self) -> None:
        assert row_to_book(_row()).date_added == datetime(2020, 1, 15)

    def test_unparseable_date_is_none(self) -> None:
        assert row_to_book(_row(date_added="not a date")).date_added is None
        assert row_to_book(_row(date_added=None)).date_added is None


class TestBookToDict:
    """Tests for Book.to_dict() and Book.author."""

    def test_omits_absent_series_and_genre(self) -> None:
        data = Book(id="b1", title="T").to_dict()
        assert "series" not in data
        assert "genre" not in data
        assert data["authors"] == []
        assert data["date_added"] is None

    def test_nested_objects(self) -> None:
        book = Book(
            id="b1",
            title="T",
            authors=[Author(id=1, name="Grant Blackwood"), Author(id=2, name="Steve Berry")],
            series=Series(id=3, name="Cotton Malone"),
            genre=Genre(id=4, name="thriller"),
            date_added=datetime(2020, 1, 15),
        )
        data = book.to_dict()
        assert data["authors"] == [
            {"id": 1, "name": "Grant Blackwood"},
            {"id": 2, "name": "Steve Berry"},
        ]
        assert data["series"] == {"id": 3, "name": "Cotton Malone"}
        assert data["genre"] == {"id": 4, "name": "thriller"}
        assert data["date_added"] == "2020-01-15T00:00:00"
        assert book.author == "Grant Blackwood, Steve Berry"
