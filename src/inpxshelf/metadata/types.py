# ABOUTME: Core data structures for books, their dimensions, and INPX collections.
# ABOUTME: BookEntry is the interchange format between the INPX reader and the catalog.

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class BookEntry:
    """One book as listed in an INPX index, before normalization.

    Authors are plain display names. The genre is kept as the raw field
    from the index, which may join several genre codes with ``:``.
    """

    id: str
    title: str
    authors: list[str] = field(default_factory=list)
    series: str = ""
    series_num: int = 0
    genre: str = ""
    year: int = 0
    language: str = ""
    file_size: int = 0
    archive_path: str = ""
    file_num: str = ""
    format: str = ""
    date: datetime | None = None
    rating: int = 0
    annotation: str = ""


@dataclass
class CollectionInfo:
    """Header of an INPX collection, taken from its collection.info member."""

    name: str
    version: str
    description: str
    date: str = ""


@dataclass
class Author:
    id: int
    name: str


@dataclass
class Series:
    id: int
    name: str


@dataclass
class Genre:
    id: int
    name: str


@dataclass
class Book:
    """A cataloged book with its dimension rows resolved.

    ``authors`` is always a list, ordered by name. ``series`` and ``genre``
    are None when the book has no such reference.
    """

    id: str
    title: str
    authors: list[Author] = field(default_factory=list)
    series: Series | None = None
    series_num: int = 0
    genre: Genre | None = None
    year: int = 0
    language: str = ""
    file_size: int = 0
    archive_path: str = ""
    file_num: str = ""
    format: str = ""
    date_added: datetime | None = None
    rating: int = 0
    annotation: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def author(self) -> str:
        """Convenience property: joined author names for display."""
        return ", ".join(a.name for a in self.authors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, leaving out absent series and genre."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "authors": [{"id": a.id, "name": a.name} for a in self.authors],
            "series_num": self.series_num,
            "year": self.year,
            "language": self.language,
            "file_size": self.file_size,
            "archive_path": self.archive_path,
            "file_num": self.file_num,
            "format": self.format,
            "date_added": self.date_added.isoformat() if self.date_added else None,
            "rating": self.rating,
            "annotation": self.annotation,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.series is not None:
            data["series"] = {"id": self.series.id, "name": self.series.name}
        if self.genre is not None:
            data["genre"] = {"id": self.genre.id, "name": self.genre.name}
        return data
