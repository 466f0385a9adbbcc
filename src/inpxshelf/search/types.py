# ABOUTME: Query-time filter and paginated result types for book search.
# ABOUTME: BookFilter goes into LibraryCatalog.search; BookList comes back out.

from dataclasses import dataclass, field
from typing import Any

from inpxshelf.metadata.types import Book

DEFAULT_LIMIT = 30

SORT_KEYS = ("title", "year", "date_added", "relevance")


@dataclass
class BookFilter:
    """Search and filter parameters for LibraryCatalog.search.

    Name lists are exact matches against the dimension names. ``year_from``
    and ``year_to`` are ignored when zero. Unknown ``sort_by`` values sort by
    title; anything but ``desc`` in ``sort_order`` sorts ascending.

    ``relevance`` is ordered by relevance itself, not by the raw rank value:
    an empty order or ``desc`` gives the best matches first, ``asc`` gives
    the weakest matches first.
    """

    query: str = ""
    authors: list[str] = field(default_factory=list)
    series: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    formats: list[str] = field(default_factory=list)
    year_from: int = 0
    year_to: int = 0
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sort_by: str = ""
    sort_order: str = ""

    def sanitized_paging(self) -> tuple[int, int]:
        """Return ``(limit, offset)`` with defaults applied."""
        limit = self.limit if self.limit > 0 else DEFAULT_LIMIT
        offset = max(self.offset, 0)
        return limit, offset


@dataclass
class BookList:
    """One page of search results plus the total match count."""

    books: list[Book]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "books": [book.to_dict() for book in self.books],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "has_more": self.has_more,
        }
