# ABOUTME: Assembles parameterized SQL for book search and its matching count query.
# ABOUTME: Joins, predicates, and arguments are collected once and rendered twice.

from dataclasses import dataclass, field
from typing import Any

from inpxshelf.search.query import prepare_fts_search
from inpxshelf.search.types import BookFilter

# Column list shared by every query that hydrates a Book via row_to_book.
BOOK_SELECT_COLUMNS = (
    "b.id, b.title, b.series_id, b.series_num, b.genre_id, b.year, "
    "b.language, b.file_size, b.archive_path, b.file_num, b.format, "
    "b.date_added, b.rating, b.annotation, b.created_at, b.updated_at, "
    "s.name AS series_name, g.name AS genre_name"
)

_SORT_COLUMNS = {
    "title": "b.title",
    "year": "b.year",
    "date_added": "b.date_added",
}

_AUTHOR_JOINS = (
    "LEFT JOIN book_authors ba ON b.id = ba.book_id",
    "LEFT JOIN authors a ON ba.author_id = a.id",
)


@dataclass
class SearchStatement:
    """Structured search query: the page query and count query share everything here."""

    joins: list[str] = field(
        default_factory=lambda: [
            "LEFT JOIN series s ON b.series_id = s.id",
            "LEFT JOIN genres g ON b.genre_id = g.id",
        ]
    )
    predicates: list[str] = field(default_factory=list)
    args: list[Any] = field(default_factory=list)
    joined_authors: bool = False
    has_fts: bool = False

    def join_authors(self) -> None:
        """Add the book_authors/authors join pair, at most once."""
        if not self.joined_authors:
            self.joins.extend(_AUTHOR_JOINS)
            self.joined_authors = True

    def where(self, predicate: str, *args: Any) -> None:
        self.predicates.append(predicate)
        self.args.extend(args)

    def where_in(self, column: str, values: list[Any]) -> None:
        if not values:
            return
        placeholders = ", ".join("?" for _ in values)
        self.where(f"{column} IN ({placeholders})", *values)

    def _from_clause(self) -> str:
        sql = " FROM books b"
        for join in self.joins:
            sql += " " + join
        if self.predicates:
            sql += " WHERE " + " AND ".join(self.predicates)
        return sql

    def render_query(self, order_by: str, limit: int, offset: int) -> tuple[str, list[Any]]:
        sql = "SELECT " + BOOK_SELECT_COLUMNS + self._from_clause()
        # One row per matching author otherwise
        if self.joined_authors:
            sql += " GROUP BY b.id"
        sql += " ORDER BY " + order_by + " LIMIT ? OFFSET ?"
        return sql, [*self.args, limit, offset]

    def render_count(self) -> tuple[str, list[Any]]:
        return "SELECT COUNT(DISTINCT b.id)" + self._from_clause(), list(self.args)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally with ESCAPE '\\'."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_order_clause(sort_by: str, sort_order: str, has_fts: bool) -> str:
    """Resolve the requested sort into an ORDER BY expression list.

    No explicit sort plus an active full-text match means relevance first.
    ``b.id`` breaks ties so paging is stable.
    """
    sort_key = (sort_by or "").lower()
    order = (sort_order or "").lower()
    if not sort_key and has_fts:
        sort_key = "relevance"

    if sort_key == "relevance" and has_fts:
        # Relevance defaults to descending. FTS5 rank is bm25, where lower
        # means more relevant, so descending relevance is ascending rank.
        if order == "desc" or not order:
            return "books_fts.rank ASC, b.id ASC"
        return "books_fts.rank DESC, b.id ASC"

    column = _SORT_COLUMNS.get(sort_key, "b.title")
    direction = "DESC" if order == "desc" else "ASC"
    return f"{column} {direction}, b.id ASC"


def build_search_sql(
    book_filter: BookFilter,
) -> tuple[str, list[Any], str, list[Any]]:
    """Build ``(query_sql, query_args, count_sql, count_args)`` for a filter.

    The page query gets LIMIT/OFFSET and, when authors are joined, a GROUP BY
    on the book id. The count query uses the same joins and predicates with
    COUNT(DISTINCT b.id) instead.
    """
    limit, offset = book_filter.sanitized_paging()
    stmt = SearchStatement()

    if book_filter.query.strip():
        expression, fallback = prepare_fts_search(book_filter.query)
        if expression:
            stmt.has_fts = True
            stmt.joins.append("JOIN books_fts ON books_fts.book_id = b.id")
            stmt.where("books_fts MATCH ?", expression)
        elif fallback:
            stmt.join_authors()
            like = f"%{escape_like(fallback.lower())}%"
            stmt.where(
                "(LOWER(b.title) LIKE ? ESCAPE '\\' "
                "OR LOWER(b.annotation) LIKE ? ESCAPE '\\' "
                "OR LOWER(a.name) LIKE ? ESCAPE '\\' "
                "OR LOWER(s.name) LIKE ? ESCAPE '\\')",
                like, like, like, like,
            )

    if book_filter.authors:
        stmt.join_authors()
        stmt.where_in("a.name", book_filter.authors)
    stmt.where_in("s.name", book_filter.series)
    stmt.where_in("g.name", book_filter.genres)
    stmt.where_in("b.language", book_filter.languages)
    stmt.where_in("b.format", book_filter.formats)

    if book_filter.year_from > 0:
        stmt.where("b.year >= ?", book_filter.year_from)
    if book_filter.year_to > 0:
        stmt.where("b.year <= ?", book_filter.year_to)

    order_by = build_order_clause(book_filter.sort_by, book_filter.sort_order, stmt.has_fts)
    query_sql, query_args = stmt.render_query(order_by, limit, offset)
    count_sql, count_args = stmt.render_count()
    return query_sql, query_args, count_sql, count_args
