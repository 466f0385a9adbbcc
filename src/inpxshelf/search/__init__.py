# ABOUTME: Search package: query parsing, FTS5 expression building, and SQL assembly.
# ABOUTME: Exports the filter/result types and the compiler entry points.

from inpxshelf.search.query import (
    ParsedQuery,
    build_fts_expression,
    parse_query,
    prepare_fts_search,
)
from inpxshelf.search.sql import SearchStatement, build_search_sql
from inpxshelf.search.tokenizer import tokenize, unique_tokens
from inpxshelf.search.types import BookFilter, BookList

__all__ = [
    "BookFilter",
    "BookList",
    "ParsedQuery",
    "SearchStatement",
    "build_fts_expression",
    "build_search_sql",
    "parse_query",
    "prepare_fts_search",
    "tokenize",
    "unique_tokens",
]
