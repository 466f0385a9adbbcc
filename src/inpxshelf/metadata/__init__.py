# ABOUTME: Metadata package for books, their dimensions, and INPX collection records.
# ABOUTME: Exports the dataclasses shared by the reader, the catalog, and search.

from inpxshelf.metadata.types import Author, Book, BookEntry, CollectionInfo, Genre, Series

__all__ = [
    "Author",
    "Book",
    "BookEntry",
    "CollectionInfo",
    "Genre",
    "Series",
]
