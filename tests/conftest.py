# ABOUTME: Shared pytest fixtures for inpxshelf tests.
# ABOUTME: Provides a temporary catalog, sample book entries, and INPX file builders.

import zipfile
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

import pytest

from inpxshelf.db.catalog import LibraryCatalog
from inpxshelf.db.connection import open_library
from inpxshelf.metadata.types import BookEntry


def make_entry(book_id: str, title: str, **fields) -> BookEntry:
    """Build a BookEntry with sensible defaults for the fields a test doesn't care about."""
    defaults = {
        "authors": [],
        "language": "ru",
        "file_size": 1234,
        "archive_path": "fb2-000001-100000",
        "file_num": book_id,
        "format": "fb2",
        "date": datetime(2020, 1, 15),
    }
    defaults.update(fields)
    return BookEntry(id=book_id, title=title, **defaults)


@pytest.fixture
def book_entry() -> Callable[..., BookEntry]:
    """Factory fixture for BookEntry objects."""
    return make_entry


@pytest.fixture
def catalog(tmp_path: Path) -> Iterator[LibraryCatalog]:
    """Provide an empty LibraryCatalog backed by a temporary database."""
    conn = open_library(tmp_path / "test.db")
    yield LibraryCatalog(conn)
    conn.close()


@pytest.fixture
def sample_entries() -> list[BookEntry]:
    """A small mixed-language catalog with shared authors and series."""
    return [
        make_entry(
            "test-1",
            "Невероятные приключения",
            authors=["Иван Иванов"],
            series="Хроники",
            series_num=1,
            genre="fantasy",
            year=2020,
            rating=5,
            annotation="Описание о путешествиях и открытиях.",
        ),
        make_entry(
            "rose",
            "The Name of the Rose",
            authors=["Umberto Eco"],
            genre="det_history",
            year=1980,
            language="en",
            annotation="A mystery set in a medieval Italian monastery.",
        ),
        make_entry(
            "pendulum",
            "Foucault's Pendulum",
            authors=["Umberto Eco"],
            series="Eco Novels",
            series_num=2,
            genre="prose_contemporary",
            year=1988,
            language="en",
            format="epub",
            annotation="A conspiracy thriller involving Templars.",
        ),
        make_entry(
            "link",
            "The Alexandria Link",
            authors=["Steve Berry", "Grant Blackwood"],
            series="Cotton Malone",
            series_num=2,
            genre="thriller",
            year=2007,
            language="en",
            annotation="Cotton Malone races to find the lost Library of Alexandria.",
        ),
    ]


@pytest.fixture
def loaded_catalog(catalog: LibraryCatalog, sample_entries: list[BookEntry]) -> LibraryCatalog:
    """Provide a catalog pre-loaded with sample_entries."""
    catalog.insert_books(sample_entries)
    return catalog


@pytest.fixture
def make_inpx(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder that writes an INPX zip with the given .inp members."""

    def _make(
        members: dict[str, list[str]],
        collection_info: str | None = "Test Library - 2024-01-01\n1.0\n65536\nA test collection\n",
        name: str = "library.inpx",
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            if collection_info is not None:
                archive.writestr("collection.info", collection_info)
            for member, lines in members.items():
                archive.writestr(member, "\r\n".join(lines) + "\r\n")
        return path

    return _make
