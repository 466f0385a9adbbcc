# ABOUTME: SQL DDL statements for the inpxshelf library database schema.
# ABOUTME: Defines dimension tables, books, the author junction, and the FTS5 index.

SCHEMA_V1 = """
-- Dimension tables, one row per distinct raw name
CREATE TABLE authors (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL
);

CREATE TABLE genres (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL
);

CREATE TABLE series (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL
);

-- Core book catalog table, keyed by the id from the INPX index
CREATE TABLE books (
    id           TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    series_id    INTEGER REFERENCES series(id),
    series_num   INTEGER,
    genre_id     INTEGER REFERENCES genres(id),
    year         INTEGER,
    language     TEXT,
    file_size    INTEGER,
    archive_path TEXT,
    file_num     TEXT,
    format       TEXT,
    date_added   TEXT,
    rating       INTEGER,
    annotation   TEXT,
    created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE TABLE book_authors (
    book_id   TEXT REFERENCES books(id) ON DELETE CASCADE,
    author_id INTEGER REFERENCES authors(id) ON DELETE CASCADE,
    PRIMARY KEY (book_id, author_id)
);

CREATE INDEX idx_books_title ON books(title);
CREATE INDEX idx_books_series ON books(series_id);
CREATE INDEX idx_books_genre ON books(genre_id);
CREATE INDEX idx_books_year ON books(year);
CREATE INDEX idx_books_language ON books(language);
CREATE INDEX idx_books_format ON books(format);
CREATE INDEX idx_books_date_added ON books(date_added);
CREATE INDEX idx_book_authors_author ON book_authors(author_id);

-- Denormalized search index, maintained by LibraryCatalog.insert_books
CREATE VIRTUAL TABLE books_fts USING fts5(
    book_id UNINDEXED,
    title, annotation, authors, series
);

CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
