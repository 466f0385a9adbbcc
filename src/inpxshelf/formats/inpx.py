# ABOUTME: INPX index reading: a ZIP of .inp listings plus a collection.info header.
# ABOUTME: Skips malformed lines and turns each listing row into a BookEntry.

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath

from inpxshelf.metadata.types import BookEntry, CollectionInfo

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\x04"

# AUTHOR GENRE TITLE SERIES SERNO ID SIZE ARCHIVE FILENUM EXT DATE LANG RATING [ANNOTATION]
_MIN_FIELDS = 13


class InpxReadError(Exception):
    """Raised when an INPX file cannot be opened or its header is malformed."""


@dataclass
class InpxCatalog:
    """Everything read from one INPX file."""

    books: list[BookEntry] = field(default_factory=list)
    collection: CollectionInfo | None = None


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def parse_authors(raw: str) -> list[str]:
    """Split a comma-separated author field, dropping a trailing colon and blanks."""
    if not raw:
        return []
    raw = raw.removesuffix(":")
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_year(raw: str) -> int:
    """Take the year from the first four characters of a YYYY-MM-DD date."""
    return _to_int(raw[:4]) if len(raw) >= 4 else 0


def parse_date(raw: str) -> datetime | None:
    try:
        return datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        return None


def parse_inp_line(line: str) -> BookEntry | None:
    """Parse one listing line, or return None if it has too few fields."""
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < _MIN_FIELDS:
        return None

    annotation = parts[13] if len(parts) > 13 else ""
    return BookEntry(
        id=parts[5],
        title=parts[2],
        authors=parse_authors(parts[0]),
        series=parts[3],
        series_num=_to_int(parts[4]),
        genre=parts[1],
        year=parse_year(parts[10]),
        language=parts[11],
        file_size=_to_int(parts[6]),
        archive_path=parts[7],
        file_num=parts[8],
        format=parts[9],
        date=parse_date(parts[10]),
        rating=_to_int(parts[12]),
        annotation=annotation,
    )


def parse_inp(text: str, member_name: str) -> list[BookEntry]:
    """Parse the contents of one .inp member.

    The archive defaults to the member's stem when the line leaves it empty
    or repeats the book id. The in-archive file number is the book id.
    """
    default_archive = PurePosixPath(member_name).stem
    books = []
    for lineno, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue

        entry = parse_inp_line(line)
        if entry is None:
            logger.debug("Skipping malformed line %d in %s", lineno, member_name)
            continue

        if not entry.archive_path or entry.archive_path == entry.id:
            entry.archive_path = default_archive
        entry.file_num = entry.id
        books.append(entry)
    return books


def parse_collection_info(text: str) -> CollectionInfo:
    """Parse collection.info: name, version, (unused), description.

    Raises:
        InpxReadError: If there are fewer than four lines.
    """
    lines = text.split("\n")
    if len(lines) < 4:
        raise InpxReadError("Invalid collection.info format")

    name = lines[0].strip()
    date = ""
    if " - " in name:
        date = name.split(" - ")[-1].strip()

    return CollectionInfo(
        name=name,
        version=lines[1].strip(),
        description=lines[3].strip(),
        date=date,
    )


def read_inpx(path: Path) -> InpxCatalog:
    """Read every .inp listing and the collection header from an INPX file.

    Args:
        path: Path to the .inpx ZIP file.

    Returns:
        An InpxCatalog with all parsed books, in archive order.

    Raises:
        InpxReadError: If the file is not a readable ZIP or a member is malformed.
    """
    catalog = InpxCatalog()
    try:
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.filename.endswith(".inp"):
                    text = archive.read(info).decode("utf-8", errors="replace")
                    catalog.books.extend(parse_inp(text, info.filename))
                elif info.filename == "collection.info":
                    text = archive.read(info).decode("utf-8", errors="replace")
                    catalog.collection = parse_collection_info(text)
    except (zipfile.BadZipFile, OSError) as exc:
        raise InpxReadError(f"Cannot read INPX file {path}: {exc}") from exc

    return catalog
