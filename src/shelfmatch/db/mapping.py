# ABOUTME: Record types for catalog rows and their conversion from sqlite rows.
# ABOUTME: Books, chapters, metadata flags, and search provenance entries.

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shelfmatch.metadata.types import BookMetadataState

BOOK_COLUMNS = ("title", "author", "description", "cover_path", "source_path")


@dataclass
class BookRecord:
    """A cataloged book or comic entry."""

    id: int
    title: str
    author: str | None
    description: str | None
    cover_path: Path | None
    source_path: Path | None
    date_added: str
    date_modified: str


@dataclass
class ChapterRecord:
    """A chapter belonging to a book, in reading order."""

    id: int
    book_id: int
    volume_index: int
    chapter_index: int
    name: str
    path: Path | None


@dataclass
class SearchResultRecord:
    """One logged resolution attempt for a book."""

    id: int
    book_id: int
    source: str
    source_id: str | None
    score: float
    search_query: str
    search_date: str
    applied: bool
    confirmed: bool


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def row_to_record(row: Any) -> BookRecord:
    """Convert a books row to a BookRecord."""
    return BookRecord(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        description=row["description"],
        cover_path=_optional_path(row["cover_path"]),
        source_path=_optional_path(row["source_path"]),
        date_added=row["date_added"],
        date_modified=row["date_modified"],
    )


def row_to_chapter(row: Any) -> ChapterRecord:
    """Convert a chapters row to a ChapterRecord."""
    return ChapterRecord(
        id=row["id"],
        book_id=row["book_id"],
        volume_index=row["volume_index"],
        chapter_index=row["chapter_index"],
        name=row["name"],
        path=_optional_path(row["path"]),
    )


def row_to_flags(row: Any) -> BookMetadataState:
    """Convert a book_metadata_flags row (0/1 integers) to a BookMetadataState."""
    return BookMetadataState(
        author_manually_edited=bool(row["author_manually_edited"]),
        description_manually_edited=bool(row["description_manually_edited"]),
        cover_manually_edited=bool(row["cover_manually_edited"]),
        title_manually_edited=bool(row["title_manually_edited"]),
    )


def row_to_search_result(row: Any) -> SearchResultRecord:
    """Convert a metadata_search_results row to a SearchResultRecord."""
    return SearchResultRecord(
        id=row["id"],
        book_id=row["book_id"],
        source=row["source"],
        source_id=row["source_id"],
        score=row["score"],
        search_query=row["search_query"],
        search_date=row["search_date"],
        applied=bool(row["applied"]),
        confirmed=bool(row["confirmed"]),
    )
