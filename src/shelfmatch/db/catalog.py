# ABOUTME: CRUD operations for the shelfmatch library catalog.
# ABOUTME: Books, chapters, manual-edit flags, and the metadata search provenance log.

import sqlite3
from pathlib import Path

from shelfmatch.db.mapping import (
    BOOK_COLUMNS,
    BookRecord,
    ChapterRecord,
    SearchResultRecord,
    row_to_chapter,
    row_to_flags,
    row_to_record,
    row_to_search_result,
)
from shelfmatch.metadata.types import BookMetadataState

_FLAG_COLUMNS = (
    "author_manually_edited",
    "description_manually_edited",
    "cover_manually_edited",
    "title_manually_edited",
)


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed CRUD for the catalog tables."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add_book(
        self,
        title: str,
        author: str | None = None,
        description: str | None = None,
        source_path: Path | None = None,
    ) -> int:
        """Add a book to the catalog.

        Returns:
            The row ID of the inserted book.
        """
        cursor = self._conn.execute(
            "INSERT INTO books (title, author, description, source_path) VALUES (?, ?, ?, ?)",
            (title, author, description, str(source_path) if source_path else None),
        )
        self._conn.commit()
        return cursor.lastrowid  # type: ignore[return-value]

    def get_by_id(self, book_id: int) -> BookRecord | None:
        """Retrieve a book by its row ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[BookRecord]:
        """Return all books in the catalog, ordered by title."""
        cursor = self._conn.execute("SELECT * FROM books ORDER BY title")
        return [row_to_record(row) for row in cursor.fetchall()]

    def update_book(self, book_id: int, **fields: str | Path | None) -> None:
        """Update one or more columns on a cataloged book.

        Fields not passed are left as they are. Path values are stored as
        strings.

        Raises:
            ValueError: If a field is not a book column or the book_id does not exist.
        """
        if not fields:
            return

        unknown = set(fields) - set(BOOK_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown book fields: {', '.join(sorted(unknown))}")

        values = [str(v) if isinstance(v, Path) else v for v in fields.values()]
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        set_clause += ", date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now')"

        cursor = self._conn.execute(
            f"UPDATE books SET {set_clause} WHERE id = ?",
            [*values, book_id],
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")

    # --- Chapter operations ---

    def add_chapter(
        self,
        book_id: int,
        name: str,
        path: Path | None = None,
        volume_index: int = 0,
        chapter_index: int = 0,
    ) -> int:
        """Attach a chapter to a book.

        Raises:
            ValueError: If the book_id does not exist.
        """
        if self.get_by_id(book_id) is None:
            raise ValueError(f"Book with id {book_id} not found")

        cursor = self._conn.execute(
            "INSERT INTO chapters (book_id, volume_index, chapter_index, name, path) "
            "VALUES (?, ?, ?, ?, ?)",
            (book_id, volume_index, chapter_index, name, str(path) if path else None),
        )
        self._conn.commit()
        return cursor.lastrowid  # type: ignore[return-value]

    def list_chapters(self, book_id: int) -> list[ChapterRecord]:
        """Chapters of a book ordered by volume, then chapter index."""
        cursor = self._conn.execute(
            "SELECT * FROM chapters WHERE book_id = ? "
            "ORDER BY volume_index, chapter_index, id",
            (book_id,),
        )
        return [row_to_chapter(row) for row in cursor.fetchall()]

    # --- Manual-edit flags ---

    def get_metadata_flags(self, book_id: int) -> BookMetadataState:
        """Manual-edit flags for a book; a book with no flags row has none set."""
        cursor = self._conn.execute(
            "SELECT * FROM book_metadata_flags WHERE book_id = ?", (book_id,)
        )
        row = cursor.fetchone()
        return row_to_flags(row) if row else BookMetadataState()

    def set_metadata_flags(self, book_id: int, state: BookMetadataState) -> None:
        """Record manual edits. Flags are sticky: a set flag is never cleared here."""
        values = [int(getattr(state, column)) for column in _FLAG_COLUMNS]
        updates = ", ".join(
            f"{column} = MAX({column}, excluded.{column})" for column in _FLAG_COLUMNS
        )
        self._conn.execute(
            f"INSERT INTO book_metadata_flags (book_id, {', '.join(_FLAG_COLUMNS)}) "
            f"VALUES (?, ?, ?, ?, ?) "
            f"ON CONFLICT(book_id) DO UPDATE SET {updates}",
            [book_id, *values],
        )
        self._conn.commit()

    # --- Search provenance ---

    def insert_search_result(
        self,
        book_id: int,
        source: str,
        source_id: str | None,
        score: float,
        search_query: str,
        applied: bool,
        confirmed: bool,
    ) -> int:
        """Log one resolution attempt for a book.

        Returns:
            The row ID of the log entry.
        """
        cursor = self._conn.execute(
            "INSERT INTO metadata_search_results "
            "(book_id, source, source_id, score, search_query, applied, confirmed) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (book_id, source, source_id, score, search_query, int(applied), int(confirmed)),
        )
        self._conn.commit()
        return cursor.lastrowid  # type: ignore[return-value]

    def list_search_results(self, book_id: int) -> list[SearchResultRecord]:
        """Logged attempts for a book, oldest first."""
        cursor = self._conn.execute(
            "SELECT * FROM metadata_search_results WHERE book_id = ? ORDER BY id",
            (book_id,),
        )
        return [row_to_search_result(row) for row in cursor.fetchall()]
