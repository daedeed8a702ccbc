# ABOUTME: Public API for the shelfmatch library database layer.
# ABOUTME: Exports connection management, catalog operations, and record types.

from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import DEFAULT_DB_PATH, library_session, open_library
from shelfmatch.db.mapping import BookRecord, ChapterRecord, SearchResultRecord

__all__ = [
    "DEFAULT_DB_PATH",
    "BookRecord",
    "ChapterRecord",
    "LibraryCatalog",
    "SearchResultRecord",
    "library_session",
    "open_library",
]
