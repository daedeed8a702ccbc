# ABOUTME: Integration tests for schema migration across database lifecycle.
# ABOUTME: Validates that V1 databases upgrade correctly and support the search cache.

import sqlite3
from pathlib import Path

from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.connection import _get_schema_version, open_library
from shelfmatch.db.schema import SCHEMA_V1
from shelfmatch.metadata.cache import SearchCache
from tests.fixtures.fakes import make_candidate


class TestMigrationLifecycle:
    """Integration tests for the migration pipeline."""

    def test_v1_db_with_books_migrates_and_supports_cache(self, tmp_path: Path) -> None:
        """A V1 database with existing books migrates to V2 and can cache searches."""
        db_path = tmp_path / "lifecycle.db"

        # Step 1: Create a V1 database with a book, its chapter and a log entry
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA foreign_keys=ON")
        conn.executescript(SCHEMA_V1)
        conn.execute("INSERT INTO books (title, source_path) VALUES ('Legacy Manga', '/m/l')")
        conn.execute("INSERT INTO chapters (book_id, name) VALUES (1, 'Chapter 1')")
        conn.execute(
            "INSERT INTO metadata_search_results (book_id, source, score, search_query) "
            "VALUES (1, 'anilist', 70.0, 'legacy manga')"
        )
        conn.commit()
        conn.close()

        # Step 2: Open with shelfmatch to trigger migration
        conn = open_library(db_path)
        assert _get_schema_version(conn) == 2

        # Step 3: Verify the data survived
        catalog = LibraryCatalog(conn)
        records = catalog.list_all()
        assert [r.title for r in records] == ["Legacy Manga"]
        assert [c.name for c in catalog.list_chapters(records[0].id)] == ["Chapter 1"]
        assert len(catalog.list_search_results(records[0].id)) == 1

        # Step 4: The new cache table works
        cache = SearchCache(conn, clock=lambda: 1_000)
        cache.put("anilist", "legacy manga", [make_candidate("Legacy Manga")])
        assert cache.get("anilist", "legacy manga") is not None
        conn.close()

    def test_multiple_reopens_dont_break_schema(self, tmp_path: Path) -> None:
        """Opening the database multiple times is safe and idempotent."""
        db_path = tmp_path / "reopen.db"

        for _ in range(3):
            conn = open_library(db_path)
            assert _get_schema_version(conn) == 2
            conn.close()

        conn = open_library(db_path)
        catalog = LibraryCatalog(conn)
        book_id = catalog.add_book("Reopened")
        assert catalog.get_by_id(book_id) is not None
        conn.close()

    def test_cache_survives_reopen(self, tmp_path: Path) -> None:
        """Cached results are still served after the database is reopened."""
        db_path = tmp_path / "cache.db"

        conn = open_library(db_path)
        SearchCache(conn, clock=lambda: 5_000).put("jikan", "berserk", [make_candidate("B")])
        conn.close()

        conn = open_library(db_path)
        cached = SearchCache(conn, clock=lambda: 5_060).get("jikan", "Berserk")
        conn.close()

        assert cached is not None
        assert [c.title for c in cached] == ["B"]
