# ABOUTME: Unit tests for the per-source search result cache.
# ABOUTME: Uses an injected clock to test expiry without sleeping.

import logging
import sqlite3

import pytest

from shelfmatch.metadata.cache import (
    DEFAULT_CACHE_TTL_SECS,
    CachedResult,
    SearchCache,
    cache_key,
)
from shelfmatch.metadata.types import MediaType
from tests.fixtures.fakes import make_candidate


class FakeClock:
    """Settable clock returning unix seconds."""

    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCachedResult:
    """Tests for CachedResult.is_expired."""

    def test_not_expired_at_ttl(self) -> None:
        cached = CachedResult(source="s", results_json="[]", cached_at=1000)
        assert not cached.is_expired(60, 1060)

    def test_expired_after_ttl(self) -> None:
        cached = CachedResult(source="s", results_json="[]", cached_at=1000)
        assert cached.is_expired(60, 1061)

    def test_default_ttl_is_a_week(self) -> None:
        assert DEFAULT_CACHE_TTL_SECS == 7 * 24 * 3600


class TestSearchCache:
    """Tests for SearchCache."""

    def test_miss_returns_none(self, conn: sqlite3.Connection) -> None:
        assert SearchCache(conn).get("open_library", "dune") is None

    def test_round_trip_preserves_candidates(self, conn: sqlite3.Connection) -> None:
        cache = SearchCache(conn, clock=FakeClock())
        candidates = [
            make_candidate("Berserk", media_type=MediaType.MANGA, year=1989),
            make_candidate("Berserk: The Prototype", media_type=MediaType.MANGA),
        ]
        cache.put("jikan", "berserk", candidates)
        assert cache.get("jikan", "berserk") == candidates

    def test_key_ignores_case_and_spacing(self, conn: sqlite3.Connection) -> None:
        cache = SearchCache(conn, clock=FakeClock())
        cache.put("loc", "Sao Paulo", [make_candidate("Sao Paulo")])
        assert cache.get("loc", "  sao   PAULO ") is not None

    def test_edition_phrases_stay_in_the_key(self, conn: sqlite3.Connection) -> None:
        """A "title author" query is not merged with the bare title."""
        cache = SearchCache(conn, clock=FakeClock())
        cache.put("loc", "the musketeers", [make_candidate("The Musketeers")])
        assert cache.get("loc", "the ed 3 musketeers") is None

    def test_cache_key(self) -> None:
        assert cache_key(" One  PIECE ") == "one piece"
        assert cache_key("berserk vol 1") == "berserk vol 1"

    def test_keyed_by_source(self, conn: sqlite3.Connection) -> None:
        cache = SearchCache(conn, clock=FakeClock())
        cache.put("loc", "dune", [make_candidate("Dune")])
        assert cache.get("open_library", "dune") is None

    def test_expired_entry_is_a_miss(self, conn: sqlite3.Connection) -> None:
        clock = FakeClock()
        cache = SearchCache(conn, ttl_seconds=3600, clock=clock)
        cache.put("loc", "dune", [make_candidate("Dune")])

        clock.now += 3601
        assert cache.get("loc", "dune") is None
        assert cache.lookup("loc", "dune") is not None

    def test_put_replaces_existing_entry(self, conn: sqlite3.Connection) -> None:
        clock = FakeClock()
        cache = SearchCache(conn, ttl_seconds=3600, clock=clock)
        cache.put("loc", "dune", [make_candidate("Old")])
        clock.now += 7200
        cache.put("loc", "dune", [make_candidate("New")])

        result = cache.get("loc", "dune")
        assert result is not None
        assert [c.title for c in result] == ["New"]

    def test_unreadable_entry_is_a_miss(self, conn: sqlite3.Connection) -> None:
        clock = FakeClock()
        conn.execute(
            "INSERT INTO metadata_search_cache (source, query, results_json, cached_at) "
            "VALUES ('loc', 'dune', '{not json', ?)",
            (int(clock.now),),
        )
        conn.commit()
        assert SearchCache(conn, clock=clock).get("loc", "dune") is None

    def test_purge_expired(self, conn: sqlite3.Connection) -> None:
        clock = FakeClock()
        cache = SearchCache(conn, ttl_seconds=3600, clock=clock)
        cache.put("loc", "old", [make_candidate("Old")])
        clock.now += 3000
        cache.put("loc", "new", [make_candidate("New")])
        clock.now += 1000

        assert cache.purge_expired() == 1
        assert cache.lookup("loc", "old") is None
        assert cache.lookup("loc", "new") is not None

    def test_wrong_shape_entry_is_a_miss(
        self, conn: sqlite3.Connection, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Valid JSON that is not a list of candidate objects is discarded."""
        clock = FakeClock()
        cache = SearchCache(conn, clock=clock)
        for query, payload in (("dune", '{"a": 1}'), ("dune messiah", '["dune"]')):
            conn.execute(
                "INSERT INTO metadata_search_cache (source, query, results_json, cached_at) "
                "VALUES ('loc', ?, ?, ?)",
                (query, payload, int(clock.now)),
            )
        conn.commit()

        with caplog.at_level(logging.WARNING):
            assert cache.get("loc", "dune") is None
            assert cache.get("loc", "dune messiah") is None
        assert "Discarding unreadable cache entry" in caplog.text
