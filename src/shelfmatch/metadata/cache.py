# ABOUTME: Per-provider search result cache backed by the library database.
# ABOUTME: Entries are keyed by (source, query) and expire after a TTL.

import json
import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass

from shelfmatch.metadata.types import MetadataCandidate

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECS = 7 * 24 * 3600


def cache_key(query: str) -> str:
    """Lowercased, whitespace-collapsed query.

    Edition and volume phrases are kept, so "the ed 3 musketeers" and
    "the musketeers" stay separate entries.
    """
    return " ".join(query.lower().split())


@dataclass
class CachedResult:
    """A stored provider response: serialized candidates plus the unix time it was saved."""

    source: str
    results_json: str
    cached_at: int

    def is_expired(self, ttl_seconds: int, now: int) -> bool:
        return now - self.cached_at > ttl_seconds


class SearchCache:
    """Read-through store for provider results.

    Must only be used from the thread that owns ``conn``. The clock is
    injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._conn = conn
        self._ttl = ttl_seconds
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def lookup(self, source: str, query: str) -> CachedResult | None:
        """The raw cache row for a source and query, expired or not."""
        cursor = self._conn.execute(
            "SELECT source, results_json, cached_at FROM metadata_search_cache "
            "WHERE source = ? AND query = ?",
            (source, cache_key(query)),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return CachedResult(source=row[0], results_json=row[1], cached_at=row[2])

    def get(self, source: str, query: str) -> list[MetadataCandidate] | None:
        """Cached candidates, or None on a miss, an expired entry, or unreadable data."""
        cached = self.lookup(source, query)
        if cached is None:
            return None
        if cached.is_expired(self._ttl, self._now()):
            logger.debug("Cache expired for %s %r", source, query)
            return None

        try:
            items = json.loads(cached.results_json)
            if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
                raise ValueError("expected a list of candidate objects")
            candidates = [MetadataCandidate.from_dict(item) for item in items]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Discarding unreadable cache entry for %s %r: %s", source, query, exc)
            return None

        logger.debug("Cache hit for %s %r (%d candidates)", source, query, len(candidates))
        return candidates

    def put(self, source: str, query: str, candidates: list[MetadataCandidate]) -> None:
        """Store (or replace) the candidates a source returned for a query."""
        results_json = json.dumps([c.to_dict() for c in candidates], ensure_ascii=False)
        self._conn.execute(
            "INSERT OR REPLACE INTO metadata_search_cache "
            "(source, query, results_json, cached_at) VALUES (?, ?, ?, ?)",
            (source, cache_key(query), results_json, self._now()),
        )
        self._conn.commit()

    def purge_expired(self) -> int:
        """Delete expired entries.

        Returns:
            The number of rows removed.
        """
        cursor = self._conn.execute(
            "DELETE FROM metadata_search_cache WHERE ? - cached_at > ?",
            (self._now(), self._ttl),
        )
        self._conn.commit()
        return cursor.rowcount
