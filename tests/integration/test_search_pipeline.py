# ABOUTME: Integration tests for the full search pipeline with a real database cache.
# ABOUTME: Variations fan out to several sources, then results are scored and ranked.

import sqlite3

from shelfmatch.metadata.cache import SearchCache
from shelfmatch.metadata.search import search_metadata
from shelfmatch.metadata.types import MediaType
from tests.fixtures.fakes import StaticSource, make_candidate

DUNE = make_candidate(
    "Dune",
    source="open_library",
    source_id="OL893415W",
    author="Frank Herbert",
    description="Desert planet.",
    cover_url="https://covers.openlibrary.org/b/id/1-L.jpg",
)


class TestSearchPipeline:
    """End-to-end search_metadata runs over in-memory sources."""

    def test_single_match_is_auto_applied(self) -> None:
        books = StaticSource("open_library", {"dune": [DUNE]})
        manga = StaticSource("anilist", media_types=frozenset({MediaType.MANGA}))

        result = search_metadata("Dune", author="Frank Herbert", sources=[books, manga])

        assert result is not None
        assert result.search_query_used == "dune"
        assert result.decision is not None
        assert result.decision.apply is True
        assert result.decision.candidate.source_id == "OL893415W"
        assert manga.queries == books.queries

    def test_query_used_is_the_first_variation_even_when_a_later_one_wins(self) -> None:
        messiah = make_candidate(
            "The Dune Messiah", source="open_library", source_id="OL893526W"
        )
        books = StaticSource("open_library", {"dune messiah": [messiah]})

        result = search_metadata("The Dune Messiah", sources=[books])

        assert books.queries[:2] == ["the dune messiah", "dune messiah"]
        assert result is not None
        assert result.ranked_candidates[0].candidate.source_id == "OL893526W"
        assert result.search_query_used == "the dune messiah"

    def test_anime_never_ranks(self) -> None:
        anime = StaticSource(
            "kitsu",
            default=[make_candidate("One Piece", source="kitsu", media_type=MediaType.ANIME)],
            media_types=frozenset({MediaType.ANIME}),
        )
        assert search_metadata("One Piece", sources=[anime]) is None

    def test_failing_source_does_not_hide_others(self) -> None:
        broken = StaticSource("loc", error=ConnectionError("down"))
        books = StaticSource("open_library", {"dune": [DUNE]})

        result = search_metadata("Dune", sources=[broken, books])

        assert result is not None
        assert result.ranked_candidates[0].candidate.title == "Dune"

    def test_weak_matches_are_dropped(self) -> None:
        source = StaticSource("open_library", default=[make_candidate("Cooking for One")])
        assert search_metadata("Dune", sources=[source]) is None

    def test_every_variation_is_scored_against_the_title(self) -> None:
        """A hit found via the acronym expansion still scores against "lotr"."""
        source = StaticSource(
            "open_library",
            {"lord of the rings": [make_candidate("The Lord of the Rings")]},
        )
        result = search_metadata("LOTR", sources=[source])
        assert source.queries == ["lotr", "lord of the rings"]
        assert result is None

    def test_empty_title_searches_nothing(self) -> None:
        source = StaticSource("open_library", default=[DUNE])
        assert search_metadata("!!!", sources=[source]) is None
        assert source.queries == []

    def test_cache_serves_repeat_searches(self, conn: sqlite3.Connection) -> None:
        books = StaticSource("open_library", {"dune": [DUNE]})
        cache = SearchCache(conn, clock=lambda: 1_700_000_000)

        first = search_metadata("Dune", sources=[books], cache=cache)
        second = search_metadata("Dune", sources=[books], cache=cache)

        assert books.queries == ["dune"]
        assert first is not None
        assert second is not None
        assert second.ranked_candidates == first.ranked_candidates

    def test_expired_cache_queries_again(self, conn: sqlite3.Connection) -> None:
        books = StaticSource("open_library", {"dune": [DUNE]})
        now = [1_700_000_000]
        cache = SearchCache(conn, ttl_seconds=60, clock=lambda: now[0])

        search_metadata("Dune", sources=[books], cache=cache)
        now[0] += 61
        search_metadata("Dune", sources=[books], cache=cache)

        assert books.queries == ["dune", "dune"]
