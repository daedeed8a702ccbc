# ABOUTME: Unit tests for metadata candidate scoring logic.
# ABOUTME: Validates title/author components, weights, media-type adjustments, and clamping.

import pytest

from shelfmatch.metadata.scoring import (
    ScoreContext,
    author_score,
    looks_like_western_book,
    score_candidate,
    title_score,
)
from shelfmatch.metadata.types import MediaType
from tests.fixtures.fakes import make_candidate


class TestTitleScore:
    """Tests for the title component."""

    def test_volume_suffix_still_matches(self) -> None:
        """"One Piece Vol 01" matches a candidate titled "One Piece"."""
        candidate = make_candidate(
            "One Piece", alternatives=("One Piece", "Wan Pīsu"), media_type=MediaType.MANGA
        )
        assert title_score(candidate, "one piece") >= 90.0
        assert score_candidate(candidate, "One Piece Vol 01") > 0

    def test_containment_floor(self) -> None:
        """One title inside the other scores at least 90 even with low word overlap."""
        candidate = make_candidate("Naruto Shippuden")
        assert title_score(candidate, "naruto") == pytest.approx(90.0)

    def test_best_alternative_wins(self) -> None:
        candidate = make_candidate(
            "Shingeki no Kyojin", alternatives=("Shingeki no Kyojin", "Attack on Titan")
        )
        assert title_score(candidate, "attack on titan") == pytest.approx(100.0)

    def test_jaccard_overlap(self) -> None:
        """Partial word overlap scores by Jaccard similarity."""
        candidate = make_candidate("The Dark Tower")
        # {the, dark, tower} vs {the, gunslinger, tower}: 2 shared of 4 distinct
        assert title_score(candidate, "the gunslinger tower") == pytest.approx(50.0)

    def test_empty_search_title(self) -> None:
        assert title_score(make_candidate("Dune"), "") == 0.0


class TestAuthorScore:
    """Tests for the author component."""

    def test_contained_author(self) -> None:
        candidate = make_candidate("Dune", author="Frank Herbert")
        assert author_score(candidate, "frank herbert") == 100.0

    def test_partial_overlap(self) -> None:
        """Two of two search words present scales to 80."""
        candidate = make_candidate("A Game of Thrones", author="George R. R. Martin")
        assert author_score(candidate, "George Martin") == pytest.approx(80.0)

    def test_only_candidate_has_author(self) -> None:
        candidate = make_candidate("Dune", author="Frank Herbert")
        assert author_score(candidate, None) == 50.0

    def test_only_search_has_author(self) -> None:
        assert author_score(make_candidate("Dune"), "Frank Herbert") == 0.0

    def test_neither_has_author(self) -> None:
        assert author_score(make_candidate("Dune"), None) == 50.0


class TestScoreCandidate:
    """Tests for the weighted total."""

    def test_full_match_with_cover_and_description(self) -> None:
        """Perfect title and author with cover and description: 87.5."""
        candidate = make_candidate(
            "Dune",
            author="Frank Herbert",
            cover_url="https://example.com/dune.jpg",
            description="Spice.",
        )
        assert score_candidate(candidate, "Dune", "Frank Herbert") == pytest.approx(87.5)

    def test_bare_title_match(self) -> None:
        """Title match alone with neutral author/year/language: 65."""
        assert score_candidate(make_candidate("Dune"), "Dune") == pytest.approx(65.0)

    def test_unrelated_title_scores_low(self) -> None:
        score = score_candidate(make_candidate("Kokoro"), "War and Peace", "Leo Tolstoy")
        assert score < 55.0

    def test_manga_boost_for_cjk(self) -> None:
        candidate = make_candidate(
            "ONE PIECE", alternatives=("ONE PIECE", "ワンピース"), media_type=MediaType.MANGA
        )
        context = ScoreContext.from_search("ワンピース")
        assert score_candidate(candidate, "ワンピース", context=context) == pytest.approx(80.0)

    def test_no_manga_boost_without_cjk(self) -> None:
        candidate = make_candidate("One Piece", media_type=MediaType.MANGA)
        assert score_candidate(candidate, "One Piece") == pytest.approx(65.0)

    def test_anime_penalized_for_western_book(self) -> None:
        candidate = make_candidate("A Song of Ice and Fire", media_type=MediaType.ANIME)
        assert score_candidate(candidate, "A Song of Ice and Fire") == pytest.approx(25.0)

    def test_anime_not_penalized_for_cjk(self) -> None:
        candidate = make_candidate("ワンピース", media_type=MediaType.ANIME)
        context = ScoreContext.from_search("ワンピース")
        assert score_candidate(candidate, "ワンピース", context=context) == pytest.approx(65.0)

    def test_score_is_clamped_to_100(self) -> None:
        candidate = make_candidate(
            "ワンピース",
            media_type=MediaType.MANGA,
            author="尾田栄一郎",
            cover_url="https://example.com/op.jpg",
            description="Pirates.",
        )
        context = ScoreContext.from_search("ワンピース")
        assert score_candidate(candidate, "ワンピース", "尾田栄一郎", context) == 100.0

    def test_score_is_never_negative(self) -> None:
        candidate = make_candidate("Unrelated", media_type=MediaType.ANIME)
        assert score_candidate(candidate, "The Dragon King", "Someone") >= 0.0


class TestScoreContext:
    """Tests for ScoreContext.from_search."""

    def test_cjk_in_title(self) -> None:
        assert ScoreContext.from_search("進撃の巨人").is_cjk

    def test_cjk_in_path_only(self) -> None:
        assert ScoreContext.from_search("Berserk", "/manga/ベルセルク/v1.cbz").is_cjk

    def test_latin_only(self) -> None:
        assert not ScoreContext.from_search("Berserk", "/manga/Berserk/v1.cbz").is_cjk


class TestLooksLikeWesternBook:
    """Tests for looks_like_western_book."""

    def test_series_title(self) -> None:
        assert looks_like_western_book("a song of ice and fire")

    def test_single_word(self) -> None:
        assert not looks_like_western_book("dragon")

    def test_digits_disqualify(self) -> None:
        assert not looks_like_western_book("the 100")

    def test_no_book_words(self) -> None:
        assert not looks_like_western_book("one piece")
