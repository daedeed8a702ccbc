# ABOUTME: Unit tests for the metadata data types.
# ABOUTME: Covers candidate serialization used by the cache and default flag state.

import dataclasses

import pytest

from shelfmatch.metadata.types import (
    BookMetadataState,
    MediaType,
    MetadataCandidate,
    SearchResult,
)


class TestMetadataCandidate:
    """Tests for MetadataCandidate."""

    def test_to_dict_is_json_safe(self) -> None:
        candidate = MetadataCandidate(
            source="jikan",
            source_id="2",
            media_type=MediaType.MANGA,
            title="Berserk",
            title_alternatives=("Berserk", "ベルセルク"),
            year=1989,
        )
        data = candidate.to_dict()
        assert data["media_type"] == "manga"
        assert data["title_alternatives"] == ["Berserk", "ベルセルク"]
        assert MetadataCandidate.from_dict(data) == candidate

    def test_from_dict_unknown_media_type_is_book(self) -> None:
        candidate = MetadataCandidate.from_dict(
            {"source": "x", "title": "Dune", "media_type": "podcast"}
        )
        assert candidate.media_type is MediaType.BOOK
        assert candidate.source_id == ""
        assert candidate.title_alternatives == ()

    def test_is_immutable(self) -> None:
        candidate = MetadataCandidate(
            source="x", source_id="1", media_type=MediaType.BOOK, title="Dune"
        )
        with pytest.raises(dataclasses.FrozenInstanceError):
            candidate.title = "Other"  # type: ignore[misc]


class TestDefaults:
    """Tests for default values."""

    def test_flags_default_to_unset(self) -> None:
        state = BookMetadataState()
        assert not any(
            (
                state.author_manually_edited,
                state.description_manually_edited,
                state.cover_manually_edited,
                state.title_manually_edited,
            )
        )

    def test_empty_search_result(self) -> None:
        result = SearchResult()
        assert result.ranked_candidates == []
        assert result.decision is None
