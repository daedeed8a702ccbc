# ABOUTME: Core data structures for the metadata resolution pipeline.
# ABOUTME: Candidates, ranked results, decisions, and per-book manual-edit flags.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MediaType(str, Enum):
    """Coarse classification of what a provider thinks an item is."""

    BOOK = "book"
    MANGA = "manga"
    ANIME = "anime"


@dataclass(frozen=True)
class MetadataCandidate:
    """One provider's proposed identification of a book, comic, or manga.

    Produced by a source adapter from a single response item and never
    modified afterwards. ``title_alternatives`` is ordered and may repeat
    ``title``; the scorer compares against all of them.
    """

    source: str
    source_id: str
    media_type: MediaType
    title: str
    title_alternatives: tuple[str, ...] = ()
    author: str | None = None
    description: str | None = None
    cover_url: str | None = None
    year: int | None = None
    language: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation."""
        return {
            "source": self.source,
            "source_id": self.source_id,
            "media_type": self.media_type.value,
            "title": self.title,
            "title_alternatives": list(self.title_alternatives),
            "author": self.author,
            "description": self.description,
            "cover_url": self.cover_url,
            "year": self.year,
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetadataCandidate":
        """Rebuild a candidate from ``to_dict`` output.

        Unknown media types fall back to BOOK.
        """
        try:
            media_type = MediaType(data.get("media_type", MediaType.BOOK.value))
        except ValueError:
            media_type = MediaType.BOOK
        return cls(
            source=data["source"],
            source_id=data.get("source_id") or "",
            media_type=media_type,
            title=data["title"],
            title_alternatives=tuple(data.get("title_alternatives") or ()),
            author=data.get("author"),
            description=data.get("description"),
            cover_url=data.get("cover_url"),
            year=data.get("year"),
            language=data.get("language"),
        )


@dataclass
class RankedCandidate:
    """A candidate paired with its 0-100 confidence score."""

    candidate: MetadataCandidate
    score: float


@dataclass
class MetadataDecision:
    """Whether to apply a candidate automatically.

    ``confirmed`` means the score met the auto-apply threshold; ``apply``
    currently always mirrors it.
    """

    apply: bool
    confirmed: bool
    score: float
    candidate: MetadataCandidate


@dataclass
class SearchResult:
    """Terminal output of one resolution attempt."""

    ranked_candidates: list[RankedCandidate] = field(default_factory=list)
    search_query_used: str = ""
    decision: MetadataDecision | None = None


@dataclass
class BookMetadataState:
    """Per-book flags recording which fields the user edited by hand."""

    author_manually_edited: bool = False
    description_manually_edited: bool = False
    cover_manually_edited: bool = False
    title_manually_edited: bool = False
