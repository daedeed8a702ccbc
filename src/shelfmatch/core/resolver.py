# ABOUTME: Resolves metadata for cataloged books and writes the winner back to the catalog.
# ABOUTME: Honors manual-edit flags on auto-apply, stores covers, and logs every attempt.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from shelfmatch.db.catalog import LibraryCatalog
from shelfmatch.db.mapping import BookRecord
from shelfmatch.metadata.cache import SearchCache
from shelfmatch.metadata.cover import CoverDownloadError, CoverStore
from shelfmatch.metadata.decision import is_confirmed
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.search import search_metadata
from shelfmatch.metadata.types import (
    BookMetadataState,
    MetadataCandidate,
    MetadataDecision,
    RankedCandidate,
)

logger = logging.getLogger(__name__)

DEFAULT_COVERS_DIR = Path.home() / ".shelfmatch" / "covers"

# Score and query logged when the user picks a candidate explicitly.
_MANUAL_PICK_SCORE = 100.0


class BookNotFoundError(LookupError):
    """Raised when a book id is not in the catalog."""


@dataclass
class SearchOutcome:
    """What a metadata search did for one book.

    ``applied`` is True only when the catalog was updated. The title, author
    and presence flags describe the chosen (or best) candidate, whether or
    not it was applied.
    """

    applied: bool = False
    confirmed: bool = False
    score: float = 0.0
    source: str = ""
    title: str | None = None
    author: str | None = None
    has_description: bool = False
    has_cover: bool = False
    ranked_candidates: list[RankedCandidate] = field(default_factory=list)


class MetadataResolver:
    """Connects the search pipeline to the catalog, flags, covers, and search log."""

    def __init__(
        self,
        catalog: LibraryCatalog,
        sources: list[MetadataSource],
        covers: CoverStore,
        cache: SearchCache | None = None,
    ) -> None:
        self._catalog = catalog
        self._sources = sources
        self._covers = covers
        self._cache = cache

    def _require_book(self, book_id: int) -> BookRecord:
        book = self._catalog.get_by_id(book_id)
        if book is None:
            raise BookNotFoundError(f"Book with id {book_id} not found")
        return book

    def search(self, book_id: int) -> SearchOutcome:
        """Search metadata for a cataloged book, auto-applying a confident single match.

        Args:
            book_id: Catalog id of the book.

        Returns:
            The outcome. An empty outcome means nothing was found; in that
            case nothing is written or logged.

        Raises:
            BookNotFoundError: If the book does not exist.
        """
        book = self._require_book(book_id)
        chapters = self._catalog.list_chapters(book_id)

        result = search_metadata(
            book.title,
            path=str(book.source_path) if book.source_path else None,
            author=book.author,
            chapter_names=[c.name for c in chapters] or None,
            chapter_paths=[str(c.path) for c in chapters if c.path] or None,
            sources=self._sources,
            cache=self._cache,
        )
        if result is None:
            logger.info("No metadata found for book %d (%r)", book_id, book.title)
            return SearchOutcome()

        decision = result.decision
        if decision is None:
            best = result.ranked_candidates[0]
            decision = MetadataDecision(
                apply=False,
                confirmed=is_confirmed(best.score),
                score=best.score,
                candidate=best.candidate,
            )
            logger.info(
                "Book %d: %d candidates, best %r from %s (%.1f); waiting for a choice",
                book_id,
                len(result.ranked_candidates),
                best.candidate.title,
                best.candidate.source,
                best.score,
            )

        candidate = decision.candidate
        if decision.apply:
            logger.info(
                "Book %d: applying %r from %s (%.1f)",
                book_id,
                candidate.title,
                candidate.source,
                decision.score,
            )
            flags = self._catalog.get_metadata_flags(book_id)
            self._write_candidate(book_id, candidate, flags)

        self._catalog.insert_search_result(
            book_id,
            source=candidate.source,
            source_id=candidate.source_id,
            score=decision.score,
            search_query=result.search_query_used,
            applied=decision.apply,
            confirmed=decision.confirmed,
        )

        return SearchOutcome(
            applied=decision.apply,
            confirmed=decision.confirmed,
            score=decision.score,
            source=candidate.source,
            title=candidate.title,
            author=candidate.author,
            has_description=bool(candidate.description),
            has_cover=bool(candidate.cover_url),
            ranked_candidates=result.ranked_candidates,
        )

    def apply_candidate(self, book_id: int, candidate: MetadataCandidate) -> BookRecord:
        """Apply a candidate the user picked, ignoring manual-edit flags.

        Raises:
            BookNotFoundError: If the book does not exist.
        """
        self._require_book(book_id)
        logger.info("Book %d: user picked %r from %s", book_id, candidate.title, candidate.source)

        self._write_candidate(book_id, candidate, BookMetadataState())
        self._catalog.insert_search_result(
            book_id,
            source=candidate.source,
            source_id=candidate.source_id,
            score=_MANUAL_PICK_SCORE,
            search_query="",
            applied=True,
            confirmed=True,
        )
        return self._require_book(book_id)

    def _write_candidate(
        self,
        book_id: int,
        candidate: MetadataCandidate,
        flags: BookMetadataState,
    ) -> None:
        """Copy non-empty candidate fields whose manual-edit flag is clear."""
        fields: dict[str, str | Path | None] = {}
        if candidate.title and not flags.title_manually_edited:
            fields["title"] = candidate.title
        if candidate.author and not flags.author_manually_edited:
            fields["author"] = candidate.author
        if candidate.description and not flags.description_manually_edited:
            fields["description"] = candidate.description
        if candidate.cover_url and not flags.cover_manually_edited:
            try:
                fields["cover_path"] = self._covers.download(candidate.cover_url, str(book_id))
            except CoverDownloadError as exc:
                logger.warning("Book %d: keeping current cover: %s", book_id, exc)

        self._catalog.update_book(book_id, **fields)
