# ABOUTME: End-to-end metadata search for one book: variations, fan-out, scoring, ranking.
# ABOUTME: Returns a ranked SearchResult with an optional auto-apply decision.

import logging

from shelfmatch.metadata.aggregator import FanOutAggregator
from shelfmatch.metadata.cache import SearchCache
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.ranking import build_decision, rank_candidates
from shelfmatch.metadata.scoring import ScoreContext, score_candidate
from shelfmatch.metadata.types import SearchResult
from shelfmatch.metadata.variations import generate_variations

logger = logging.getLogger(__name__)


def search_metadata(
    title: str,
    path: str | None = None,
    author: str | None = None,
    chapter_names: list[str] | None = None,
    chapter_paths: list[str] | None = None,
    *,
    sources: list[MetadataSource],
    cache: SearchCache | None = None,
) -> SearchResult | None:
    """Search all sources for metadata matching a book.

    Every candidate is scored against the original title and author, no
    matter which variation found it.

    Args:
        title: The book's current title.
        path: The book's file or folder path, used for extra variations.
        author: The book's current author, if known.
        chapter_names: Chapter names in reading order.
        chapter_paths: Chapter file paths in reading order.
        sources: Sources to query, in registration order.
        cache: Optional result cache.

    Returns:
        The ranked result, or None when no variation could be built or
        nothing scored high enough to be shown.
    """
    variations = generate_variations(
        title,
        path=path,
        author=author,
        chapter_names=chapter_names,
        chapter_paths=chapter_paths,
    )
    if not variations:
        logger.info("No searchable variation for %r", title)
        return None

    logger.info("Searching %d variations for %r", len(variations), title)
    found = FanOutAggregator(sources, cache=cache).collect(variations)

    context = ScoreContext.from_search(title, path)
    scored = [
        (candidate, score_candidate(candidate, title, author, context))
        for candidate, _query in found
    ]
    ranked = rank_candidates(scored)
    if not ranked:
        logger.info("No candidate scored high enough for %r", title)
        return None

    decision = build_decision(ranked)
    logger.info(
        "Best match for %r: %s (%s, %.1f)%s",
        title,
        ranked[0].candidate.title,
        ranked[0].candidate.source,
        ranked[0].score,
        ", auto-apply" if decision and decision.apply else "",
    )
    return SearchResult(
        ranked_candidates=ranked,
        search_query_used=variations[0],
        decision=decision,
    )
